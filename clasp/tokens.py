"""
Clasp raw arguments, lexical customization and the token iterator.

Overview
- Arguments: program name plus the ordered argument strings handed to a parser.
- Customization: the lexical grammar, i.e. which characters split an option from an
  inline value (token delimiters) and which characters mark an option (prefix).
  DefaultCustomization uses " =" and "-", giving "-x"/"--name" and "--name=value".
- Token: one classified unit, an option name or a value.
- TokenIterator: an immutable position in the token stream. advance() returns a new
  iterator, so holding on to an older one is how a parser looks ahead and rolls back.

Tokenization rules
- An argument starting with a prefix character (and not made only of prefix characters)
  is an option. Its leading run of prefix characters becomes the token prefix.
- When the rest of an option contains a delimiter, the argument yields two tokens: the
  option name, then (on the next advance) the value after the first delimiter.
- Anything else, including "", "-" and "--", is a single value token.
- Splitting is lazy: an argument is classified only when the iterator reaches it.
  Classifications are memoized in a bounded cache (see _classify.cache_info()).

Quick example
    >>> tokens = TokenIterator(Arguments("prog", "-x=y", "file"), DefaultCustomization())
    >>> [(token.type.name, token.name) for token in tokens]
    [('OPTION', 'x'), ('VALUE', 'y'), ('VALUE', 'file')]
"""
import functools
import shlex
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple

from .utils import Unset, coalesce


class Arguments:
    """
    Raw input for one parse: the program name and its argument strings.

    Instances are immutable; iterating yields the argument strings (not the program).
    """
    __slots__ = ("_program", "_values")

    def __init__(self, program, /, *values):
        if not isinstance(program, str):
            raise TypeError("Arguments() program name must be a string")
        for value in values:
            if not isinstance(value, str):
                raise TypeError("Arguments() values must be strings")
        object.__setattr__(self, "_program", program)
        object.__setattr__(self, "_values", values)

    @classmethod
    def from_argv(cls, argv=Unset, /):
        """
        Build Arguments from an argv-like source.

        - Unset: use sys.argv.
        - str: shell-like string, split with shlex.split.
        - Iterable[str]: first item is the program name, the rest are arguments.
        """
        if argv is Unset:
            argv = sys.argv
        elif isinstance(argv, str):
            argv = shlex.split(argv)
        elif not isinstance(argv, Iterable):
            raise TypeError("from_argv() argument must be a string or an iterable of strings")
        program, *values = list(argv) or [""]
        return cls(program, *values)

    @property
    def program(self):
        return self._program

    @property
    def values(self):
        return self._values

    def __setattr__(self, name, value, /):
        raise AttributeError("arguments are read-only")

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getitem__(self, index, /):
        return self._values[index]

    def __eq__(self, other, /):
        if not isinstance(other, Arguments):
            return NotImplemented
        return (self._program, self._values) == (other._program, other._values)

    def __hash__(self):
        return hash((self._program, self._values))

    def __repr__(self):
        return "Arguments(%s)" % ", ".join(map(repr, (self._program, *self._values)))


class Customization(ABC):
    """
    Customization interface for the lexical grammar of options.

    token_delimiters()
        characters that split a cli argument into the option and its value.
    option_prefix()
        characters that, single or repeated, mark an argument as an option.

    This is the only extension point for the lexical grammar; supply a subclass (or
    use customization(...)) to parse e.g. Windows-style "/name:value" switches.
    """

    @abstractmethod
    def token_delimiters(self): ...

    @abstractmethod
    def option_prefix(self): ...

    def __eq__(self, other, /):
        if not isinstance(other, Customization):
            return NotImplemented
        return (
            self.token_delimiters() == other.token_delimiters() and
            self.option_prefix() == other.option_prefix()
        )

    def __hash__(self):
        return hash((self.token_delimiters(), self.option_prefix()))

    def __repr__(self):
        return "%s(delimiters=%r, prefix=%r)" % (type(self).__name__, self.token_delimiters(), self.option_prefix())


class DefaultCustomization(Customization):
    """
    Delimiters are space (" ") or equal ("="); the option prefix is dash ("-"),
    resulting in long options with "--" and short options with "-".

    Used whenever a parse is started without an explicit customization.
    """

    def token_delimiters(self):
        return " ="

    def option_prefix(self):
        return "-"


class _Customization(Customization):
    __slots__ = ("_delimiters", "_prefix")

    def __init__(self, delimiters, prefix):
        self._delimiters = delimiters
        self._prefix = prefix

    def token_delimiters(self):
        return self._delimiters

    def option_prefix(self):
        return self._prefix


def customization(delimiters=" =", prefix="-", /):
    """
    Build an ad-hoc customization, e.g. customization(":", "/") for "/out:file".
    """
    return _check(_Customization(delimiters, prefix))


def _check(customization):
    if not isinstance(customization, Customization):
        raise TypeError("customization must be a Customization instance")
    delimiters = customization.token_delimiters()
    prefix = customization.option_prefix()
    if not isinstance(delimiters, str) or not isinstance(prefix, str):
        raise TypeError("customization delimiters and prefix must be strings")
    if not prefix:
        raise ValueError("customization prefix cannot be empty")
    if set(delimiters) & set(prefix):
        raise ValueError("customization delimiters and prefix characters cannot overlap")
    return customization


class TokenType(Enum):
    OPTION = "option"
    VALUE = "value"


class Token(NamedTuple):
    """
    A classified piece of a raw argument.

    - name: option name without its prefix, or the value text.
    - prefix: prefix characters stripped from an option ("-" or "--"), empty for values.
    - delimiter: the character an option was split at, empty when not split.
    - index: position of the raw argument this token came from.
    """
    type: TokenType
    name: str
    prefix: str = ""
    delimiter: str = ""
    index: int = 0

    @property
    def option(self):
        """the option as typed, prefix included (e.g. "--name")."""
        return self.prefix + self.name

    @property
    def raw(self):
        """the slice of the raw argument this token stands for."""
        if self.type is TokenType.OPTION:
            return self.prefix + self.name + self.delimiter
        return self.name

    @property
    def split(self):
        """True when this option carries an inline value in the same raw argument."""
        return bool(self.delimiter)


@functools.lru_cache(maxsize=1024)
def _classify(argument, index, delimiters, prefix):
    name = argument.lstrip(prefix)
    if not argument or argument[0] not in prefix or not name:
        return Token(TokenType.VALUE, argument, index=index),

    lead = argument[:len(argument) - len(name)]
    for position, char in enumerate(name):
        if char in delimiters:
            if not position:
                # nothing between prefix and delimiter ("-=x"): keep it literal
                return Token(TokenType.VALUE, argument, index=index),
            return (
                Token(TokenType.OPTION, name[:position], lead, char, index),
                Token(TokenType.VALUE, name[position + 1:], index=index),
            )
    return Token(TokenType.OPTION, name, lead, index=index),


class TokenIterator:
    """
    Immutable position within the token stream of some Arguments.

    - bool(tokens) tells whether a token is available at this position.
    - tokens.current is that token (IndexError when exhausted).
    - tokens.advance() returns the position after it; self is left untouched.
    - iter(tokens) lazily yields the tokens from this position on, without consuming.

    Equality compares the source and the position, so "the iterator is unchanged"
    is simply `state.remaining == tokens`.
    """
    __slots__ = ("_arguments", "_delimiters", "_prefix", "_index", "_split")

    def __init__(self, arguments, customization=Unset, /):
        if not isinstance(arguments, Arguments):
            raise TypeError("TokenIterator() first argument must be an Arguments instance")
        customization = _check(coalesce(customization, DefaultCustomization()))
        self._arguments = arguments
        self._delimiters = customization.token_delimiters()
        self._prefix = customization.option_prefix()
        self._index = 0
        self._split = False

    def _tokens(self):
        return _classify(self._arguments[self._index], self._index, self._delimiters, self._prefix)

    def _at(self, index, split):
        other = object.__new__(type(self))
        other._arguments = self._arguments
        other._delimiters = self._delimiters
        other._prefix = self._prefix
        other._index = index
        other._split = split
        return other

    @property
    def arguments(self):
        return self._arguments

    @property
    def position(self):
        """(raw argument index, whether the split value half is current)."""
        return self._index, self._split

    @property
    def current(self):
        if not self:
            raise IndexError("token iterator is exhausted")
        return self._tokens()[self._split]

    def has(self, type, /):
        """True when the current token exists and is of the given TokenType."""
        return bool(self) and self.current.type is type

    def advance(self):
        if not self:
            raise IndexError("token iterator is exhausted")
        if not self._split and len(self._tokens()) == 2:
            return self._at(self._index, True)
        return self._at(self._index + 1, False)

    def remaining_arguments(self):
        """raw arguments not yet fully consumed, the current one included."""
        return self._arguments.values[self._index:]

    def __bool__(self):
        return self._index < len(self._arguments)

    def __iter__(self):
        tokens = self
        while tokens:
            yield tokens.current
            tokens = tokens.advance()

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __eq__(self, other, /):
        if not isinstance(other, TokenIterator):
            return NotImplemented
        return (
            self._arguments == other._arguments and
            self._delimiters == other._delimiters and
            self._prefix == other._prefix and
            self.position == other.position
        )

    def __hash__(self):
        return hash((self._arguments, self._delimiters, self._prefix, self.position))

    def __repr__(self):
        return "TokenIterator(%r, position=%r)" % (self._arguments, self.position)


__all__ = (
    "Arguments",
    "Customization",
    "DefaultCustomization",
    "customization",
    "TokenType",
    "Token",
    "TokenIterator",
)
