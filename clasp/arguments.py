r"""
Clasp leaf parsers: named options/flags and positional arguments.

Overview
- Opt: named option with one or more aliases (e.g., -o/--output).
  • Without a hint it is a flag: presence-only, e.g. -v/--verbose, bound to a
    boolean target.
  • With a hint it takes a value, inline (--output=path) or as the next argument
    (--output path).
- Arg: positional, value-bearing argument matching one value token.

Both are BoundParsers: their matches are written into a Ref, appended to a container,
or passed to a callback (see clasp.bindings).

Outcomes (see clasp.parsers for the contract)
- Opt reports no-match unless the current token is an option spelled like one of its
  names (prefix included, so "-o" and "/o" are different names).
- A flag given an inline value (-v=1) is a flag-assignment error.
- A valued option without a following value token is a missing-value error.
- A value the binding cannot convert is an uncastable-value error; the error position is
  past the option and its value.
- An empty inline value (--output=) is accepted with an EmptyValueWarning.

Quick example:
    >>> threads = Ref(1)
    >>> files = []
    >>> parser = Group(
    ...     Opt(threads, "-t", "--threads", hint="N").describe("worker count"),
    ...     Arg(files, "FILE"),
    ... )
    >>> parser.parse("prog -t 4 a.txt b.txt").ok
    True
    >>> threads.value, files
    (4, ['a.txt', 'b.txt'])
"""
import copy
import re

from .faults import FaultCode, FlagAssignmentError, MissingValueError, EmptyValueWarning, InvalidStructureError, trigger
from .parsers import BoundParser, HelpItem
from .results import Result, ParseState
from .tokens import DefaultCustomization, TokenType
from .utils import Unset, ordinal


def _sanitize_names(cls, names, /):
    """
    Validate option aliases: at least one, strings, non-empty, no whitespace, no duplicates.

    Order is preserved (the first name is the one shown in usage text).
    """
    sanitized = []
    if not names:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.search(r"\s", name):
            raise ValueError(f"{cls.__typename__} names cannot contain whitespace")
        elif name in sanitized:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        sanitized.append(name)
    return sanitized


class Opt(BoundParser):
    """
    Named option or flag.

    Parameters
    - target: Ref | mutable container | callable
      Where matched values go.
    - names: one or more str
      Aliases, spelled with their prefix ("-o", "--output", or "/o" under a custom prefix).
    - hint: Unset | str
      Value label for usage text. Omitted for flags, whose target must be boolean
      (a bool Ref or container, type=bool, or a callback without parameters).
    - type: Callable
      Converter overriding the one inferred from the target.
    """
    __introspectable__ = ("names", "hint", "description")

    def __init__(self, target, /, *names, hint=Unset, type=Unset):
        super().__init__(target, hint, type=type)
        self._names = _sanitize_names(self.__class__, names)
        if self.flag and not self._binding.flag:
            raise TypeError(
                f"{self.__typename__} without a hint is a flag; bind it to a bool target "
                f"(Ref(False), type=bool, or a callback without parameters) or give it a hint"
            )

    @property
    def flag(self):
        return not self._hint

    def validate(self, customization=Unset, /):
        """
        Every name must be spelled as an option under the customization (default one
        when omitted): a prefix character followed by something else than prefixes and
        delimiters. Names failing that could never match.
        """
        if customization is Unset:
            customization = DefaultCustomization()
        prefix = customization.option_prefix()
        delimiters = customization.token_delimiters()

        for name in self._names:
            if name[0] not in prefix or not name.lstrip(prefix) or set(name) & set(delimiters):
                return Result.failure(InvalidStructureError(
                    "option name %r must start with one of %r and contain no delimiters" % (name, prefix),
                    title="invalid option name",
                    code=FaultCode.INVALID_STRUCTURE,
                    hint="spell it like %s" % (prefix[0] + "name"),
                    option=name,
                ))
        return Result.success()

    def __parse__(self, program, tokens, customization):
        if not tokens.has(TokenType.OPTION) or tokens.current.option not in self._names:
            return ParseState.no_match(tokens)

        token = tokens.current
        remaining = tokens.advance()
        position = ordinal(token.index + 1)

        if self.flag:
            if token.split:
                # consume the inline value as part of the bad option
                return ParseState.error(remaining.advance(), FlagAssignmentError(
                    "flag %r at %s position cannot have an inline value" % (token.option, position),
                    title="flag cannot take a value",
                    code=FaultCode.FLAG_ASSIGNMENT,
                    hint="remove everything from %r (for example: %s)" % (token.delimiter, token.option),
                    option=token.option,
                    index=token.index,
                    prog=program,
                ))
            result = self._binding.assign_flag(True)
            if not result:
                return ParseState.error(remaining, result.fault.__replace__(option=token.option, index=token.index, prog=program))
            return ParseState.matched(remaining)

        if not remaining.has(TokenType.VALUE):
            return ParseState.error(remaining, MissingValueError(
                "option %r at %s position expects a value" % (token.option, position),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass it after a space or inline (for example: %s <%s>)" % (token.option, self._hint),
                option=token.option,
                index=token.index,
                prog=program,
            ))

        value = remaining.current
        remaining = remaining.advance()

        if token.split and not value.name:
            trigger(EmptyValueWarning(
                "empty inline value for option %r at %s position" % (token.option, position),
                title="empty inline value",
                code=FaultCode.EMPTY_INLINE_VALUE,
                hint="add a value after %r (for example: %s%s<%s>)" % (
                    token.delimiter, token.option, token.delimiter, self._hint
                ),
                option=token.option,
                index=token.index,
                prog=program,
            ))

        result = self._binding.assign(value.name)
        if not result:
            return ParseState.error(remaining, result.fault.__replace__(option=token.option, index=token.index, prog=program))
        return ParseState.matched(remaining)

    def usage_text(self):
        names = "|".join(self._names)
        return names if self.flag else "%s <%s>" % (names, self._hint)

    def help_text(self):
        names = ", ".join(self._names)
        return [HelpItem(names if self.flag else "%s <%s>" % (names, self._hint), self._description)]

    def clone(self):
        other = copy.copy(self)
        other._names = list(self._names)
        return other


class Arg(BoundParser):
    """
    Positional argument: matches one value token.

    Bound to a container it repeats (cardinality (0, UNBOUNDED)), so inside a Group it
    collects every remaining value.
    """
    __introspectable__ = ("hint", "description")

    def __init__(self, target, hint, /, *, type=Unset):
        super().__init__(target, hint, type=type)

    def __parse__(self, program, tokens, customization):
        if not tokens.has(TokenType.VALUE):
            return ParseState.no_match(tokens)

        value = tokens.current
        remaining = tokens.advance()
        result = self._binding.assign(value.name)
        if not result:
            return ParseState.error(remaining, result.fault.__replace__(argument=self._hint, index=value.index, prog=program))
        return ParseState.matched(remaining)

    def usage_text(self):
        return "<%s>%s" % (self._hint, "..." if self.cardinality().unbounded else "")

    def help_text(self):
        return [HelpItem("<%s>" % self._hint, self._description)]


__all__ = (
    "Opt",
    "Arg",
)
