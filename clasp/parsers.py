"""
Clasp parser contract: the polymorphic unit every parser implements.

Overview
- Cardinality(minimum, maximum): how many times a parser may match in one parse pass.
  maximum == UNBOUNDED (0) means "any number of times, at least minimum".
- Parser: abstract base. Subclasses implement __parse__(program, tokens, customization)
  and return a ParseState that is one of
  • matched:  tokens consumed, remaining is past them;
  • no-match: input does not belong to this parser, remaining is unchanged;
  • error:    input was recognized but is invalid, remaining is past the bad tokens.
  Parser.parse(arguments, customization) is the convenience entry point around it.
- ComposableParser: parsers meant to be combined (see clasp.composites).
- BoundParser: a composable parser writing into a caller's Ref/container/callback,
  with a hint, a description and fluent cardinality configuration.

Composition rule
- A composite tries its children in order at the same position: the first match wins,
  the first error is propagated, and it reports no-match only when all children do.
  `a | b` builds such a one-of composite.

Side effects
- Bindings are written while parsing. After a failed parse, which bindings were touched
  is unspecified and nothing is rolled back. Parsers sharing a binding must not be used
  concurrently or reentrantly.

Quick example
    >>> verbose = Ref(False)
    >>> parser = Opt(verbose, "-v", "--verbose").describe("talk more")
    >>> parser.parse(["prog", "--verbose"]).ok, verbose.value
    (True, True)
"""
import copy
import re
from abc import ABCMeta, abstractmethod
from typing import NamedTuple

from .bindings import bind
from .results import Result, ParseResult, ParseState
from .tokens import Arguments, DefaultCustomization, TokenIterator
from .utils import Unset, coalesce, mirror

UNBOUNDED = 0


class Cardinality(NamedTuple):
    """
    (minimum, maximum) match counts; maximum == UNBOUNDED means no upper bound.
    """
    minimum: int
    maximum: int

    @classmethod
    def of(cls, minimum, maximum, /):
        """validated constructor; raises TypeError/ValueError on bad bounds."""
        for bound in (minimum, maximum):
            if not isinstance(bound, int) or isinstance(bound, bool):
                raise TypeError("cardinality bounds must be integers")
            if bound < 0:
                raise ValueError("cardinality bounds cannot be negative")
        if maximum != UNBOUNDED and minimum > maximum:
            raise ValueError("cardinality minimum (%d) exceeds maximum (%d)" % (minimum, maximum))
        return cls(minimum, maximum)

    @property
    def unbounded(self):
        return self.maximum == UNBOUNDED

    @property
    def optional(self):
        return self.minimum == 0 and self.maximum > 0

    @property
    def required(self):
        return self.minimum > 0

    @property
    def span(self):
        """maximum - minimum; undefined (ValueError) for unbounded cardinalities."""
        if self.unbounded:
            raise ValueError("unbounded cardinality has no count")
        return self.maximum - self.minimum

    def allows(self, matches, /):
        """True when one more match is still within the maximum."""
        return self.unbounded or matches < self.maximum


class HelpItem(NamedTuple):
    option: str
    description: str


class ParserType(ABCMeta):
    """
    Metaclass for parsers.

    - derives __typename__ from the class name ("BoundParser" -> "bound-parser") for
      messages and representations;
    - publishes read-only properties (see mirror()) for every name a class lists in
      its own __introspectable__, backed by "_{name}" attributes.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        return super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )


class Parser(metaclass=ParserType):
    """
    Base for all argument parser types.

    Subclasses must implement __parse__. Everything else has a usable default:
    cardinality (0, 1), successful validation, empty usage/help, and no cloning.
    """
    __introspectable__ = ()
    __cloneable__ = False

    def validate(self, customization=Unset, /):
        """
        Structural sanity check, independent of any input. Call once before the first
        parse; returns a Result whose failure explains the problem.
        """
        return Result.success()

    @abstractmethod
    def __parse__(self, program, tokens, customization):
        """
        Consume a matching prefix of `tokens` (a TokenIterator) and return a ParseState.
        """

    def cardinality(self):
        return Cardinality(0, 1)

    def cardinality_count(self):
        """maximum - minimum; raises ValueError when unbounded (check that first)."""
        return self.cardinality().span

    def is_optional(self):
        return self.cardinality().optional

    def usage_text(self):
        return ""

    def help_text(self):
        return []

    def clone(self):
        """
        A copy usable in another composite, or None when not cloneable.

        Kinds that can clone set __cloneable__ = True and override this method.
        """
        return None

    def parse(self, arguments, customization=Unset, /):
        """
        Parse raw arguments and return a ParseResult.

        `arguments` is an Arguments instance, or an argv-like iterable / shell string
        whose first item is the program name. Without a customization the
        DefaultCustomization applies.

        Bound variables are updated and callbacks invoked during this call. When the
        result is a failure, which of them were touched is unspecified.
        """
        if not isinstance(arguments, Arguments):
            arguments = Arguments.from_argv(arguments)
        if customization is Unset:
            customization = DefaultCustomization()
        state = self.__parse__(arguments.program, TokenIterator(arguments, customization), customization)
        if not isinstance(state, ParseState):
            raise TypeError("%s.__parse__() must return a ParseState" % type(self).__name__)
        return ParseResult(state)

    def __or__(self, other, /):
        if not isinstance(other, Parser):
            return NotImplemented
        from .composites import Alternatives
        return Alternatives(self, other)

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__typename__,
            ", ".join("%s=%r" % item for item in self.__rich_repr__())
        )

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class ComposableParser(Parser):
    """
    Marker base for parsers meant to be combined into composites.

    New leaf or composite kinds are added by subclassing; composites only rely on the
    Parser contract (validate, cardinality, __parse__), never on concrete kinds.
    """


class BoundParser(ComposableParser):
    """
    Common code and state for parsers that write their matches into a binding.

    The binding is picked from the target (see clasp.bindings.bind): a Ref, a mutable
    container or a callable. Container targets default to (0, UNBOUNDED) occurrences,
    everything else to (0, 1).

    Builder methods (describe, optional, required, cardinality(n[, m])) mutate this
    instance and return it. Configure before the first parse; changing them after the
    parser has been used or composed is unspecified behavior.
    """
    __introspectable__ = ("hint", "description")
    __cloneable__ = True

    def __init__(self, target, hint=Unset, /, *, type=Unset):
        if not isinstance(hint, str | Unset):
            raise TypeError(f"{self.__typename__} 'hint' must be a string")
        elif isinstance(hint, str) and not (hint := hint.strip()):
            raise ValueError(f"{self.__typename__} 'hint' cannot be empty")

        self._binding = bind(target, type)
        self._hint = coalesce(hint, "")
        self._description = ""
        self._cardinality = Cardinality(0, UNBOUNDED) if self._binding.container else Cardinality(0, 1)

    @property
    def binding(self):
        return self._binding

    def describe(self, description, /):
        if not isinstance(description, str):
            raise TypeError(f"{self.__typename__} 'description' must be a string")
        self._description = description.strip()
        return self

    def optional(self):
        return self.cardinality(0, 1)

    def required(self):
        return self.cardinality(1, 1)

    def cardinality(self, minimum=Unset, maximum=Unset, /):
        """
        cardinality()     -> current Cardinality
        cardinality(n)    -> exactly n occurrences (n == 0 means unbounded); returns self
        cardinality(n, m) -> between n and m occurrences; returns self
        """
        if minimum is Unset:
            return self._cardinality
        self._cardinality = Cardinality.of(minimum, coalesce(maximum, minimum))
        return self

    def clone(self):
        # clones share the binding: both write to the caller's storage
        return copy.copy(self)


__all__ = (
    "UNBOUNDED",
    "Cardinality",
    "HelpItem",
    "Parser",
    "ComposableParser",
    "BoundParser",
)
