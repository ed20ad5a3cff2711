"""
Clasp composite parsers: parsers built out of ordered child parsers.

- Alternatives(a, b, ...), also spelled `a | b | ...`: one-of. Children are tried in
  order at the same position; the first match wins, the first error is propagated,
  and no-match is reported only when every child reports no-match.
- Group(a, b, ...): repeatedly offers the current position to its children until a
  round matches nothing, counting matches per child against its cardinality.
  • a child whose maximum is reached is skipped;
  • if such a child is the only one that would match, it is a too-many error;
  • after the loop, children below their minimum make a too-few error.
  A Group is matched when it consumed tokens, no-match otherwise.

Composites never touch bindings themselves. Every position they try is a TokenIterator
value, so siblings are all offered the same position after a no-match.
"""
from .faults import FaultCode, InvalidStructureError, TooFewOccurrencesError, TooManyOccurrencesError
from .parsers import UNBOUNDED, Cardinality, ComposableParser, Parser
from .results import Result, ParseState, ParseType
from .utils import Unset, ordinal


def _label(parser):
    return parser.usage_text() or parser.__typename__


class _Composite(ComposableParser):
    __introspectable__ = ("parsers",)
    __cloneable__ = True

    def __init__(self, *parsers):
        for parser in parsers:
            if not isinstance(parser, Parser):
                raise TypeError(f"{self.__typename__} children must be parsers")
        self._parsers = list(parsers)

    def add(self, parser, /):
        """append a child parser; returns self."""
        if not isinstance(parser, Parser):
            raise TypeError(f"{self.__typename__} children must be parsers")
        self._parsers.append(parser)
        return self

    def validate(self, customization=Unset, /):
        if not self._parsers:
            return Result.failure(InvalidStructureError(
                f"{self.__typename__} has no parsers",
                title="empty composite",
                code=FaultCode.INVALID_STRUCTURE,
                hint="add at least one parser to it",
            ))
        for parser in self._parsers:
            if not (result := parser.validate(customization)):
                return result
        return Result.success()

    def help_text(self):
        return [item for parser in self._parsers for item in parser.help_text()]

    def clone(self):
        """a composite of cloned children, or None when one child is not cloneable."""
        if not all(type(parser).__cloneable__ for parser in self._parsers):
            return None
        parsers = [parser.clone() for parser in self._parsers]
        if any(parser is None for parser in parsers):
            return None
        return type(self)(*parsers)


class Alternatives(_Composite):
    """
    One-of composite: the first child that matches at the position wins.

    Its cardinality is as permissive as its children: the smallest minimum, and the sum
    of the maxima (unbounded if any child is).
    """

    def __parse__(self, program, tokens, customization):
        for parser in self._parsers:
            state = parser.__parse__(program, tokens, customization)
            if state.type is not ParseType.NO_MATCH:
                return state
        return ParseState.no_match(tokens)

    def cardinality(self):
        cardinalities = [parser.cardinality() for parser in self._parsers]
        if not cardinalities:
            return Cardinality(0, 1)
        if any(cardinality.unbounded for cardinality in cardinalities):
            maximum = UNBOUNDED
        else:
            maximum = sum(cardinality.maximum for cardinality in cardinalities)
        return Cardinality(min(cardinality.minimum for cardinality in cardinalities), maximum)

    def usage_text(self):
        return "(%s)" % " | ".join(filter(None, (parser.usage_text() for parser in self._parsers)))

    def __or__(self, other, /):
        if not isinstance(other, Parser):
            return NotImplemented
        return Alternatives(*self._parsers, other)


class Group(_Composite):
    """
    Repeating composite enforcing each child's cardinality.

    Typical top-level parser: options and positionals in any order,
        Group(Opt(verbose, "-v"), Opt(level, "-l", hint="N").required(), Arg(files, "FILE"))

    As a child of another composite it counts as one occurrence, required when any of
    its own children is.
    """

    def __parse__(self, program, tokens, customization):
        counts = [0] * len(self._parsers)
        remaining = tokens

        while remaining:
            for index, parser in enumerate(self._parsers):
                if not parser.cardinality().allows(counts[index]):
                    continue
                state = parser.__parse__(program, remaining, customization)
                if state.type is ParseType.ERROR:
                    return state
                if state.type is ParseType.MATCHED:
                    counts[index] += 1
                    break
            else:
                break
            if state.remaining == remaining:
                # zero-width match: stop instead of looping on the same position
                break
            remaining = state.remaining

        if remaining:
            for index, parser in enumerate(self._parsers):
                if parser.cardinality().allows(counts[index]):
                    continue
                # probing writes to the binding again
                state = parser.__parse__(program, remaining, customization)
                if state.type is ParseType.MATCHED and state.remaining != remaining:
                    maximum = parser.cardinality().maximum
                    return ParseState.error(state.remaining, TooManyOccurrencesError(
                        "%s given more than %d time%s (again at %s position)" % (
                            _label(parser), maximum, "s" * (maximum != 1), ordinal(remaining.current.index + 1)
                        ),
                        title="too many occurrences",
                        code=FaultCode.TOO_MANY_OCCURRENCES,
                        hint="pass %s at most %d time%s" % (_label(parser), maximum, "s" * (maximum != 1)),
                        prog=program,
                    ))

        for index, parser in enumerate(self._parsers):
            minimum = parser.cardinality().minimum
            if counts[index] < minimum:
                return ParseState.error(remaining, TooFewOccurrencesError(
                    "expected %s at least %d time%s but got %d" % (
                        _label(parser), minimum, "s" * (minimum != 1), counts[index]
                    ),
                    title="too few occurrences",
                    code=FaultCode.TOO_FEW_OCCURRENCES,
                    hint="add %s to the command line" % _label(parser),
                    prog=program,
                ))

        if remaining == tokens:
            return ParseState.no_match(tokens)
        return ParseState.matched(remaining)

    def cardinality(self):
        return Cardinality(int(any(parser.cardinality().required for parser in self._parsers)), 1)

    def usage_text(self):
        usages = []
        for parser in self._parsers:
            if not (usage := parser.usage_text()):
                continue
            usages.append(usage if parser.cardinality().required else "[%s]" % usage)
        return " ".join(usages)


__all__ = (
    "Alternatives",
    "Group",
)
