"""
Clasp results: success/failure wrappers and the three-way parse state.

- Result: ok or failed with a fault (a ParseError instance, never raised here).
- ParseType: MATCHED, NO_MATCH or ERROR, the outcome of one parser attempt.
- ParseState: a ParseType plus the token position after the attempt.
- ParseResult: the Result returned by Parser.parse(); it wraps the final ParseState
  and is ok unless that state is an error.

Expected parsing outcomes are values. Callers inspect them (bool(result), result.state)
or call unwrap() to turn a failure into a raised ParseError.
"""
from enum import Enum
from typing import NamedTuple

from .faults import FaultCode, ParseError, UnknownTokenError
from .utils import ordinal


def _fault(fault):
    if isinstance(fault, str):
        return ParseError(fault)
    if not isinstance(fault, ParseError):
        raise TypeError("fault must be a ParseError instance or a message string")
    return fault


class Result:
    """
    Outcome of an operation that can fail with a user-facing message.

    bool(result) is True on success; result.message is "" on success.
    """
    __slots__ = ("_fault",)

    def __init__(self, fault=None, /):
        self._fault = fault if fault is None else _fault(fault)

    @classmethod
    def success(cls):
        return cls()

    @classmethod
    def failure(cls, fault, /):
        return cls(fault)

    @property
    def ok(self):
        return self._fault is None

    @property
    def fault(self):
        return self._fault

    @property
    def message(self):
        return "" if self._fault is None else str(self._fault.message)

    def unwrap(self, **options):
        """raise the fault (merged with options) when failed; return self otherwise."""
        if self._fault is not None:
            raise self._fault.__replace__(**options)
        return self

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return "%s(ok)" % type(self).__name__
        return "%s(error=%r)" % (type(self).__name__, self.message)


class ParseType(Enum):
    MATCHED = "matched"
    NO_MATCH = "no-match"
    ERROR = "error"


class ParseState(NamedTuple):
    """
    Where one parser attempt left the token stream and how it went.

    - MATCHED: remaining is past the consumed tokens.
    - NO_MATCH: remaining is exactly the position the attempt started from.
    - ERROR: remaining is past the recognized-but-invalid tokens; fault explains why.
    """
    type: ParseType
    remaining: object
    fault: ParseError | None = None

    @classmethod
    def matched(cls, remaining, /):
        return cls(ParseType.MATCHED, remaining)

    @classmethod
    def no_match(cls, remaining, /):
        return cls(ParseType.NO_MATCH, remaining)

    @classmethod
    def error(cls, remaining, fault, /):
        return cls(ParseType.ERROR, remaining, _fault(fault))

    @property
    def message(self):
        return "" if self.fault is None else str(self.fault.message)


class ParseResult(Result):
    """
    Result of a whole parse: ok unless the final state is an error.

    A no-match is still ok; whether leftover tokens are acceptable is for the caller
    (check result.remaining, or call exhausted()).
    """
    __slots__ = ("_state",)

    def __init__(self, state, /):
        if not isinstance(state, ParseState):
            raise TypeError("ParseResult() argument must be a ParseState")
        if state.type is ParseType.ERROR:
            super().__init__(state.fault or ParseError("unspecified parse error"))
        else:
            super().__init__()
        self._state = state

    @property
    def state(self):
        return self._state

    @property
    def type(self):
        return self._state.type

    @property
    def remaining(self):
        return self._state.remaining

    @property
    def matched(self):
        return self._state.type is ParseType.MATCHED

    def exhausted(self, **options):
        """
        Reject leftover tokens.

        Returns self when it failed already or consumed everything; otherwise a failed
        ParseResult whose fault names the first argument nobody recognized, positioned
        past that token.
        """
        remaining = self._state.remaining
        if not self.ok or not remaining:
            return self
        token = remaining.current
        return ParseResult(ParseState.error(remaining.advance(), UnknownTokenError(
            "unknown %s %r at %s position" % (token.type.value, token.option, ordinal(token.index + 1)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_TOKEN,
            hint="remove it or check its spelling",
            token=token.option,
            index=token.index,
            prog=remaining.arguments.program,
        ).__replace__(**options)))

    def __repr__(self):
        if self.ok:
            return "ParseResult(%s, remaining=%r)" % (self.type.value, self.remaining)
        return "ParseResult(error=%r, remaining=%r)" % (self.message, self.remaining)


__all__ = (
    "Result",
    "ParseType",
    "ParseState",
    "ParseResult",
)
