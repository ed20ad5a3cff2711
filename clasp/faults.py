"""
Clasp faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing parse issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent and
  make logs/searches predictable.
- ParseError / ParseWarning: base types that carry message + options and know how
  to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Faults as values
- Parsers never raise for expected outcomes. An error ParseState carries a ParseError
  instance that was built but not raised; ParseResult.unwrap() (or trigger()) is where
  it is finally raised or printed.

Integration
- Leaf and composite parsers build faults with a title, a code and a single hint.
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich.
"""
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parsers (stable identifiers).

    grouping (by high-level domain)
    - tokens (1110x)
      • UNKNOWN_TOKEN
    - options (1111x)
      • MISSING_VALUE, FLAG_ASSIGNMENT, UNCASTABLE_VALUE
    - cardinality (1112x)
      • TOO_FEW_OCCURRENCES, TOO_MANY_OCCURRENCES
    - callbacks (1113x)
      • CALLBACK_FAILURE
    - structure (1114x)
      • INVALID_STRUCTURE
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE
    """
    # --- token errors (11xxx) ---
    UNKNOWN_TOKEN               = 11101

    # --- option errors (11xxx) ---
    MISSING_VALUE               = 11111
    FLAG_ASSIGNMENT             = 11112
    UNCASTABLE_VALUE            = 11113

    # --- cardinality errors (11xxx) ---
    TOO_FEW_OCCURRENCES         = 11121
    TOO_MANY_OCCURRENCES        = 11122

    # --- delegated errors (11xxx) ---
    CALLBACK_FAILURE            = 11131

    # --- structural errors (11xxx) ---
    INVALID_STRUCTURE           = 11141

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, message, styles, kind):
    main = __import__("__main__")
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)
    styles = defaultdict(str, styles | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", fault.options.get("prog", "clasp")), styler("prog-name"))
    code = fault.options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if code is not None else "?", styler("code")),
        " | ",
        text(str(fault.options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    body = text(message, styler(kind + "-message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(fault.options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(body, hint), title=header, title_align="left")
    return Group(header, body, hint)


class ParseError(Exception):
    """
    a parse fault: recognized input that could not be decoded, a violated
    cardinality, or a structural problem found by validate().

    the message is positional-only; every other detail (code, title, hint, token,
    index, prog, colorful, fancy, shell) lives in the read-only `options` mapping.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, self.message, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownTokenError(ParseError): ...
class MissingValueError(ParseError): ...
class FlagAssignmentError(ParseError): ...
class UncastableValueError(ParseError): ...
class TooFewOccurrencesError(ParseError): ...
class TooManyOccurrencesError(ParseError): ...
class CallbackError(ParseError): ...
class InvalidStructureError(ParseError): ...


class ParseWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, self.message, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, errors are raised
      and warnings go through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys are
    FaultCode instances and values are short documentation strings. when not found,
    returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "UnknownTokenError",
    "MissingValueError",
    "FlagAssignmentError",
    "UncastableValueError",
    "TooFewOccurrencesError",
    "TooManyOccurrencesError",
    "CallbackError",
    "InvalidStructureError",
    "ParseWarning",
    "EmptyValueWarning",
    "trigger",
    "getdoc",
)
