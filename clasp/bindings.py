"""
Clasp bindings: where matched values go.

A bound parser never stores what it parses; it hands the text to a binding, which
converts it and writes it into storage owned by the caller. Three kinds exist and the
right one is picked from the target's capabilities by bind():

- Ref (single-value holder)      → ValueBinding: overwrite ref.value.
- mutable sequence / mutable set → ContainerBinding: append / add each value.
- callable                       → CallbackBinding: call it with the value.

Converters
- explicit `type=` wins; otherwise the type of the Ref's initial value, the type of the
  container's first element, or the annotation of the callback's first parameter;
  str when nothing better is known.
- bool converts "true/yes/on/1" and "false/no/off/0" (any case). A bool binding makes
  a presence-only flag.

Lifetime
- The caller's storage must outlive every parser bound to it. Parsers sharing a binding
  (e.g. clones) write to the same storage; do not parse with them concurrently.
"""
import builtins
import inspect
from abc import ABC, abstractmethod
from collections.abc import MutableSequence, MutableSet

from .faults import FaultCode, UncastableValueError, CallbackError
from .results import Result
from .utils import Unset, coalesce

_BOOLEANS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


def convert(text, type=str, /):
    """
    Convert one textual value with the given converter.

    Raises ValueError/TypeError from the converter; bool uses the table above.
    """
    if type is bool:
        try:
            return _BOOLEANS[text.strip().lower()]
        except KeyError:
            raise ValueError("%r is not a boolean (expected true/false, yes/no, on/off, 1/0)" % text) from None
    return type(text)


def _typename(type):
    return getattr(type, "__name__", repr(type))


class Ref:
    """
    Single-value holder to bind a parser to.

        >>> count = Ref(1)
        >>> count.value
        1

    The converter defaults to the type of the initial value (str when omitted).
    """
    __slots__ = ("value", "type")

    def __init__(self, value=Unset, /, *, type=Unset):
        if type is Unset:
            type = builtins.type(value) if value is not Unset and value is not None else str
        if not callable(type):
            raise TypeError("Ref() 'type' must be callable")
        self.value = coalesce(value)
        self.type = type

    def __repr__(self):
        return "Ref(%r, type=%s)" % (self.value, _typename(self.type))


class Binding(ABC):
    """
    Type-erased handle to the caller's storage.

    container
        True when the target accumulates values (drives the unbounded default cardinality).
    flag
        True when the target is boolean (the bound option takes no value).
    assign(text)
        convert text and store it; returns a Result (failure carries the fault).
    assign_flag(value=True)
        store a flag occurrence.
    """
    container = False

    def __init__(self, type):
        if not callable(type):
            raise TypeError("binding 'type' must be callable")
        self.type = type

    @property
    def flag(self):
        return self.type is bool

    @abstractmethod
    def _store(self, value): ...

    def assign(self, text, /):
        try:
            value = convert(text, self.type)
        except (ValueError, TypeError) as exception:
            return Result.failure(UncastableValueError(
                "cannot convert %r to %s" % (text, _typename(self.type)),
                title="uncastable value",
                code=FaultCode.UNCASTABLE_VALUE,
                hint=str(exception) or "check the expected type of this value",
                value=text,
            ))
        return self._store(value)

    def assign_flag(self, value=True, /):
        return self._store(value)


class ValueBinding(Binding):
    def __init__(self, ref, type=Unset):
        super().__init__(coalesce(type, ref.type))
        self.ref = ref

    def _store(self, value):
        self.ref.value = value
        return Result.success()

    def __repr__(self):
        return "ValueBinding(%r)" % self.ref


class ContainerBinding(Binding):
    container = True

    def __init__(self, container, type=Unset):
        if type is Unset:
            type = builtins.type(next(iter(container))) if container else str
        super().__init__(type)
        self.target = container

    def _store(self, value):
        if isinstance(self.target, MutableSet):
            self.target.add(value)
        else:
            self.target.append(value)
        return Result.success()

    def __repr__(self):
        return "ContainerBinding(%r)" % (self.target,)


def _parameters(callback):
    try:
        signature = inspect.signature(callback, eval_str=True)
    except (NameError, TypeError, ValueError):
        try:
            signature = inspect.signature(callback)
        except (TypeError, ValueError):
            return Unset
    return [
        parameter for parameter in signature.parameters.values()
        if parameter.kind in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD)
    ]


class CallbackBinding(Binding):
    """
    Invokes a callback with each converted value.

    A callback may return a Result to reject the value, or raise ValueError; both become
    a CallbackError fault. Any other exception propagates. Callbacks without positional
    parameters are flag callbacks and are called with no arguments.
    """

    def __init__(self, callback, type=Unset):
        parameters = _parameters(callback)
        self.nullary = parameters is not Unset and not parameters
        if type is Unset:
            if self.nullary:
                type = bool
            elif parameters and parameters[0].annotation is not inspect.Parameter.empty \
                    and callable(parameters[0].annotation):
                type = parameters[0].annotation
            else:
                type = str
        super().__init__(type)
        self.callback = callback

    def _store(self, value):
        try:
            outcome = self.callback() if self.nullary else self.callback(value)
        except ValueError as exception:
            return Result.failure(CallbackError(
                str(exception) or "value %r was rejected" % (value,),
                title="rejected value",
                code=FaultCode.CALLBACK_FAILURE,
                hint="check the accepted values for this argument",
                value=value,
            ))
        if isinstance(outcome, Result):
            return outcome
        return Result.success()

    def __repr__(self):
        return "CallbackBinding(%r)" % (self.callback,)


def bind(target, /, type=Unset):
    """
    Build the binding matching the target's capabilities.

    Raises TypeError for targets that are none of Ref, mutable container or callable
    (plain values cannot be written back to; wrap them in Ref).
    """
    if isinstance(target, Binding):
        return target
    if isinstance(target, Ref):
        return ValueBinding(target, type)
    if isinstance(target, MutableSequence | MutableSet):
        return ContainerBinding(target, type)
    if callable(target):
        return CallbackBinding(target, type)
    raise TypeError("cannot bind to %r; use a Ref, a mutable container or a callable" % (target,))


__all__ = (
    "Ref",
    "Binding",
    "ValueBinding",
    "ContainerBinding",
    "CallbackBinding",
    "bind",
    "convert",
)
