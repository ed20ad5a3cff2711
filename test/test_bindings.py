"""
Bindings module behavioral tests (Ref, conversion and the three binding kinds).

Scope
- Validate converter inference from Refs, containers and callback annotations.
- Validate boolean conversion and uncastable values.
- Validate bind() dispatch and its rejection of unbindable targets.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from clasp import (
    CallbackBinding,
    ContainerBinding,
    Ref,
    Result,
    ValueBinding,
    bind,
    convert,
)
from clasp.faults import CallbackError, FaultCode, UncastableValueError


class TestConvert(TestCase):
    """Behavioral tests for textual conversion."""

    def testBooleans(self):
        for text in ("true", "YES", "On", "1"):
            self.assertIs(convert(text, bool), True)
        for text in ("false", "no", "OFF", "0"):
            self.assertIs(convert(text, bool), False)

    def testBadBoolean(self):
        with self.assertRaises(ValueError):
            convert("maybe", bool)

    def testOtherConverters(self):
        self.assertEqual(convert("12", int), 12)
        self.assertEqual(convert("text"), "text")


class TestRef(TestCase):
    """Behavioral tests for the single-value holder."""

    def testTypeFromInitialValue(self):
        self.assertIs(Ref(1).type, int)
        self.assertIs(Ref(1.5).type, float)
        self.assertIs(Ref().type, str)
        self.assertIsNone(Ref().value)
        self.assertIs(Ref(None).type, str)

    def testExplicitType(self):
        self.assertIs(Ref(type=int).type, int)

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Ref(type=1)

    def testRepr(self):
        self.assertEqual(repr(Ref(3)), "Ref(3, type=int)")


class TestBindings(TestCase):
    """Behavioral tests for bind() and the binding kinds."""

    def testBindDispatch(self):
        self.assertIsInstance(bind(Ref("")), ValueBinding)
        self.assertIsInstance(bind([]), ContainerBinding)
        self.assertIsInstance(bind(set()), ContainerBinding)
        self.assertIsInstance(bind(print), CallbackBinding)

    def testBindRejectsPlainValues(self):
        for target in (1, "text", (1, 2), None):
            with self.assertRaises(TypeError):
                bind(target)

    def testBindingsPassThrough(self):
        binding = bind(Ref(""))
        self.assertIs(bind(binding), binding)

    def testValueBinding(self):
        ref = Ref(0)
        binding = bind(ref)
        self.assertFalse(binding.container)
        self.assertTrue(binding.assign("4"))
        self.assertEqual(ref.value, 4)

    def testUncastableValue(self):
        ref = Ref(0)
        result = bind(ref).assign("four")
        self.assertFalse(result)
        self.assertIsInstance(result.fault, UncastableValueError)
        self.assertEqual(result.fault.code, FaultCode.UNCASTABLE_VALUE)
        self.assertEqual(result.fault.options["value"], "four")
        self.assertEqual(ref.value, 0)

    def testBooleanRefIsAFlag(self):
        self.assertTrue(bind(Ref(False)).flag)
        self.assertFalse(bind(Ref("")).flag)

    def testContainerTypeFromFirstElement(self):
        numbers = [1]
        binding = bind(numbers)
        self.assertTrue(binding.container)
        binding.assign("2")
        self.assertEqual(numbers, [1, 2])

    def testSetContainer(self):
        names = set()
        binding = bind(names)
        binding.assign("a")
        binding.assign("a")
        self.assertEqual(names, {"a"})

    def testCallbackAnnotation(self):
        def callback(value: float):
            pass

        self.assertIs(bind(callback).type, float)

    def testStringAnnotation(self):
        def callback(value: "int"):
            pass

        self.assertIs(bind(callback).type, int)

    def testNullaryCallbackIsAFlag(self):
        binding = bind(lambda: None)
        self.assertTrue(binding.nullary)
        self.assertTrue(binding.flag)

    def testCallbackRejections(self):
        def strict(value):
            raise ValueError("nope")

        result = bind(strict).assign("x")
        self.assertIsInstance(result.fault, CallbackError)
        self.assertEqual(result.fault.code, FaultCode.CALLBACK_FAILURE)
        self.assertFalse(bind(lambda value: Result.failure("no")).assign("x"))

    def testCallbackOtherExceptionsPropagate(self):
        def broken(value):
            raise KeyError(value)

        with self.assertRaises(KeyError):
            bind(broken).assign("x")


if __name__ == "__main__":
    unittest.main()
