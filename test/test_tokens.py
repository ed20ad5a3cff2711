"""
Tokens module behavioral tests (raw arguments, customization, token iterator).

Scope
- Validate option/value classification and inline splitting at delimiters.
- Validate lossless tokenization and literal handling of "", "-" and "--".
- Validate iterator immutability (advance never mutates, copies are free).
- Validate custom lexical grammars and rejected customizations.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Arguments, TokenIterator, customization, ...).
"""

from __future__ import annotations

import copy
import itertools
import unittest
from unittest import TestCase

from clasp import (
    Arguments,
    Customization,
    DefaultCustomization,
    TokenIterator,
    TokenType,
    customization,
)
from clasp.tokens import _classify


def tokenize(*values, customization=DefaultCustomization()):
    return list(TokenIterator(Arguments("prog", *values), customization))


def kinds(tokens):
    return [(token.type, token.name) for token in tokens]


class TestArguments(TestCase):
    """Behavioral tests for raw Arguments."""

    def testProgramAndValues(self):
        arguments = Arguments("prog", "-a", "b")
        self.assertEqual(arguments.program, "prog")
        self.assertEqual(arguments.values, ("-a", "b"))
        self.assertEqual(list(arguments), ["-a", "b"])
        self.assertEqual(len(arguments), 2)

    def testArgumentsAreReadOnly(self):
        arguments = Arguments("prog")
        with self.assertRaises(AttributeError):
            arguments.program = "other"

    def testNonStringValuesRejected(self):
        with self.assertRaises(TypeError):
            Arguments("prog", 1)

    def testFromArgvIterable(self):
        self.assertEqual(Arguments.from_argv(["prog", "-a"]), Arguments("prog", "-a"))

    def testFromArgvShellString(self):
        self.assertEqual(Arguments.from_argv("prog -a 'b c'"), Arguments("prog", "-a", "b c"))

    def testFromArgvEmpty(self):
        arguments = Arguments.from_argv([])
        self.assertEqual(arguments.program, "")
        self.assertEqual(arguments.values, ())


class TestTokenization(TestCase):
    """Behavioral tests for token classification."""

    def testInlineValueIsSplit(self):
        self.assertEqual(kinds(tokenize("-x=y")), [(TokenType.OPTION, "x"), (TokenType.VALUE, "y")])

    def testOptionWithoutDelimiter(self):
        self.assertEqual(kinds(tokenize("-x")), [(TokenType.OPTION, "x")])

    def testSpaceIsADelimiter(self):
        self.assertEqual(kinds(tokenize("--name value")), [(TokenType.OPTION, "name"), (TokenType.VALUE, "value")])

    def testSplitAtFirstDelimiterOnly(self):
        self.assertEqual(kinds(tokenize("--define=a=b")), [(TokenType.OPTION, "define"), (TokenType.VALUE, "a=b")])

    def testFollowingArgumentIsAValueToken(self):
        self.assertEqual(
            kinds(tokenize("-n", "5")),
            [(TokenType.OPTION, "n"), (TokenType.VALUE, "5")]
        )

    def testPrefixIsKept(self):
        short, long = tokenize("-s", "--long")
        self.assertEqual((short.prefix, short.option), ("-", "-s"))
        self.assertEqual((long.prefix, long.option), ("--", "--long"))

    def testSplitTokensRecordTheirDelimiter(self):
        option, value = tokenize("--out=file")
        self.assertTrue(option.split)
        self.assertEqual(option.delimiter, "=")
        self.assertEqual(value.index, option.index)

    def testPrefixOnlyArgumentsAreValues(self):
        self.assertEqual(kinds(tokenize("-", "--")), [(TokenType.VALUE, "-"), (TokenType.VALUE, "--")])

    def testEmptyArgumentIsAValue(self):
        self.assertEqual(kinds(tokenize("")), [(TokenType.VALUE, "")])

    def testMissingNameIsLiteral(self):
        self.assertEqual(kinds(tokenize("-=x")), [(TokenType.VALUE, "-=x")])

    def testEmptyInlineValue(self):
        self.assertEqual(kinds(tokenize("--out=")), [(TokenType.OPTION, "out"), (TokenType.VALUE, "")])

    def testEmptyArgumentsYieldNoTokens(self):
        tokens = TokenIterator(Arguments("prog"))
        self.assertFalse(tokens)
        self.assertEqual(list(tokens), [])

    def testTokenizationIsLossless(self):
        values = ("-a=1", "--bee", "c", "-", "", "--d=", "-e f", "plain")
        tokens = tokenize(*values)
        rebuilt = tuple(
            "".join(token.raw for token in group)
            for _, group in itertools.groupby(tokens, key=lambda token: token.index)
        )
        self.assertEqual(rebuilt, values)


class TestTokenIterator(TestCase):
    """Behavioral tests for TokenIterator positions."""

    def testAdvanceDoesNotMutate(self):
        tokens = TokenIterator(Arguments("prog", "-x=y", "z"))
        following = tokens.advance()
        self.assertEqual(tokens.position, (0, False))
        self.assertEqual(following.position, (0, True))
        self.assertEqual(tokens.current.name, "x")
        self.assertEqual(following.current.name, "y")

    def testAdvancePastSplitValue(self):
        tokens = TokenIterator(Arguments("prog", "-x=y", "z")).advance().advance()
        self.assertEqual(tokens.position, (1, False))
        self.assertEqual(tokens.current.name, "z")
        self.assertEqual(tokens.remaining_arguments(), ("z",))

    def testExhaustedIteratorRaises(self):
        tokens = TokenIterator(Arguments("prog", "a")).advance()
        self.assertFalse(tokens)
        with self.assertRaises(IndexError):
            tokens.current
        with self.assertRaises(IndexError):
            tokens.advance()

    def testHasChecksTheCurrentType(self):
        tokens = TokenIterator(Arguments("prog", "-a", "b"))
        self.assertTrue(tokens.has(TokenType.OPTION))
        self.assertFalse(tokens.has(TokenType.VALUE))
        self.assertTrue(tokens.advance().has(TokenType.VALUE))
        self.assertFalse(tokens.advance().advance().has(TokenType.VALUE))

    def testEqualityIsByPosition(self):
        arguments = Arguments("prog", "a", "b")
        self.assertEqual(TokenIterator(arguments), TokenIterator(arguments, DefaultCustomization()))
        self.assertNotEqual(TokenIterator(arguments), TokenIterator(arguments).advance())

    def testCopiesAreTheSamePosition(self):
        tokens = TokenIterator(Arguments("prog", "a"))
        self.assertIs(copy.copy(tokens), tokens)
        self.assertIs(copy.deepcopy(tokens), tokens)

    def testIterationRestartsFromAnyPosition(self):
        tokens = TokenIterator(Arguments("prog", "a", "b"))
        self.assertEqual([token.name for token in tokens], ["a", "b"])
        self.assertEqual([token.name for token in tokens], ["a", "b"])

    def testClassificationCacheIsBounded(self):
        for number in range(3000):
            list(TokenIterator(Arguments("prog", "value-%d" % number, "--name=%d" % number)))
        info = _classify.cache_info()
        self.assertIsNotNone(info.maxsize)
        self.assertLessEqual(info.currsize, info.maxsize)


class TestCustomization(TestCase):
    """Behavioral tests for lexical customization."""

    def testDefaults(self):
        default = DefaultCustomization()
        self.assertEqual(default.token_delimiters(), " =")
        self.assertEqual(default.option_prefix(), "-")
        self.assertEqual(customization(), default)

    def testWindowsStyleSwitches(self):
        windows = customization(":", "/")
        self.assertEqual(
            kinds(tokenize("/out:file", "-x", customization=windows)),
            [(TokenType.OPTION, "out"), (TokenType.VALUE, "file"), (TokenType.VALUE, "-x")]
        )

    def testSubclassCustomization(self):
        class Commas(Customization):
            def token_delimiters(self):
                return ","

            def option_prefix(self):
                return "+"

        self.assertEqual(
            kinds(tokenize("+tag,a=b", customization=Commas())),
            [(TokenType.OPTION, "tag"), (TokenType.VALUE, "a=b")]
        )

    def testOverlappingCharactersRejected(self):
        with self.assertRaises(ValueError):
            customization("-=", "-")

    def testEmptyPrefixRejected(self):
        with self.assertRaises(ValueError):
            customization("=", "")

    def testNonCustomizationRejected(self):
        with self.assertRaises(TypeError):
            TokenIterator(Arguments("prog"), object())


if __name__ == "__main__":
    unittest.main()
