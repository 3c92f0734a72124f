"""
Arguments module behavioral tests (no explicit None, no descriptor-from-descriptor).

Scope
- Validate public descriptors (Argument, Option): construction and normalization.
- Validate option keys (name and aliases): prefix, pattern and uniqueness rules.
- Validate defaults: natural default per kind, plain objects, Value instances, range checks.
- Validate descriptions: optional, trimmed, never empty, explicit None rejected.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.text import Text

from arbor import Argument, Option, Kind, Value


class TestArgument(TestCase):
    """Behavioral tests for Argument (positional) descriptors."""

    def testKindFromBuiltinType(self):
        self.assertIs(Argument(str).kind, Kind.STR)
        self.assertIs(Argument(Kind.FLOAT).kind, Kind.FLOAT)

    def testUnknownKindRejected(self):
        with self.assertRaises(TypeError):
            Argument(bytes)

    def testDescrDefaultsToNone(self):
        self.assertIsNone(Argument(Kind.STR).descr)

    def testDescrIsTrimmed(self):
        self.assertEqual(Argument(Kind.STR, descr="  file to read ").descr, "file to read")

    def testDescrAcceptsRichText(self):
        descr = Text("styled", style="bold")
        self.assertIs(Argument(Kind.STR, descr=descr).descr, descr)

    def testDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Argument(Kind.STR, descr=None)

    def testDescrEmptyRejected(self):
        with self.assertRaises(ValueError):
            Argument(Kind.STR, descr="   ")

    def testReadOnlyFields(self):
        argument = Argument(Kind.INT)
        with self.assertRaises(AttributeError):
            argument.kind = Kind.STR

    def testRepr(self):
        self.assertEqual(repr(Argument(Kind.STR, descr="text")), "argument(kind=<Kind.STR: 'string'>, descr='text')")


class TestOption(TestCase):
    """Behavioral tests for Option (named) descriptors."""

    def testNameAndAliases(self):
        option = Option("count", Kind.INT, "c", "n")
        self.assertEqual(option.name, "count")
        self.assertEqual(option.aliases, ("c", "n"))
        self.assertEqual(option.keys, ("count", "c", "n"))

    def testNameWithHyphensAndUnicode(self):
        self.assertEqual(Option("the-truth", Kind.INT).name, "the-truth")
        self.assertEqual(Option("réponse", Kind.STR).name, "réponse")

    def testNameMustBeGivenWithoutPrefix(self):
        with self.assertRaises(ValueError):
            Option("--count", Kind.INT)
        with self.assertRaises(ValueError):
            Option("count", Kind.INT, "-c")

    def testInvalidKeysRejected(self):
        for name in ("", "  ", "with space", "under_score", "trailing-", "double--hyphen", "a=b"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Option(name, Kind.STR)

    def testNonStringKeyRejected(self):
        with self.assertRaises(TypeError):
            Option(1, Kind.STR)
        with self.assertRaises(TypeError):
            Option("name", Kind.STR, 2)

    def testDuplicateKeysRejected(self):
        with self.assertRaises(ValueError):
            Option("count", Kind.INT, "count")
        with self.assertRaises(ValueError):
            Option("count", Kind.INT, "c", "c")

    def testNaturalDefaults(self):
        self.assertEqual(Option("flag", Kind.BOOL).default, Value(Kind.BOOL, False))
        self.assertEqual(Option("text", Kind.STR).default, Value(Kind.STR, ""))
        self.assertEqual(Option("count", Kind.INT).default, Value(Kind.INT, 0))
        self.assertEqual(Option("ratio", Kind.FLOAT).default, Value(Kind.FLOAT, 0.0))

    def testPlainDefaultIsWrapped(self):
        self.assertEqual(Option("the-truth", Kind.INT, default=42).default, Value(Kind.INT, 42))
        self.assertEqual(Option("ratio", float, default=1).default, Value(Kind.FLOAT, 1.0))

    def testValueDefaultIsKept(self):
        default = Value(Kind.STR, "x")
        self.assertIs(Option("text", Kind.STR, default=default).default, default)

    def testDefaultOfWrongKindRejected(self):
        with self.assertRaises(TypeError):
            Option("count", Kind.INT, default="42")
        with self.assertRaises(TypeError):
            Option("count", Kind.INT, default=True)
        with self.assertRaises(TypeError):
            Option("count", Kind.INT, default=Value(Kind.FLOAT, 1.0))

    def testDefaultOutOfRangeRejected(self):
        with self.assertRaises(ValueError):
            Option("count", Kind.INT, default=2 ** 31)

    def testDescrExplicitNoneRejected(self):
        with self.assertRaises(TypeError):
            Option("count", Kind.INT, descr=None)

    def testReadOnlyFields(self):
        option = Option("count", Kind.INT, "c")
        with self.assertRaises(AttributeError):
            option.name = "other"

    def testRepr(self):
        self.assertTrue(repr(Option("count", Kind.INT)).startswith("option(name='count', aliases=()"))


if __name__ == "__main__":
    unittest.main()
