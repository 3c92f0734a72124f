"""
Tests for the internal helpers.

This module verifies semantic guarantees of the `UnsetType` sentinel and its companions:
- Singleton identity, falsy semantics and representation of `Unset`.
- PEP 604 union participation (isinstance checks against `str | Unset`).
- coalesce() only replacing the sentinel.
- rename() in both direct and decorator forms.
- mirror() publishing immutable snapshots.
- pluralize() endings used by fault messages.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from arbor.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        """
        Prepare a fresh reference to the singleton and its type for each test.
        """
        self.unset: UnsetType = UnsetType()
        self.unsettype: type[UnsetType] = UnsetType

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(self.unset, self.unsettype())
        self.assertIs(Unset, self.unset)

    def testRepr(self) -> None:
        """
        __repr__() is the literal string 'Unset'.
        """
        self.assertEqual(repr(self.unset), "Unset")

    def testFalsely(self) -> None:
        """
        The sentinel is falsy but distinct from other falsy values.
        """
        self.assertFalse(bool(self.unset))
        self.assertIsNot(self.unset, None)
        self.assertNotEqual(self.unset, False)  # noqa: E712

    def testUnionWithTypes(self) -> None:
        """
        `str | Unset` builds a union usable with isinstance on both sides.
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(1, str | Unset)
        self.assertIsInstance(Unset, Unset | int)

    def testCopyDeepcopyPickle(self) -> None:
        """
        copy(), deepcopy() and pickle preserve the identity of the singleton.
        """
        self.assertIs(copy.copy(self.unset), self.unset)
        self.assertIs(copy.deepcopy(self.unset), self.unset)
        self.assertIs(pickle.loads(pickle.dumps(self.unset)), self.unset)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (self.unsettype,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce, rename, mirror and pluralize.
    """

    def testCoalesceReplacesOnlyUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")

    def testRenameDirect(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(1)

    def testMirrorFreezesContainers(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            label = mirror("label")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._table = {"key": [4]}
                self._tags = {"a"}
                self._label = "text"

        holder = Holder()
        self.assertEqual(holder.items, (1, (2, 3)))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.table["key"], (4,))
        self.assertEqual(holder.tags, frozenset({"a"}))
        self.assertEqual(holder.label, "text")
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testPluralize(self) -> None:
        self.assertEqual(pluralize("argument", 1), "argument")
        self.assertEqual(pluralize("argument", 0), "arguments")
        self.assertEqual(pluralize("argument", 2), "arguments")
        self.assertEqual(pluralize("alias"), "aliases")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("key"), "keys")


if __name__ == '__main__':
    # Allow running this test module directly: `python -m pytest` or `python utils.py`.
    unittest.main()
