"""
Utility helpers behavioral tests.

Scope
- Validate the Unset marker (singleton, falsy, unions, copies).
- Validate coalesce, rename, mirror and ordinal.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from termline.utils import Unset, UnsetType, coalesce, mirror, ordinal, rename


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self):
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(None, str | Unset)

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(None, "fallback"))


class TestHelpers(TestCase):

    def testRename(self):
        @rename("evaluate")
        def function():
            pass

        self.assertEqual(function.__name__, "evaluate")
        self.assertEqual(function.__qualname__, "evaluate")
        with self.assertRaises(TypeError):
            rename(42)

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            name = mirror("name")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._tags = {"x"}
                self._name = "holder"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(AttributeError):
            holder.items = []

    def testOrdinal(self):
        expected = {1: "first", 2: "second", 10: "tenth", 11: "11th", 12: "12th", 13: "13th",
                    21: "21st", 22: "22nd", 23: "23rd", 24: "24th", 101: "101st", 111: "111th"}
        for number, label in expected.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)


if __name__ == "__main__":
    unittest.main()
