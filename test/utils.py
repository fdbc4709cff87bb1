"""
Utility helpers tests (sentinel, coalesce, rename, mirror).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from clparse.utils import Unset, UnsetType, coalesce, rename, mirror


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndRepr(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})

    def testUnion(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)
        self.assertNotIsInstance(1, str | Unset)


class TestHelpers(TestCase):

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)

    def testRenameForms(self):
        def work():
            pass

        self.assertIs(rename(work, "job"), work)
        self.assertEqual(work.__name__, "job")

        @rename("task")
        def other():
            pass

        self.assertEqual(other.__qualname__, "task")

        with self.assertRaises(TypeError):
            rename()

    def testMirrorIsReadOnlySnapshot(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        with self.assertRaises(AttributeError):
            holder.items = []


if __name__ == "__main__":
    unittest.main()
