"""
Positional argument collection tests.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from clio.arguments import Arguments
from clio.faults import NumericInvalidFormatError, NumericOutOfRangeError


class ArgumentsTest(TestCase):
    def setUp(self):
        self.arguments = Arguments()

    def testAppendKeepsOrder(self):
        for token in ("b", "a", "c"):
            self.arguments.append(token)
        self.assertEqual(list(self.arguments), ["b", "a", "c"])
        self.assertEqual(self.arguments[1], "a")
        self.assertEqual(len(self.arguments), 3)

    def testEmptyIsFalsey(self):
        self.assertFalse(self.arguments)

    def testSnapshotIsIndependent(self):
        self.arguments.append("a")
        snapshot = self.arguments.snapshot()
        snapshot.append("b")
        self.assertEqual(self.arguments.snapshot(), ["a"])

    def testIntegers(self):
        self.arguments.append("10")
        self.arguments.append("0x14")
        self.assertEqual(self.arguments.integers(), [10, 20])

    def testReals(self):
        self.arguments.append("1.5")
        self.arguments.append("2")
        self.assertEqual(self.arguments.reals(), [1.5, 2.0])

    def testCoercionFailures(self):
        self.arguments.append("10")
        self.arguments.append("x")
        with self.assertRaises(NumericInvalidFormatError):
            self.arguments.integers()

        arguments = Arguments()
        arguments.append("99999999999")
        with self.assertRaises(NumericOutOfRangeError):
            arguments.integers()

    def testNonStringIsRejected(self):
        with self.assertRaises(TypeError):
            self.arguments.append(1)


if __name__ == "__main__":
    unittest.main()
