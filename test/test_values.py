"""
Option values and primitive coercion tests.

Scope
- Integer coercion follows strtol base-0 rules and the C int range.
- Float coercion follows strtod rules, including overflow and underflow.
- Kind checks programmatic values; OptionValue keeps scalar/list semantics.

Conventions
- Test method names follow CamelCase per project convention.
"""
import math
import unittest
from unittest import TestCase

from clio.faults import NumericError, NumericInvalidFormatError, NumericOutOfRangeError
from clio.values import INT_MAX, INT_MIN, Kind, OptionValue, to_integer, to_real


class IntegerCoercionTest(TestCase):
    def testDecimal(self):
        self.assertEqual(to_integer("42"), 42)
        self.assertEqual(to_integer("-42"), -42)
        self.assertEqual(to_integer("+7"), 7)

    def testBasePrefixes(self):
        self.assertEqual(to_integer("0x1f"), 31)
        self.assertEqual(to_integer("0X1F"), 31)
        self.assertEqual(to_integer("010"), 8)
        self.assertEqual(to_integer("0"), 0)

    def testLeadingWhitespaceIsSkipped(self):
        self.assertEqual(to_integer("  12"), 12)

    def testRangeLimits(self):
        self.assertEqual(to_integer("2147483647"), INT_MAX)
        self.assertEqual(to_integer("-2147483648"), INT_MIN)
        with self.assertRaises(NumericOutOfRangeError) as context:
            to_integer("2147483648")
        self.assertEqual(str(context.exception), "'2147483648' is out of range")
        with self.assertRaises(NumericOutOfRangeError):
            to_integer("-2147483649")

    def testVeryLongLiteralsAreOutOfRange(self):
        for text in ("9" * 5000, "-" + "1" * 5000, "0" + "7" * 5000, "0x" + "f" * 5000):
            with self.subTest(length=len(text)), self.assertRaises(NumericOutOfRangeError):
                to_integer(text)
        self.assertEqual(to_integer("0000000000000000000012"), 10)

    def testTrailingCharactersAreInvalid(self):
        with self.assertRaises(NumericInvalidFormatError) as context:
            to_integer("12abc")
        self.assertEqual(str(context.exception), "cannot parse '12abc' as an integer")

    def testNoDigitsIsInvalid(self):
        for text in ("", "abc", "-", "0x", "08", "1.5"):
            with self.subTest(text=text), self.assertRaises(NumericInvalidFormatError):
                to_integer(text)

    def testNumericErrorsAreValueErrors(self):
        with self.assertRaises(ValueError):
            to_integer("x")
        self.assertTrue(issubclass(NumericOutOfRangeError, NumericError))

    def testNonStringRaisesTypeError(self):
        with self.assertRaises(TypeError):
            to_integer(12)


class RealCoercionTest(TestCase):
    def testDecimal(self):
        self.assertEqual(to_real("1.5"), 1.5)
        self.assertEqual(to_real("-0.25"), -0.25)
        self.assertEqual(to_real(".5"), 0.5)
        self.assertEqual(to_real("5."), 5.0)
        self.assertEqual(to_real("1e3"), 1000.0)
        self.assertEqual(to_real("0e5"), 0.0)

    def testHexadecimal(self):
        self.assertEqual(to_real("0x1p4"), 16.0)
        self.assertEqual(to_real("0x.8"), 0.5)

    def testSpecialValues(self):
        self.assertEqual(to_real("inf"), math.inf)
        self.assertEqual(to_real("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(to_real("nan")))

    def testOverflowAndUnderflow(self):
        with self.assertRaises(NumericOutOfRangeError):
            to_real("1e400")
        with self.assertRaises(NumericOutOfRangeError):
            to_real("1e-400")

    def testSubnormalsAreOutOfRange(self):
        for text in ("1e-310", "-4.9e-324", "0x1p-1070"):
            with self.subTest(text=text), self.assertRaises(NumericOutOfRangeError):
                to_real(text)
        self.assertEqual(to_real("2.2250738585072014e-308"), 2.2250738585072014e-308)

    def testTrailingCharactersAreInvalid(self):
        with self.assertRaises(NumericInvalidFormatError) as context:
            to_real("1.5x")
        self.assertEqual(str(context.exception), "cannot parse '1.5x' as a float")
        with self.assertRaises(NumericInvalidFormatError):
            to_real("")


class KindTest(TestCase):
    def testTypes(self):
        self.assertIs(Kind.FLAG.type, bool)
        self.assertIs(Kind.TEXT.type, str)
        self.assertIs(Kind.INTEGER.type, int)
        self.assertIs(Kind.REAL.type, float)

    def testCheckWidensIntegersForReals(self):
        value = Kind.REAL.check(2)
        self.assertIsInstance(value, float)
        self.assertEqual(value, 2.0)

    def testCheckRejectsMismatches(self):
        with self.assertRaises(TypeError):
            Kind.INTEGER.check(True)
        with self.assertRaises(TypeError):
            Kind.TEXT.check(1)
        with self.assertRaises(TypeError):
            Kind.FLAG.check(1)

    def testFlagsCannotBeCoerced(self):
        with self.assertRaises(TypeError):
            Kind.FLAG.coerce("true")

    def testRender(self):
        self.assertEqual(Kind.FLAG.render(True), "true")
        self.assertEqual(Kind.INTEGER.render(3), "3")
        self.assertEqual(Kind.REAL.render(1.5), "1.500000")


class OptionValueTest(TestCase):
    def testScalarStartsWithDefault(self):
        option = OptionValue.scalar(Kind.INTEGER, 8)
        self.assertEqual(option.values, (8,))
        self.assertEqual(option.current(), 8)
        self.assertFalse(option.found)
        self.assertFalse(option.listed)

    def testLastValueWins(self):
        option = OptionValue.scalar(Kind.INTEGER, 8)
        option.append_text("0x10")
        self.assertEqual(option.current(), 16)
        self.assertEqual(option.values, (8, 16))

    def testScalarDefaultIsChecked(self):
        with self.assertRaises(TypeError):
            OptionValue.scalar(Kind.INTEGER, "8")

    def testListStartsEmpty(self):
        option = OptionValue.multiple(Kind.TEXT, greedy=True)
        self.assertEqual(len(option), 0)
        self.assertTrue(option.listed)
        self.assertTrue(option.greedy)
        with self.assertRaises(ValueError):
            option.current()

    def testGreedyFlagsAreRejected(self):
        with self.assertRaises(ValueError):
            OptionValue.multiple(Kind.FLAG, greedy=True)

    def testClear(self):
        option = OptionValue.multiple(Kind.REAL)
        option.append(1)
        option.append_text("2.5")
        option.clear()
        self.assertEqual(option.values, ())

    def testValuesAreSnapshots(self):
        option = OptionValue.multiple(Kind.TEXT)
        option.append("a")
        values = option.values
        option.append("b")
        self.assertEqual(values, ("a",))

    def testStr(self):
        option = OptionValue.multiple(Kind.FLAG)
        option.append(True)
        option.append(False)
        self.assertEqual(str(option), "[true, false]")
        self.assertEqual(str(OptionValue.scalar(Kind.REAL, 1.5)), "[1.500000]")
        self.assertEqual(str(OptionValue.multiple(Kind.TEXT)), "[]")


if __name__ == "__main__":
    unittest.main()
