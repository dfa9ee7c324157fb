"""
Values module behavioral tests (tags, payload checks, token coercion).

Scope
- Validate ValueType zero values, placeholders and payload acceptance.
- Validate Value construction, float normalisation and tag-checked projections.
- Validate lenient ("parse or zero") and strict numeric coercion.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from progargs import Value, ValueType, coerce


class TestValueType(TestCase):
    """Behavioral tests for ValueType tags."""

    def testZeroValues(self):
        self.assertIs(ValueType.FLAG.zero, False)
        self.assertIsNone(ValueType.STRING.zero)
        self.assertEqual(ValueType.INT.zero, 0)
        self.assertEqual(ValueType.FLOAT.zero, 0.0)

    def testPlaceholders(self):
        self.assertIsNone(ValueType.FLAG.placeholder)
        self.assertEqual(ValueType.STRING.placeholder, "<string>")
        self.assertEqual(ValueType.INT.placeholder, "<int>")
        self.assertEqual(ValueType.FLOAT.placeholder, "<float>")

    def testBoolIsNotAnInt(self):
        self.assertFalse(ValueType.INT.accepts(True))
        self.assertFalse(ValueType.FLOAT.accepts(False))

    def testIntIsAFloat(self):
        self.assertTrue(ValueType.FLOAT.accepts(3))

    def testStringAcceptsNone(self):
        self.assertTrue(ValueType.STRING.accepts(None))
        self.assertFalse(ValueType.STRING.accepts(3))


class TestValue(TestCase):
    """Behavioral tests for the Value tagged union."""

    def testDefaultsToZero(self):
        self.assertEqual(Value(ValueType.INT).payload, 0)
        self.assertIsNone(Value(ValueType.STRING).payload)

    def testFloatPayloadNormalised(self):
        value = Value(ValueType.FLOAT, 2)
        self.assertIsInstance(value.payload, float)
        self.assertEqual(value.floating, 2.0)

    def testMismatchedPayloadRejected(self):
        with self.assertRaises(TypeError):
            Value(ValueType.INT, "12")
        with self.assertRaises(TypeError):
            Value(ValueType.FLAG, 1)

    def testProjectionChecksTag(self):
        value = Value(ValueType.INT, 7)
        self.assertEqual(value.integer, 7)
        with self.assertRaises(TypeError):
            value.floating
        with self.assertRaises(TypeError):
            value.string

    def testTypeMustBeValueType(self):
        with self.assertRaises(TypeError):
            Value("int", 1)

    def testEqualityFollowsTagAndPayload(self):
        self.assertEqual(Value(ValueType.INT, 1), Value(ValueType.INT, 1))
        self.assertNotEqual(Value(ValueType.INT, 1), Value(ValueType.FLOAT, 1.0))
        self.assertEqual(len({Value(ValueType.STRING, "a"), Value(ValueType.STRING, "a")}), 1)

    def testReprIsIntrospectable(self):
        self.assertEqual(repr(Value(ValueType.INT, 3)), "value(type=%r, payload=3)" % ValueType.INT)


class TestCoerce(TestCase):
    """Behavioral tests for coerce()."""

    def testFlagIsPresence(self):
        self.assertIs(coerce(ValueType.FLAG, "-v").flag, True)

    def testStringVerbatim(self):
        self.assertEqual(coerce(ValueType.STRING, "  spaced ").string, "  spaced ")
        self.assertEqual(coerce(ValueType.STRING, "").string, "")

    def testLenientIntegers(self):
        cases = {
            "42": 42,
            "  -7": -7,
            "+5": 5,
            "12abc": 12,
            "abc": 0,
            "": 0,
            "3.9": 3,
        }
        for token, expected in cases.items():
            with self.subTest(token=token):
                self.assertEqual(coerce(ValueType.INT, token).integer, expected)

    def testLenientFloats(self):
        cases = {
            "0.5": 0.5,
            ".5": 0.5,
            "-2": -2.0,
            "1e3x": 1000.0,
            "5.": 5.0,
            "x": 0.0,
            "": 0.0,
        }
        for token, expected in cases.items():
            with self.subTest(token=token):
                self.assertEqual(coerce(ValueType.FLOAT, token).floating, expected)

    def testLenientFloatSpecialValues(self):
        self.assertTrue(math.isinf(coerce(ValueType.FLOAT, "inf").floating))
        self.assertTrue(math.isinf(coerce(ValueType.FLOAT, "-Infinity").floating))
        self.assertTrue(math.isnan(coerce(ValueType.FLOAT, "nan").floating))

    def testOverlongDigitRunIsZero(self):
        self.assertEqual(coerce(ValueType.INT, "9" * 5000).integer, 0)
        self.assertEqual(coerce(ValueType.INT, "-" + "9" * 5000 + "x").integer, 0)
        self.assertTrue(math.isinf(coerce(ValueType.FLOAT, "9" * 5000).floating))

    def testOverlongDigitRunStrict(self):
        with self.assertRaises(ValueError):
            coerce(ValueType.INT, "9" * 5000, strict=True)

    def testOnlyAsciiDigitsAndWhitespace(self):
        self.assertEqual(coerce(ValueType.INT, "\u0663").integer, 0)
        self.assertEqual(coerce(ValueType.INT, "4\u0662").integer, 4)
        self.assertEqual(coerce(ValueType.INT, "\u20037").integer, 0)
        self.assertEqual(coerce(ValueType.FLOAT, "\u0661.5").floating, 0.0)
        with self.assertRaises(ValueError):
            coerce(ValueType.INT, "\u0663", strict=True)
        with self.assertRaises(ValueError):
            coerce(ValueType.INT, "7\u2003", strict=True)

    def testStrictRejectsTrailingGarbage(self):
        with self.assertRaises(ValueError):
            coerce(ValueType.INT, "12abc", strict=True)
        with self.assertRaises(ValueError):
            coerce(ValueType.FLOAT, "0.5x", strict=True)
        with self.assertRaises(ValueError):
            coerce(ValueType.INT, "", strict=True)

    def testStrictAcceptsSurroundingWhitespace(self):
        self.assertEqual(coerce(ValueType.INT, " 12 ", strict=True).integer, 12)
        self.assertEqual(coerce(ValueType.FLOAT, "1e-2", strict=True).floating, 0.01)

    def testStrictLeavesStringsAlone(self):
        self.assertEqual(coerce(ValueType.STRING, "12abc", strict=True).string, "12abc")

    def testTokenMustBeString(self):
        with self.assertRaises(TypeError):
            coerce(ValueType.INT, 12)
        with self.assertRaises(TypeError):
            coerce("int", "12")


if __name__ == "__main__":
    unittest.main()
