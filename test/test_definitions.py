"""
Definitions module behavioral tests (metadata sanitizing, registry rules).

Scope
- Validate Definition name/description/type/required/default constraints.
- Validate Registry uniqueness, resolution by short/long name and validator attachment.

Conventions
- Test method names follow CamelCase per project convention.
- Faults are asserted by their concrete class and by their fault code.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from rich.text import Text

from progargs import Definition, Registry, Value, ValueType
from progargs.faults import (
    FaultCode,
    RegistrationError,
    MissingNameError,
    MalformedNameError,
    DuplicatedNameError,
    MalformedDefinitionError,
    InvalidDefaultError,
    NotFoundError,
)


class TestDefinition(TestCase):
    """Behavioral tests for Definition construction."""

    def testMinimalDefinition(self):
        d = Definition(None, "--name")
        self.assertIsNone(d.short_name)
        self.assertEqual(d.long_name, "--name")
        self.assertIsNone(d.description)
        self.assertIs(d.type, ValueType.STRING)
        self.assertFalse(d.required)
        self.assertEqual(d.default, Value(ValueType.STRING))
        self.assertIsNone(d.validator)
        self.assertEqual(d.names, ("--name",))

    def testNamesAreTrimmed(self):
        d = Definition(" -n ", " --name ")
        self.assertEqual(d.names, ("-n", "--name"))

    def testMissingLongNameRejected(self):
        for name in (None, "", "   "):
            with self.subTest(name=name):
                with self.assertRaises(MissingNameError) as context:
                    Definition("-n", name)
                self.assertEqual(context.exception.code, FaultCode.MISSING_NAME)

    def testMalformedNamesRejected(self):
        with self.assertRaises(MalformedNameError):
            Definition(None, "name")
        with self.assertRaises(MalformedNameError):
            Definition("n", "--name")
        with self.assertRaises(MalformedNameError):
            Definition(None, "--two words")
        with self.assertRaises(MalformedNameError):
            Definition(None, 12)

    def testShortEqualToLongRejected(self):
        with self.assertRaises(DuplicatedNameError):
            Definition("--name", "--name")

    def testEmptyShortNameMeansNone(self):
        self.assertIsNone(Definition("", "--name").short_name)

    def testRegistrationErrorsAreValueErrors(self):
        with self.assertRaises(ValueError):
            Definition(None, "name")
        self.assertTrue(issubclass(RegistrationError, ValueError))

    def testDescriptionTrimmedAndNonEmpty(self):
        self.assertEqual(Definition(None, "--name", "  Name  ").description, "Name")
        with self.assertRaises(ValueError):
            Definition(None, "--name", "   ")
        with self.assertRaises(TypeError):
            Definition(None, "--name", 12)

    def testDescriptionMayBeRichText(self):
        description = Text("styled", "bold")
        self.assertIs(Definition(None, "--name", description).description, description)

    def testTypeMustBeValueType(self):
        with self.assertRaises(TypeError):
            Definition(None, "--name", type="string")

    def testRequiredMustBeBoolean(self):
        with self.assertRaises(TypeError):
            Definition(None, "--name", required=1)

    def testRequiredFlagRejected(self):
        with self.assertRaises(MalformedDefinitionError):
            Definition("-v", "--verbose", type=ValueType.FLAG, required=True)

    def testDefaultMustFitType(self):
        with self.assertRaises(InvalidDefaultError):
            Definition(None, "--count", type=ValueType.INT, default="10")
        with self.assertRaises(InvalidDefaultError):
            Definition(None, "--count", type=ValueType.INT, default=True)
        with self.assertRaises(InvalidDefaultError):
            Definition(None, "--count", type=ValueType.INT, default=Value(ValueType.FLOAT, 1.0))

    def testFloatDefaultOutOfRangeRejected(self):
        with self.assertRaises(InvalidDefaultError) as context:
            Definition(None, "--ratio", type=ValueType.FLOAT, default=10 ** 400)
        self.assertEqual(context.exception.code, FaultCode.INVALID_DEFAULT)

    def testDefaultStoredAsValue(self):
        d = Definition(None, "--ratio", type=ValueType.FLOAT, default=1)
        self.assertEqual(d.default, Value(ValueType.FLOAT, 1.0))
        d = Definition(None, "--count", type=ValueType.INT, default=Value(ValueType.INT, 4))
        self.assertEqual(d.default.integer, 4)

    def testUnsetDefaultIsZero(self):
        self.assertIs(Definition(None, "--v", type=ValueType.FLAG).default.flag, False)
        self.assertEqual(Definition(None, "--n", type=ValueType.INT).default.integer, 0)

    def testValidatorMustBeCallable(self):
        with self.assertRaises(TypeError):
            Definition(None, "--name", validator="nope")

    def testMatchesShortAndLong(self):
        d = Definition("-n", "--name")
        self.assertTrue(d.matches("-n"))
        self.assertTrue(d.matches("--name"))
        self.assertFalse(d.matches("--nam"))
        self.assertFalse(Definition(None, "--name").matches(None))

    def testPropertiesAreReadOnly(self):
        d = Definition("-n", "--name")
        with self.assertRaises(AttributeError):
            d.long_name = "--other"


class TestRegistry(TestCase):
    """Behavioral tests for the definition Registry."""

    def setUp(self):
        self.registry = Registry()
        self.count = self.registry.register("-n", "--count", "Number of iterations", ValueType.INT, False, 10)
        self.verbose = self.registry.register("-v", "--verbose", type=ValueType.FLAG)

    def testRegistrationOrderKept(self):
        self.assertEqual([d.long_name for d in self.registry], ["--count", "--verbose"])
        self.assertEqual(len(self.registry), 2)
        self.assertEqual(self.registry.definitions, (self.count, self.verbose))

    def testDuplicatedLongNameRejected(self):
        with self.assertRaises(DuplicatedNameError) as context:
            self.registry.register("-c", "--count")
        self.assertIs(context.exception.options["definition"], self.count)
        self.assertEqual(len(self.registry), 2)

    def testDuplicatedShortNameRejected(self):
        with self.assertRaises(DuplicatedNameError):
            self.registry.register("-n", "--number")

    def testShortNameCannotShadowLongName(self):
        with self.assertRaises(DuplicatedNameError):
            self.registry.register("--count", "--counter")

    def testFindByShortOrLong(self):
        self.assertIs(self.registry.find("-n"), self.count)
        self.assertIs(self.registry.find("--count"), self.count)
        self.assertIsNone(self.registry.find("--missing"))

    def testLookupIsLongNameOnly(self):
        self.assertIs(self.registry.lookup("--verbose"), self.verbose)
        with self.assertRaises(NotFoundError) as context:
            self.registry.lookup("-v")
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_DEFINITION)

    def testNotFoundIsLookupError(self):
        with self.assertRaises(LookupError):
            self.registry.lookup("--missing")

    def testAttachValidator(self):
        def check(value, type):
            return True

        self.registry.attach_validator("--count", check)
        self.assertIs(self.count.validator, check)

    def testAttachValidatorUnknownName(self):
        with self.assertRaises(NotFoundError):
            self.registry.attach_validator("--missing", lambda value, type: True)
        with self.assertRaises(NotFoundError):
            self.registry.attach_validator("-n", lambda value, type: True)

    def testAttachValidatorMustBeCallable(self):
        with self.assertRaises(TypeError):
            self.registry.attach_validator("--count", 42)

    def testContainsChecksEveryName(self):
        self.assertIn("-n", self.registry)
        self.assertIn("--verbose", self.registry)
        self.assertNotIn("--missing", self.registry)

    def testClear(self):
        self.registry.clear()
        self.assertEqual(len(self.registry), 0)
        self.assertIsNone(self.registry.find("-n"))
        self.registry.register("-n", "--count")


if __name__ == "__main__":
    unittest.main()
