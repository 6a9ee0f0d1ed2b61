"""
Arguments module behavioral tests (descriptors and leaf terms).

Scope
- Validate descriptor construction, normalization and metadata constraints.
- Validate leaf term values: presence, defaults, conversion, choices, repetition.
- Validate the usage failures raised for missing and invalid values.

Conventions
- Test method names follow CamelCase per project convention.
- Leaf terms are evaluated through termline.evaluate on real argument vectors.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from termline import (
    Flag,
    Option,
    Positional,
    TermInfo,
    UsageFailure,
    FaultCode,
    Ok,
    flag,
    option,
    positional,
    positionals,
    evaluate,
)


INFO = TermInfo("prog")


class TestFlag(TestCase):

    def testNamesKeepDeclarationOrder(self):
        self.assertEqual(Flag("--verbose", "-v").names, ("--verbose", "-v"))

    def testDefaults(self):
        descriptor = Flag("-v")
        self.assertIsNone(descriptor.doc)
        self.assertEqual(descriptor.section, "OPTIONS")
        self.assertFalse(descriptor.repeat)
        self.assertFalse(descriptor.hidden)
        self.assertTrue(descriptor.named)

    def testNamesRequired(self):
        with self.assertRaises(TypeError):
            Flag()

    def testMalformedNamesRejected(self):
        for name in ("verbose", "-", "--", "-vv", "--9lives", "---x", "--dry_run"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Flag(name)

    def testDuplicateNamesRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", "-v")

    def testEmptyDocRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", doc="  ")

    def testEmptySectionRejected(self):
        with self.assertRaises(ValueError):
            Flag("-v", section="")

    def testTypenameInRepr(self):
        self.assertTrue(repr(Flag("-v")).startswith("flag(names=('-v',)"))

    def testFlagTerm(self):
        verbose = flag("-v", "--verbose")
        self.assertEqual(evaluate(verbose, INFO, []), Ok(False))
        self.assertEqual(evaluate(verbose, INFO, ["--verbose"]), Ok(True))
        self.assertEqual(evaluate(verbose, INFO, ["--verb"]), Ok(True))

    def testRepeatedFlagCounts(self):
        verbosity = flag("-v", repeat=True)
        self.assertEqual(evaluate(verbosity, INFO, []), Ok(0))
        self.assertEqual(evaluate(verbosity, INFO, ["-vvv"]), Ok(3))

    def testFlagAssignmentIsAUsageFailure(self):
        outcome = evaluate(flag("--verbose"), INFO, ["--verbose=yes"])
        self.assertIsInstance(outcome, UsageFailure)
        self.assertEqual(outcome.code, FaultCode.FLAG_ASSIGNMENT)


class TestOption(TestCase):

    def testDefaults(self):
        descriptor = Option("-o", "--output")
        self.assertIs(descriptor.type, str)
        self.assertIsNone(descriptor.default)
        self.assertEqual(descriptor.docv, "VAL")
        self.assertEqual(descriptor.choices, ())
        self.assertFalse(descriptor.optional)

    def testDocvIsTrimmed(self):
        self.assertEqual(Option("-o", docv=" FILE ").docv, "FILE")

    def testTypeMustBeCallable(self):
        with self.assertRaises(TypeError):
            Option("-o", type="int")

    def testDuplicateChoicesRejected(self):
        with self.assertRaises(ValueError):
            Option("--mode", choices=["fast", "fast"])

    def testStringChoicesRejected(self):
        with self.assertRaises(TypeError):
            Option("--mode", choices="fast")

    def testRequiredWithBareRejected(self):
        with self.assertRaises(TypeError):
            Option("--color", bare="auto", required=True)

    def testValueForms(self):
        count = option("-n", "--count", type=int, default=1)
        for args in (["--count=3"], ["--count", "3"], ["-n", "3"], ["-n3"], ["--co=3"]):
            with self.subTest(args=args):
                self.assertEqual(evaluate(count, INFO, args), Ok(3))

    def testAbsentUsesDefault(self):
        self.assertEqual(evaluate(option("-n", type=int, default=1), INFO, []), Ok(1))

    def testLastOccurrenceWinsOnlyWhenRepeatable(self):
        tags = option("-t", repeat=True)
        self.assertEqual(evaluate(tags, INFO, ["-t", "a", "-tb"]), Ok(["a", "b"]))
        self.assertEqual(evaluate(tags, INFO, []), Ok([]))

        outcome = evaluate(option("-t"), INFO, ["-t", "a", "-t", "b"])
        self.assertEqual(outcome.code, FaultCode.DUPLICATED_OPTION)

    def testConversionFailure(self):
        outcome = evaluate(option("--count", type=int), INFO, ["--count=many"])
        self.assertIsInstance(outcome, UsageFailure)
        self.assertEqual(outcome.code, FaultCode.INVALID_VALUE)
        self.assertTrue(outcome.doc.startswith("invalid value 'many' for option --count"))

    def testChoiceViolation(self):
        mode = option("--mode", choices=("fast", "safe"))
        self.assertEqual(evaluate(mode, INFO, ["--mode=safe"]), Ok("safe"))
        outcome = evaluate(mode, INFO, ["--mode=slow"])
        self.assertEqual(outcome.code, FaultCode.INVALID_CHOICE)
        self.assertIn("either 'fast' or 'safe'", outcome.doc)

    def testRequiredOptionMissing(self):
        outcome = evaluate(option("--name", required=True), INFO, [])
        self.assertEqual(outcome, UsageFailure("required option --name is missing"))
        self.assertEqual(outcome.code, FaultCode.MISSING_ARGUMENT)

    def testMissingValue(self):
        outcome = evaluate(option("--name"), INFO, ["--name"])
        self.assertEqual(outcome.code, FaultCode.OPTION_VALUE_REQUIRED)

    def testBareValue(self):
        color = option("--color", bare="auto", default="never")
        self.assertTrue(color.descriptors[0].optional)
        self.assertEqual(evaluate(color, INFO, []), Ok("never"))
        self.assertEqual(evaluate(color, INFO, ["--color"]), Ok("auto"))
        self.assertEqual(evaluate(color, INFO, ["--color=always"]), Ok("always"))

    def testBareValueNeverTakesNextToken(self):
        term = option("--color", bare="auto")
        self.assertEqual(evaluate(term, INFO, ["--color", "always"]).code, FaultCode.UNEXPECTED_POSITIONAL)


class TestPositional(TestCase):

    def testDefaults(self):
        descriptor = Positional()
        self.assertEqual(descriptor.index, 0)
        self.assertEqual(descriptor.docv, "ARG")
        self.assertEqual(descriptor.section, "ARGUMENTS")
        self.assertFalse(descriptor.named)
        self.assertFalse(descriptor.rest)

    def testIndexValidated(self):
        with self.assertRaises(ValueError):
            Positional(-1)
        with self.assertRaises(TypeError):
            Positional("0")
        with self.assertRaises(TypeError):
            Positional(True)

    def testCovers(self):
        self.assertTrue(Positional(1).covers(1))
        self.assertFalse(Positional(1).covers(2))
        self.assertTrue(Positional(1, rest=True).covers(5))
        self.assertFalse(Positional(1, rest=True).covers(0))

    def testPositionalTerm(self):
        size = positional(0, type=int, default=0, docv="SIZE")
        self.assertEqual(evaluate(size, INFO, []), Ok(0))
        self.assertEqual(evaluate(size, INFO, ["12"]), Ok(12))
        outcome = evaluate(size, INFO, ["twelve"])
        self.assertEqual(outcome.code, FaultCode.INVALID_VALUE)
        self.assertIn("argument SIZE", outcome.doc)

    def testRequiredPositionalMissing(self):
        outcome = evaluate(positional(0, docv="SRC", required=True), INFO, [])
        self.assertEqual(outcome.doc, "required argument SRC is missing")

    def testPositionalsCollectFromIndex(self):
        files = positionals(0, docv="FILE")
        self.assertEqual(evaluate(files, INFO, ["a", "b", "c"]), Ok(["a", "b", "c"]))
        self.assertEqual(evaluate(files, INFO, []), Ok([]))

    def testPositionalsRequireOneWhenRequired(self):
        outcome = evaluate(positionals(0, docv="FILE", required=True), INFO, [])
        self.assertEqual(outcome.code, FaultCode.MISSING_ARGUMENT)

    def testDoubleDashEndsOptions(self):
        files = positionals(0)
        self.assertEqual(evaluate(files, INFO, ["--", "-v", "--x"]), Ok(["-v", "--x"]))

    def testSingleDashIsPositional(self):
        self.assertEqual(evaluate(positional(0), INFO, ["-"]), Ok("-"))

    def testExtraPositionalRejected(self):
        outcome = evaluate(positional(0), INFO, ["a", "b"])
        self.assertEqual(outcome.code, FaultCode.UNEXPECTED_POSITIONAL)
        self.assertIn("second positional argument", outcome.doc)


if __name__ == "__main__":
    unittest.main()
