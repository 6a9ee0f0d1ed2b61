"""
Presentation behavioral tests (streams, exit statuses, help resolution).

Scope
- Validate the stream and exit status chosen for every outcome.
- Validate usage/message rendering, hints and fault code labels.
- Validate help-by-name resolution, including unknown command names.

Conventions
- Test method names follow CamelCase per project convention.
- Streams are io.StringIO instances; help is rendered in plain format.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from termline import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    Evaluation,
    FaultCode,
    HelpFormat,
    HelpRequested,
    MessageFailure,
    Ok,
    TermInfo,
    UsageFailure,
    add_standard_options,
    evaluate_choice,
    evaluate_in,
    EvalContext,
    flag,
    positional,
    lift,
    present,
    pure,
    resolve_help,
)


class TestPresent(TestCase):

    def setUp(self):
        self.stdout, self.stderr = io.StringIO(), io.StringIO()
        self.term = lift(lambda verbose, source: source, flag("-v", doc="Talk more."), positional(0, docv="SRC"))
        self.info = TermInfo("tool", version="1.2.3", doc="Make things.")

    def present(self, args, term=None):
        term = term or self.term
        evaluation = evaluate_in(EvalContext.single(term, self.info), term, args)
        return present(evaluation, stdout=self.stdout, stderr=self.stderr)

    def testSuccessWritesNothing(self):
        self.assertEqual(self.present(["a"]), EXIT_SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "")
        self.assertEqual(self.stderr.getvalue(), "")

    def testUsageFailure(self):
        self.assertEqual(self.present(["--nope"]), EXIT_FAILURE)
        self.assertEqual(self.stdout.getvalue(), "")
        lines = self.stderr.getvalue().splitlines()
        self.assertEqual(lines[0], "tool: unknown option '--nope' [%d]" % FaultCode.UNKNOWN_OPTION)
        self.assertIn("Usage: tool [OPTION]... [SRC]", lines)
        self.assertEqual(lines[-1], "Try 'tool --help' for more information.")

    def testUsageHint(self):
        self.present(["--verbos"])
        self.assertIn(" → did you mean '--version'?", self.stderr.getvalue().splitlines())

    def testMessageFailure(self):
        term = pure(None).map(lambda _: None)
        evaluation = Evaluation(MessageFailure("disk full"), EvalContext.single(term, self.info))
        self.assertEqual(present(evaluation, stdout=self.stdout, stderr=self.stderr), EXIT_FAILURE)
        self.assertEqual(self.stderr.getvalue(), "tool: disk full\n")

    def testFaultCodeLabelsFromMain(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_OPTION: "E-OPT"}, create=True):
            self.present(["--nope"])
        self.assertTrue(self.stderr.getvalue().startswith("tool: unknown option '--nope' [E-OPT]\n"))

    def testVersion(self):
        self.assertEqual(self.present(["--version"]), EXIT_SUCCESS)
        self.assertEqual(self.stdout.getvalue(), "1.2.3\n")
        self.assertEqual(self.stderr.getvalue(), "")

    def testPlainHelp(self):
        self.assertEqual(self.present(["--help=plain"]), EXIT_SUCCESS)
        text = self.stdout.getvalue()
        self.assertTrue(text.startswith("NAME\n       tool - Make things.\n"))
        self.assertIn("       -v  Talk more.", text)
        self.assertIn("--help[=FMT]", text)
        self.assertEqual(self.stderr.getvalue(), "")

    def testGroffHelp(self):
        self.present(["--help=groff"])
        self.assertIn('.TH "TOOL" 1', self.stdout.getvalue())

    def testAugmentedContextRendersStandardOptionsOnce(self):
        _, _, context = add_standard_options(EvalContext.single(self.term, self.info))
        _, _, context = add_standard_options(context)
        evaluation = evaluate_in(context, self.term, ["--help=plain"])
        self.assertEqual(present(evaluation, stdout=self.stdout, stderr=self.stderr), EXIT_SUCCESS)
        text = self.stdout.getvalue()
        self.assertEqual(text.count("--help"), 1)
        self.assertEqual(text.count("--version"), 1)

    def testAugmentedContextUsageMentionsHelpOnce(self):
        _, _, context = add_standard_options(EvalContext.single(self.term, self.info))
        evaluation = evaluate_in(context, self.term, ["--nope"])
        self.assertEqual(present(evaluation, stdout=self.stdout, stderr=self.stderr), EXIT_FAILURE)
        self.assertEqual(self.stderr.getvalue().count("--help"), 1)

    def testPresentRejectsForeignOutcomes(self):
        with self.assertRaises(TypeError):
            present(Evaluation("oops", EvalContext.single(self.term, self.info)))


class TestChoiceHelp(TestCase):

    def setUp(self):
        self.stdout, self.stderr = io.StringIO(), io.StringIO()
        self.main = (pure("main"), TermInfo("tool", doc="Make things."))
        self.choices = [
            (pure("build"), TermInfo("build", doc="Build it.")),
            (pure("bundle"), TermInfo("bundle", doc="Bundle it.")),
        ]

    def present(self, evaluation):
        return present(evaluation, stdout=self.stdout, stderr=self.stderr)

    def testHelpForChosenCommand(self):
        status = self.present(evaluate_choice(self.main, self.choices, ["build", "--help=plain"]))
        self.assertEqual(status, EXIT_SUCCESS)
        self.assertIn("tool-build - Build it.", self.stdout.getvalue())

    def testMainHelpListsCommands(self):
        self.present(evaluate_choice(self.main, self.choices, ["--help=plain"]))
        text = self.stdout.getvalue()
        self.assertIn("COMMANDS", text)
        self.assertIn("       build", text)
        self.assertIn("Bundle it.", text)

    def testHelpRequestedByName(self):
        evaluation = evaluate_choice(self.main, self.choices, [])
        evaluation = evaluation._replace(outcome=HelpRequested(HelpFormat.PLAIN, "bundle"))
        self.assertEqual(self.present(evaluation), EXIT_SUCCESS)
        self.assertIn("tool-bundle - Bundle it.", self.stdout.getvalue())

    def testHelpForUnknownCommandIsAUsageFailure(self):
        evaluation = evaluate_choice(self.main, self.choices, [])
        evaluation = evaluation._replace(outcome=HelpRequested(HelpFormat.PLAIN, "nosuch"))
        self.assertEqual(self.present(evaluation), EXIT_FAILURE)
        self.assertEqual(self.stdout.getvalue(), "")
        self.assertIn("unknown command 'nosuch'", self.stderr.getvalue())

    def testGroffHelpForUnknownCommandIsAUsageFailure(self):
        evaluation = evaluate_choice(self.main, self.choices, [])
        evaluation = evaluation._replace(outcome=HelpRequested(HelpFormat.GROFF, "nosuch"))
        self.assertEqual(self.present(evaluation), EXIT_FAILURE)
        self.assertEqual(self.stdout.getvalue(), "")
        lines = self.stderr.getvalue().splitlines()
        self.assertEqual(lines[0], "tool: unknown command 'nosuch' [%d]" % FaultCode.UNKNOWN_COMMAND)

    def testAmbiguousCommand(self):
        self.assertEqual(self.present(evaluate_choice(self.main, self.choices, ["bu"])), EXIT_FAILURE)
        lines = self.stderr.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("tool: command 'bu' ambiguous, could be either 'build' or 'bundle'"))
        self.assertEqual(lines[-1], "Try 'tool --help' or 'tool COMMAND --help' for more information.")

    def testUsageFailureInCommand(self):
        self.present(evaluate_choice(self.main, self.choices, ["build", "--nope"]))
        self.assertEqual(self.stderr.getvalue().splitlines()[-1], "Try 'tool build --help' for more information.")


class TestResolveHelp(TestCase):

    def setUp(self):
        main = (pure(None), TermInfo("tool"))
        self.context = evaluate_choice(main, [(pure(None), TermInfo("build"))], []).context

    def testNoTargetKeepsContext(self):
        self.assertEqual(resolve_help(self.context, None), Ok(self.context))

    def testTargetSelectsChoice(self):
        resolved = resolve_help(self.context, "build").value
        self.assertEqual(resolved.command.name, "build")
        self.assertIs(resolved.main, self.context.main)

    def testTargetMustBeExact(self):
        outcome = resolve_help(self.context, "bui")
        self.assertEqual(outcome, UsageFailure("unknown command 'bui'"))
        self.assertEqual(outcome.code, FaultCode.UNKNOWN_COMMAND)


if __name__ == "__main__":
    unittest.main()
