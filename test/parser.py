"""
Parser behavioral tests (dispatch, additional input, faults, write-back, reports).

Scope
- End-to-end switch scenarios over full parse passes.
- Registration conflicts and lookups.
- Unknown/malformed/unexpected tokens and shell-mode rendering.
- Declarative settings objects parsed end to end.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from clparse import (
    CommandLineParser,
    SwitchArgument,
    ValueArgument,
    Switch,
    Value,
    Binding,
    BindingError,
    FaultCode,
    MalformedTokenError,
    UnknownArgumentError,
    UnexpectedTokenError,
)


def capture():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestSwitchScenarios(TestCase):

    def testAbsentSwitchKeepsDefault(self):
        verbose = SwitchArgument("v", "verbose", default_value=False)
        CommandLineParser([verbose]).parse([])
        self.assertFalse(verbose.value)
        self.assertFalse(verbose.parsed)

    def testSingleOccurrence(self):
        verbose = SwitchArgument("v", "verbose", default_value=False)
        CommandLineParser([verbose]).parse(["-v"])
        self.assertTrue(verbose.value)
        self.assertTrue(verbose.parsed)

    def testSingleOccurrenceFromTrue(self):
        verbose = SwitchArgument("v", "verbose", default_value=True)
        CommandLineParser([verbose]).parse(["--verbose"])
        self.assertFalse(verbose.value)

    def testTwoOccurrencesToggleBack(self):
        verbose = SwitchArgument("v", "verbose", default_value=False)
        CommandLineParser([verbose]).parse(["-v", "--verbose"])
        self.assertFalse(verbose.value)
        self.assertTrue(verbose.parsed)

    def testEachPassStartsFromDefault(self):
        verbose = SwitchArgument("v")
        parser = CommandLineParser([verbose])
        parser.parse(["-v"])
        self.assertTrue(verbose.value)
        parser.parse([])
        self.assertFalse(verbose.value)
        self.assertFalse(verbose.parsed)

    def testMixedArguments(self):
        verbose = SwitchArgument("v", "verbose")
        count = ValueArgument("n", "count", type=int, default_value=1)
        CommandLineParser([verbose, count]).parse(["-n", "3", "-v"])
        self.assertTrue(verbose.value)
        self.assertEqual(count.value, 3)


class TestRegistration(TestCase):

    def testDuplicateShortNameRejected(self):
        parser = CommandLineParser([SwitchArgument("v", "verbose")])
        with self.assertRaises(ValueError):
            parser.add(SwitchArgument("v", "version"))

    def testDuplicateLongNameRejected(self):
        parser = CommandLineParser([SwitchArgument("v", "verbose")])
        with self.assertRaises(ValueError):
            parser.add(SwitchArgument(long_name="verbose"))

    def testConflictingBatchRegistersNothing(self):
        class Declared:
            quiet: bool = Switch("q", "quiet")
            verbose: bool = Switch("v", "verbose")

        version = SwitchArgument("v", "version")
        parser = CommandLineParser([version])
        with self.assertRaises(ValueError):
            parser.extract_argument_attributes(Declared())
        self.assertEqual(parser.arguments, (version,))
        self.assertIsNone(parser.lookup("-q"))
        self.assertIs(parser.lookup("-v"), version)

    def testDuplicateInsideBatchRegistersNothing(self):
        parser = CommandLineParser()
        with self.assertRaises(ValueError):
            parser.extend([SwitchArgument("q"), SwitchArgument("v", "verbose"), SwitchArgument(long_name="verbose")])
        self.assertEqual(parser.arguments, ())
        self.assertIsNone(parser.lookup("-q"))

    def testNonArgumentInBatchRegistersNothing(self):
        parser = CommandLineParser()
        with self.assertRaises(TypeError):
            parser.extend([SwitchArgument("q"), "-v"])
        self.assertEqual(parser.arguments, ())

    def testAddRejectsNonArguments(self):
        with self.assertRaises(TypeError):
            CommandLineParser().add("-v")

    def testLookup(self):
        verbose = SwitchArgument("v", "verbose")
        parser = CommandLineParser([verbose])
        self.assertIs(parser.lookup("-v"), verbose)
        self.assertIs(parser.lookup("--verbose"), verbose)
        self.assertIsNone(parser.lookup("--quiet"))

    def testArgumentsSnapshot(self):
        verbose = SwitchArgument("v")
        parser = CommandLineParser([verbose])
        self.assertEqual(parser.arguments, (verbose,))

    def testProgDefaultsAndOverride(self):
        self.assertTrue(CommandLineParser().prog)
        self.assertEqual(CommandLineParser(prog="tool").prog, "tool")

    def testUnknownMessageKeysRejected(self):
        with self.assertRaises(ValueError):
            CommandLineParser(messages={"no-such-key": "{name}"})


class TestAdditionalInput(TestCase):

    def testRejectedByDefault(self):
        parser = CommandLineParser([SwitchArgument("v")])
        with self.assertRaises(UnexpectedTokenError) as context:
            parser.parse(["file.txt"])
        self.assertEqual(context.exception.code, FaultCode.UNEXPECTED_TOKEN)
        self.assertEqual(context.exception.options["prog"], parser.prog)

    def testCollectedWhenAccepted(self):
        verbose = SwitchArgument("v")
        parser = CommandLineParser([verbose], accept_additional=True)
        parser.parse(["a.txt", "-v", "b.txt", "-"])
        self.assertEqual(parser.additional, ("a.txt", "b.txt", "-"))
        self.assertTrue(verbose.value)

    def testDoubleDashEndsOptions(self):
        verbose = SwitchArgument("v")
        parser = CommandLineParser([verbose], accept_additional=True)
        parser.parse(["--", "-v", "--verbose"])
        self.assertEqual(parser.additional, ("-v", "--verbose"))
        self.assertFalse(verbose.parsed)

    def testNegativeNumbersAreNotOptions(self):
        parser = CommandLineParser([SwitchArgument("v")], accept_additional=True)
        parser.parse(["-5", "-v", "-1.5"])
        self.assertEqual(parser.additional, ("-5", "-1.5"))

    def testAdditionalClearedBetweenPasses(self):
        parser = CommandLineParser(accept_additional=True)
        parser.parse(["a"])
        parser.parse(["b"])
        self.assertEqual(parser.additional, ("b",))


class TestFaults(TestCase):

    def testUnknownOptionSuggestsCloseMatch(self):
        parser = CommandLineParser([SwitchArgument("v", "verbose")])
        with self.assertRaises(UnknownArgumentError) as context:
            parser.parse(["--verbos"])
        self.assertEqual(context.exception.options["suggestions"], ["--verbose"])
        self.assertIn("--verbose", context.exception.options["hint"])

    def testMalformedOption(self):
        parser = CommandLineParser([SwitchArgument("v"), SwitchArgument("q")])
        with self.assertRaises(MalformedTokenError):
            parser.parse(["-vq"])

    def testInlineValueIsMalformed(self):
        parser = CommandLineParser([ValueArgument("o", "output")])
        with self.assertRaises(MalformedTokenError):
            parser.parse(["--output=x"])

    def testBindingFailureAbortsPass(self):
        verbose = SwitchArgument("v", "verbose")
        verbose.bind = Binding(object(), "missing")
        parser = CommandLineParser([verbose], prog="tool")
        with self.assertRaises(BindingError) as context:
            parser.parse(["-v"])
        self.assertEqual(context.exception.options["field"], "missing")
        self.assertIsInstance(context.exception.__cause__, AttributeError)
        self.assertEqual(context.exception.options["prog"], "tool")

    def testShellModeRendersAndExits(self):
        console = capture()
        parser = CommandLineParser([SwitchArgument("v")], prog="tool", console=console, shell=True, colorful=False)
        with self.assertRaises(SystemExit) as context:
            parser.parse(["--nope"])
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("tool", output)
        self.assertIn(str(int(FaultCode.UNKNOWN_ARGUMENT)), output)
        self.assertIn("--nope", output)

    def testCustomMessages(self):
        parser = CommandLineParser(messages={"unexpected-token": "what is {token}?"})
        with self.assertRaises(UnexpectedTokenError) as context:
            parser.parse(["x"])
        self.assertEqual(str(context.exception), "what is x?")


class Settings:
    verbose: bool = Switch("v", "verbose")
    count: int = Value("n", "count", type=int, default=1)


class TestDeclarativeParsing(TestCase):

    def testSettingsObjectIsUpdated(self):
        settings = Settings()
        parser = CommandLineParser()
        arguments = parser.extract_argument_attributes(settings)
        self.assertEqual(parser.arguments, tuple(arguments))
        parser.parse(["--verbose", "--count", "5"])
        self.assertIs(settings.verbose, True)
        self.assertEqual(settings.count, 5)

    def testDefaultsWrittenWhenAbsent(self):
        settings = Settings()
        parser = CommandLineParser()
        parser.extract_argument_attributes(settings)
        parser.parse(["-v"])
        parser.parse([])
        self.assertIs(settings.verbose, False)
        self.assertEqual(settings.count, 1)


class TestReports(TestCase):

    def testShowParsedArgumentsOnlyReportsParsed(self):
        console = capture()
        verbose = SwitchArgument("v", "verbose")
        quiet = SwitchArgument("q", "quiet")
        parser = CommandLineParser([verbose, quiet], console=console)
        parser.parse(["-v"])
        parser.show_parsed_arguments()
        self.assertEqual(console.file.getvalue(), "argument verbose, value: 1\n")

    def testReportUsesParserMessages(self):
        console = capture()
        verbose = SwitchArgument("v", "verbose")
        parser = CommandLineParser([verbose], console=console, messages={"switch-value": "{name}: {value}"})
        parser.parse(["-v", "-v"])
        parser.show_parsed_arguments()
        self.assertEqual(console.file.getvalue(), "verbose: 0\n")


if __name__ == "__main__":
    unittest.main()
