"""
Printers module behavioral tests (help content and default rendering).

Scope
- Validate HelpPage content: sorted listings, aliases, type tags, 1-based positions.
- Validate the default printer: usage line, sections, defaults, empty-section markers.
- Validate styling switches (fancy panel) and the pluggable printer interface.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured with a file-backed rich console (no terminal, no colors).
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from arbor import (
    Group,
    Option,
    Argument,
    Kind,
    Value,
    HelpPage,
    HelpPrinter,
    DefaultHelpPrinter,
    resolve,
)


def noop(arguments, options):
    pass


def render(group, argv, /, **options):
    stream = io.StringIO()
    page = HelpPage.collect(resolve(group, argv), route=" ".join(argv))
    DefaultHelpPrinter(Console(file=stream, width=120), **options).print(page)
    return stream.getvalue()


class TestHelpPage(TestCase):
    """Behavioral tests for HelpPage content."""

    def setUp(self):
        self.root = (
            Group(noop, descr="Simple tool")
            .add_option(Option("zeta", Kind.STR, "z"))
            .add_option(Option("alpha", Kind.INT, "b", "a", default=3))
            .add_argument(Argument(Kind.STR, descr="Test text"))
            .add_argument(Argument(Kind.FLOAT))
            .add_child("test", Group(noop, descr="Run the tests"), "t")
            .add_child("build", Group(noop), "make", "b")
        )

    def testCommandsSortedWithSortedAliases(self):
        page = HelpPage.collect(resolve(self.root, ["prog"]))
        self.assertEqual([entry.name for entry in page.commands], ["build", "test"])
        self.assertEqual(page.commands[0].aliases, ("b", "make"))
        self.assertEqual(page.commands[1].descr, "Run the tests")
        self.assertIsNone(page.commands[0].descr)

    def testOptionsSortedIncludingHelp(self):
        page = HelpPage.collect(resolve(self.root, ["prog"]))
        self.assertEqual([entry.name for entry in page.options], ["alpha", "help", "zeta"])
        alpha = page.options[0]
        self.assertEqual(alpha.aliases, ("a", "b"))
        self.assertIs(alpha.kind, Kind.INT)
        self.assertEqual(alpha.default, Value(Kind.INT, 3))

    def testArgumentsByPosition(self):
        page = HelpPage.collect(resolve(self.root, ["prog"]))
        self.assertEqual([(entry.position, entry.kind) for entry in page.arguments], [(1, Kind.STR), (2, Kind.FLOAT)])

    def testChildPageShowsInheritedOptions(self):
        page = HelpPage.collect(resolve(self.root, ["prog", "t"]), route="prog t")
        self.assertEqual(page.route, "prog t")
        self.assertEqual(page.descr, "Run the tests")
        self.assertEqual([entry.name for entry in page.options], ["alpha", "help", "zeta"])
        self.assertEqual(page.commands, ())
        self.assertEqual(page.arguments, ())


class TestDefaultHelpPrinter(TestCase):
    """Behavioral tests for the rich-based default printer."""

    def testFullPage(self):
        root = (
            Group(noop, descr="Simple tool")
            .add_option(Option("the-truth", Kind.INT, "t", default=42, descr="The truth about everything"))
            .add_argument(Argument(Kind.STR, descr="Test text"))
            .add_child("test", Group(noop, descr="Run the tests"), "t")
        )
        output = render(root, ["prog"])
        self.assertIn("usage: prog [command] [options] <string>", output)
        self.assertIn("Simple tool", output)
        self.assertIn("sub-commands:", output)
        self.assertIn("test (t)", output)
        self.assertIn("Run the tests", output)
        self.assertIn("--the-truth (-t) <integer>", output)
        self.assertIn("The truth about everything (default: 42)", output)
        self.assertIn("--help <boolean>", output)
        self.assertIn("show this help message and exit", output)
        self.assertIn("1. <string>", output)
        self.assertIn("Test text", output)

    def testEmptySectionMarkers(self):
        output = render(Group(noop), ["prog"])
        self.assertIn("(no sub-commands available)", output)
        self.assertIn("(command expects no arguments)", output)
        self.assertNotIn("(no options available)", output)

    def testEmptyOptionsMarker(self):
        page = HelpPage(Group(noop), {}, ())
        stream = io.StringIO()
        DefaultHelpPrinter(Console(file=stream, width=120)).print(page)
        self.assertIn("(no options available)", stream.getvalue())

    def testStringDefaultsAreQuoted(self):
        root = Group(noop).add_option(Option("name", Kind.STR, default="world"))
        self.assertIn("(default: 'world')", render(root, ["prog"]))

    def testNoUsageWithoutRoute(self):
        page = HelpPage.collect(resolve(Group(noop), ["prog"]))
        stream = io.StringIO()
        DefaultHelpPrinter(Console(file=stream, width=120)).print(page)
        self.assertNotIn("usage:", stream.getvalue())

    def testFancyWrapsInPanel(self):
        output = render(Group(noop), ["prog"], fancy=True)
        self.assertIn("[ PROG HELP ]", output)

    def testColorfulKeepsContent(self):
        output = render(Group(noop).add_option(Option("count", Kind.INT)), ["prog"], colorful=True)
        self.assertIn("--count <integer>", output)

    def testConsoleMustBeRich(self):
        with self.assertRaises(TypeError):
            DefaultHelpPrinter(io.StringIO())


class TestHelpPrinterInterface(TestCase):
    """Behavioral tests for the pluggable printer base."""

    def testAbstract(self):
        with self.assertRaises(TypeError):
            HelpPrinter()

    def testCustomPrinter(self):
        class Names(HelpPrinter):
            def print(self, page, /):
                self.names = [entry.name for entry in page.options]

        printer = Names()
        printer.print(HelpPage.collect(resolve(Group(noop), ["prog"])))
        self.assertEqual(printer.names, ["help"])


if __name__ == "__main__":
    unittest.main()
