"""
Arbor help rendering.

Content contract
- HelpPage gathers, for one resolved context, everything a help screen shows:
  • descr: the context group description,
  • commands: child groups sorted by name, each with its aliases and description,
  • options: every visible option sorted by name, with aliases, kind, default, description,
  • arguments: the positional arguments by 1-based position, with kind and description.
- Empty sections stay empty tuples; printers decide how to say "none available".

Printers
- HelpPrinter is the pluggable formatter interface: print(page).
- DefaultHelpPrinter renders the page with rich. Every section is always shown; an empty
  section prints an explicit marker instead of an empty table:
  "(no sub-commands available)", "(no options available)", "(command expects no arguments)".

Styling
- Palette keys: usage-label, program-name, description-section, section-label,
  command-name, option-name, alias-name, type-tag, default-value, entry-description,
  empty-marker, panel-title.
- Define a mapping named __styles__ in __main__ to override any palette entry.
- Styles only apply when colorful=True; fancy=True wraps the page in a panel.
"""
from abc import ABC, abstractmethod
from collections import defaultdict, namedtuple

from rich.console import Console, Group
from rich.padding import Padding
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import *
from .values import Kind

CommandEntry = namedtuple("CommandEntry", ("name", "aliases", "descr"))
OptionEntry = namedtuple("OptionEntry", ("name", "aliases", "kind", "default", "descr"))
ArgumentEntry = namedtuple("ArgumentEntry", ("position", "kind", "descr"))


class HelpPage:
    """
    Help content for one resolved context (see module docstring for the contract).

    Parameters
    - group: the resolved Group.
    - options: mapping name -> Option of every option visible at that group.
    - arguments: the group's Argument sequence, in binding order.
    - route: Unset | str, the command line prefix that reached the group ("prog sub").
    """
    __slots__ = ("route", "descr", "commands", "options", "arguments")

    def __init__(self, group, options, arguments, /, route=Unset):
        self.route = coalesce(route)
        self.descr = group.descr
        self.commands = tuple(
            CommandEntry(name, tuple(sorted(group.aliases_of(name))), child.descr)
            for name, child in sorted(group.children.items(), key=lambda item: item[0])
        )
        self.options = tuple(
            OptionEntry(name, tuple(sorted(option.aliases)), option.kind, option.default, option.descr)
            for name, option in sorted(options.items(), key=lambda item: item[0])
        )
        self.arguments = tuple(
            ArgumentEntry(position, argument.kind, argument.descr)
            for position, argument in enumerate(arguments, 1)
        )

    @classmethod
    def collect(cls, context, /, route=Unset):
        """
        Build the page from a resolution context (group, options, index).
        """
        return cls(context.group, context.options, context.group.arguments, route=route)

    def __repr__(self):
        return "help-page(route=%r, commands=%d, options=%d, arguments=%d)" % (
            self.route, len(self.commands), len(self.options), len(self.arguments)
        )


class HelpPrinter(ABC):
    """
    Pluggable help formatter: receives a HelpPage and renders it somewhere.
    """

    @abstractmethod
    def print(self, page, /):
        raise NotImplementedError


class DefaultHelpPrinter(HelpPrinter):
    """
    Rich-based printer satisfying the help content contract.

    Parameters
    - console: Unset | rich.console.Console (defaults to a stdout console).
    - fancy: wrap the page in a titled panel.
    - colorful: apply the palette.
    """

    __palette__ = {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "description-section": "italic #A3A3A3",
        "section-label": "bold #FFFFFF",
        "command-name": "bold #36C5F0",
        "option-name": "bold #00E6FF",
        "alias-name": "#00E6FF",
        "type-tag": "bold #FFD600",
        "default-value": "#737373",
        "entry-description": "#9CA3AF",
        "empty-marker": "italic #737373",
        "panel-title": "bold #FF4D94",
    }

    def __init__(self, console=Unset, /, *, fancy=False, colorful=False):
        if not isinstance(console, Console | Unset):
            raise TypeError(f"{type(self).__name__}() 'console' must be a rich console")
        self.console = coalesce(console, Console())
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    def _styler(self):
        styles = defaultdict(str, self.__palette__ | getattr(__import__("__main__"), "__styles__", {}))

        def text(fragment, style=""):
            # Normalize to Text; styles are dropped entirely in non-colorful mode.
            if isinstance(fragment, Text):
                return fragment.copy() if self.colorful else Text(str(fragment))
            return Text(str(fragment), styles[style] if self.colorful else "")

        return text

    def render(self, page, /):
        """
        Build the rich renderable for page without printing it.
        """
        text = self._styler()
        renders = []

        if page.route:
            usage = Text()
            usage.append(text("usage", "usage-label")).append(": ")
            usage.append(text(page.route, "program-name"))
            if page.commands:
                usage.append(" [command]")
            usage.append(" [options]")
            for argument in page.arguments:
                usage.append(" ").append(text(f"<{argument.kind}>", "type-tag"))
            renders.append(usage.append("\n"))

        if page.descr:
            renders.append(text(page.descr, "description-section").append("\n"))

        def section(label, entries, marker, row):
            renders.append(text(label, "section-label").append(":"))
            if not entries:
                renders.append(Text("  ").append(text(marker, "empty-marker")))
                return
            table = Table.grid(padding=(0, 2), pad_edge=False)
            table.add_column(no_wrap=True)
            table.add_column()
            for entry in entries:
                table.add_row(*row(entry))
            renders.append(Padding(table, (0, 0, 0, 2)))

        def command(entry):
            name = Text.assemble(text(entry.name, "command-name"))
            if entry.aliases:
                name.append(" (").append(Text(", ").join(text(alias, "alias-name") for alias in entry.aliases)).append(")")
            return name, text(entry.descr or "", "entry-description")

        def option(entry):
            name = Text.assemble(text("--" + entry.name, "option-name"))
            if entry.aliases:
                name.append(" (").append(Text(", ").join(text("-" + alias, "alias-name") for alias in entry.aliases)).append(")")
            name.append(" ").append(text(f"<{entry.kind}>", "type-tag"))
            descr = Text.assemble(text(entry.descr or "", "entry-description"))
            if entry.name != "help":
                default = repr(entry.default.value) if entry.kind is Kind.STR else str(entry.default)
                descr.append(" " if entry.descr else "").append(text(f"(default: {default})", "default-value"))
            return name, descr

        def argument(entry):
            return Text.assemble(f"{entry.position}. ", text(f"<{entry.kind}>", "type-tag")), text(entry.descr or "", "entry-description")

        section("sub-commands", page.commands, "(no sub-commands available)", command)
        section("options", page.options, "(no options available)", option)
        section("arguments", page.arguments, "(command expects no arguments)", argument)

        renderable = Group(*renders)
        if self.fancy:
            title = f"{page.route.split(' ')[0] if page.route else ''} HELP".strip().upper()
            renderable = Panel(renderable, title=text(f"[ {title} ]", "panel-title"), title_align="left")
        return renderable

    def print(self, page, /):
        self.console.print(self.render(page))


__all__ = (
    "CommandEntry",
    "OptionEntry",
    "ArgumentEntry",
    "HelpPage",
    "HelpPrinter",
    "DefaultHelpPrinter",
)
