"""
Arbor faults (parse errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue. Codes are grouped
  by domain so logs and searches stay predictable.
- ParseError / ParseWarning: base types carrying a message plus read-only options
  (title, code, hint and the context of the failure) that know how to render
  themselves through rich.
- trigger(): surface a fault either by raising it (non-shell) or by printing it on
  stderr and exiting with status 1 (shell).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- DeclarationConflictError: two options visible at one context share a name.
- UnknownOptionError: an occurrence names no visible option (or alias).
- MissingOptionValueError: a non-boolean option was given without a value.
- TypeMismatchError: text could not be converted to the declared kind
  • OptionTypeMismatchError (option values), ArgumentTypeMismatchError (positionals).
- ArityMismatchError: positional token count differs from the declared count.
- ShadowedAliasWarning: a descendant option alias hides an already visible key.

Integration
- The parser raises these at the point of detection; the first one wins.
- Host applications running in shell mode get the rendered form instead of a traceback.
"""
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - declarations (1100x)
      • DECLARATION_CONFLICT
    - options (1111x)
      • UNKNOWN_OPTION, MISSING_OPTION_VALUE, OPTION_TYPE_MISMATCH
    - arguments (1112x)
      • ARGUMENT_TYPE_MISMATCH, ARITY_MISMATCH
    - warnings (12xxx)
      • SHADOWED_ALIAS
    """
    # --- declaration errors (110xx) ---
    DECLARATION_CONFLICT   = 11001

    # --- option errors (111xx) ---
    UNKNOWN_OPTION         = 11111
    MISSING_OPTION_VALUE   = 11112
    OPTION_TYPE_MISMATCH   = 11113

    # --- positional errors (111xx) ---
    ARGUMENT_TYPE_MISMATCH = 11121
    ARITY_MISMATCH         = 11122

    # --- warnings (12xxx) ---
    SHADOWED_ALIAS         = 12001

    def normalize(self):
        """
        return a host-normalized label for this code.

        the host application can provide a __codes__ mapping in __main__ to override
        numeric ids with friendlier labels; otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: "[ prog — code | Title ]"
    - body: the message, then "→ hint" when a hint is present
    - fancy mode wraps everything in a panel titled with the header
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(str(fragment))
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", options.get("prog") or os.path.basename(sys.argv[0]))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(code.normalize() if code is not None else "?", "code"),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    parts = [message]
    if hint := options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class ParseError(Exception):
    """
    base class of every parse failure.

    attributes
    - message: human-readable, lowercased, one sentence (also str(error)).
    - options: read-only mapping with title, code, hint and failure context
      (e.g. name, value, kind, position, expected, actual).
    """

    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, self.__palette__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeclarationConflictError(ParseError): ...
class UnknownOptionError(ParseError): ...
class MissingOptionValueError(ParseError): ...
class TypeMismatchError(ParseError): ...
class OptionTypeMismatchError(TypeMismatchError): ...
class ArgumentTypeMismatchError(TypeMismatchError): ...
class ArityMismatchError(ParseError): ...


class ParseWarning(Warning):
    """
    base class of every non-fatal parse notice (same shape as ParseError).
    """

    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, self.__palette__)

    def __trigger__(self):
        if not self.options.get("shell", False):
            warnings.warn(self, stacklevel=3)
            return
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedAliasWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via __replace__(**options) first.
    - errors: raised when shell is false, otherwise printed on stderr followed by exit(1).
    - warnings: emitted through warnings.warn when shell is false, otherwise printed.

    typical options
    - shell, fancy, colorful, prog.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation for a fault code, read from a __docs__ mapping in __main__.

    returns None when the host application documents nothing for this code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "DeclarationConflictError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "TypeMismatchError",
    "OptionTypeMismatchError",
    "ArgumentTypeMismatchError",
    "ArityMismatchError",
    "ParseWarning",
    "ShadowedAliasWarning",
    "trigger",
    "getdoc",
)
