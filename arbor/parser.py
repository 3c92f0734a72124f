"""
Arbor parser: resolve a raw argument vector against a group tree and dispatch.

Phases (one synchronous pass per call)
- resolve: walk the tree from the root, following successive tokens as child names or
  aliases and accumulating the options visible at each depth. The first token that is
  not a child of the current group fixes the context; it and everything after it are
  left for option/argument parsing.
- split: classify the remaining tokens. A token starting with "-" is an option
  occurrence, anything else is positional. Occurrences take their value inline
  ("--name=value", split on the first "="), from the next token ("--name value"), or,
  for boolean options only, implicitly ("--name" followed by nothing or another option).
- parse_options: convert every raw value with its option kind, then fill each option
  that was not given with its declared default (one entry per visible option, always).
- help short-circuit: when the implicit "help" option is true, the help page for the
  context is printed and the consumer is not called.
- bind: require exactly as many positional tokens as the context declares arguments and
  convert them in order.
- dispatch: take the context consumer out of its group and call it once with
  (arguments, options).

Failures raise arbor.faults.ParseError subclasses at the point of detection; the first
one aborts the pass. Nothing in this module exits the process except
parse_from_environment(..., shell=True), which maps faults to a rendered message and
exit status 1.

Example
    >>> root = Group(lambda arguments, options: print(arguments, options))
    >>> root.add_option(Option("the-truth", Kind.INT, default=42)).add_argument(Argument(Kind.STR))
    >>> parse(root, ["prog", "hello"])
"""
import difflib
import functools
import os.path
import sys
import warnings
from collections import deque, namedtuple
from collections.abc import Mapping, Sequence
from warnings import catch_warnings

from .arguments import Option
from .faults import *
from .groups import Group
from .printers import DefaultHelpPrinter, HelpPage
from .utils import *
from .values import Kind

PREFIX = "-"
SEPARATOR = "="

HELP = Option("help", Kind.BOOL, default=False, descr="show this help message and exit")

Context = namedtuple("Context", ("group", "options", "index"))
Context.__doc__ = """
Result of resolve(): the resolved group, the options visible there (OptionSet) and the
argv index where option/argument parsing starts.
"""


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position ("first", "12th", ...).
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"
    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _hint(route, what, /):
    if route:
        return "run '%s --help' to see %s" % (route, what)
    return "use --help to see %s" % what


class OptionSet(Mapping):
    """
    Options visible at one depth of the tree (the anticipated option set).

    Mapping of canonical name -> Option, plus an alias index used by lookup().
    Built fresh for every parse; never shared between calls.

    Rules
    - A canonical name may appear once: adding a second option with a visible name
      raises DeclarationConflictError.
    - Canonical names win over aliases on lookup. When an alias added later equals a
      visible key, the newer alias wins among aliases and a ShadowedAliasWarning is emitted.
    """

    def __init__(self):
        self._options = {}
        self._aliases = {}

    def __getitem__(self, name):
        return self._options[name]

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return "option-set(%s)" % ", ".join(map(repr, self._options))

    @property
    def keys_and_aliases(self):
        return (*self._options, *self._aliases)

    def add(self, option, /, group=Unset):
        """
        Make option visible; group (when given) is the declaring group, used in messages.
        """
        if not isinstance(option, Option):
            raise TypeError("add() argument must be an option descriptor")

        where = " ".join(step.name for step in group.path[1:]) if group else ""
        if option.name in self._options:
            raise DeclarationConflictError(
                "option %r is declared multiple times along the command path" % option.name,
                title="declaration conflict",
                code=FaultCode.DECLARATION_CONFLICT,
                name=option.name,
                group=coalesce(group),
                hint="rename or remove the %r option declared on %s" % (
                    option.name, "'%s'" % where if where else "the root command"
                ),
                docs=getdoc(FaultCode.DECLARATION_CONFLICT),
            )

        shadowed = [key for key in option.aliases if key in self._options or key in self._aliases]
        if option.name in self._aliases:
            shadowed.insert(0, option.name)
        for key in shadowed:
            warnings.warn(ShadowedAliasWarning(
                "option key %r of %r shadows an already visible key" % (key, option.name),
                title="shadowed alias",
                code=FaultCode.SHADOWED_ALIAS,
                name=option.name,
                alias=key,
                group=coalesce(group),
                hint="give %r a distinct alias to keep both options reachable" % option.name,
                docs=getdoc(FaultCode.SHADOWED_ALIAS),
            ), stacklevel=4)

        self._options[option.name] = option
        self._aliases.update(dict.fromkeys(option.aliases, option.name))

    def merge(self, group, /):
        """
        Make every option declared by group visible (in declaration order).
        """
        for option in group.options.values():
            self.add(option, group)

    def lookup(self, key, /):
        """
        Return the visible option reached by key (canonical name first, then alias), else None.
        """
        try:
            return self._options[key]
        except KeyError:
            pass
        try:
            return self._options[self._aliases[key]]
        except KeyError:
            return None


def _sanitize_argv(argv, caller, /):
    if isinstance(argv, str) or not isinstance(argv, Sequence):
        raise TypeError(f"{caller}() argv must be a sequence of strings")
    for token in argv:
        if not isinstance(token, str):
            raise TypeError(f"{caller}() argv must be a sequence of strings")
    return list(argv)


def resolve(group, argv, /):
    """
    Find the command context invoked by argv.

    Parameters
    - group: the root Group.
    - argv: sequence of tokens; argv[0] is the program name and never matched.

    Returns
    - Context(group, options, index): the resolved group, its OptionSet (implicit help,
      then every ancestor's options top-down, then its own) and the index of the first
      token left for split().

    Raises
    - DeclarationConflictError: an option name is visible twice at the resolved depth.
    """
    if not isinstance(group, Group):
        raise TypeError("resolve() first argument must be a group")
    argv = _sanitize_argv(argv, "resolve")

    options = OptionSet()
    options.add(HELP)
    options.merge(group)

    index = 1
    for token in argv[1:]:
        if (child := group.route(token)) is None:
            break  # context found, the rest belongs to options and arguments
        options.merge(group := child)
        index += 1

    return Context(group, options, index)


def _lookup(options, key, token, route, /):
    if (option := options.lookup(key)) is not None:
        return option

    suggestions = difflib.get_close_matches(key, options.keys_and_aliases, 3)
    try:
        hint = "did you mean %r? you can also %s" % (
            PREFIX * 2 + suggestions[0], _hint(route, "the available options")
        )
    except IndexError:
        hint = _hint(route, "the available options")

    raise UnknownOptionError(
        "option %r is unknown in this command context" % token,
        title="unknown option",
        code=FaultCode.UNKNOWN_OPTION,
        input=token,
        name=key,
        suggestions=suggestions,
        hint=hint,
        docs=getdoc(FaultCode.UNKNOWN_OPTION),
    )


def split(tokens, options, /, *, route=Unset):
    """
    Split raw tokens into option occurrences and positional tokens.

    Parameters
    - tokens: the argv slice starting at the resolution cut point.
    - options: the OptionSet of the resolved context.
    - route: Unset | str, command line prefix used in hints.

    Returns
    - (raw_options, raw_arguments): dict canonical name -> raw text (a repeated option
      keeps its last value) and the list of positional tokens in order.

    Raises
    - UnknownOptionError: an occurrence names no visible option or alias.
    - MissingOptionValueError: a non-boolean option has neither inline nor next-token value.
    """
    raw_options = {}
    raw_arguments = []

    tokens = deque(tokens)
    while tokens:
        token = tokens.popleft()

        if not token.startswith(PREFIX):
            raw_arguments.append(token)
            continue

        body = token.lstrip(PREFIX)
        if SEPARATOR in body:
            # inline form: everything after the first separator is the value
            key, value = body.split(SEPARATOR, 1)
            option = _lookup(options, key, token, route)
        else:
            option = _lookup(options, body, token, route)
            if not tokens or tokens[0].startswith(PREFIX):
                if option.kind is not Kind.BOOL:
                    raise MissingOptionValueError(
                        "option %r expects a %s value but none was given" % (token, option.kind),
                        title="missing option value",
                        code=FaultCode.MISSING_OPTION_VALUE,
                        input=token,
                        name=option.name,
                        kind=option.kind,
                        hint="use %s%s=<%s> or %s%s <%s>" % (
                            PREFIX * 2, option.name, option.kind, PREFIX * 2, option.name, option.kind
                        ),
                        docs=getdoc(FaultCode.MISSING_OPTION_VALUE),
                    )
                value = "true"
            else:
                value = tokens.popleft()

        raw_options[option.name] = value

    return raw_options, raw_arguments


def parse_options(raw_options, options, /, *, route=Unset):
    """
    Convert raw option values and complete the mapping with defaults.

    Returns
    - dict canonical name -> Value with exactly one entry per option in options.

    Raises
    - UnknownOptionError: a raw key is neither a visible name nor an alias.
    - OptionTypeMismatchError: a raw value does not convert to the option kind.
    """
    values = {}

    for key, raw in raw_options.items():
        option = _lookup(options, key, PREFIX * 2 + key, route)
        try:
            values[option.name] = option.kind.parse(raw)
        except ValueError:
            raise OptionTypeMismatchError(
                "expected value %r of option '%s%s' to be of type %r" % (raw, PREFIX * 2, option.name, str(option.kind)),
                title="option type mismatch",
                code=FaultCode.OPTION_TYPE_MISMATCH,
                name=option.name,
                value=raw,
                kind=option.kind,
                hint="give %s%s a valid %s value" % (PREFIX * 2, option.name, option.kind),
                docs=getdoc(FaultCode.OPTION_TYPE_MISMATCH),
            ) from None

    for name, option in options.items():
        if name not in values:
            values[name] = option.default

    return values


def bind(arguments, tokens, /, *, route=Unset):
    """
    Bind positional tokens to argument descriptors by position.

    Returns
    - list of Value in declaration order.

    Raises
    - ArityMismatchError: len(tokens) != len(arguments).
    - ArgumentTypeMismatchError: a token does not convert to its argument kind.
    """
    arguments = tuple(arguments)
    tokens = tuple(tokens)

    if len(tokens) != len(arguments):
        raise ArityMismatchError(
            "expected %d %s but got %d" % (len(arguments), pluralize("argument", len(arguments)), len(tokens)),
            title="arity mismatch",
            code=FaultCode.ARITY_MISMATCH,
            expected=len(arguments),
            actual=len(tokens),
            hint=_hint(route, "the expected arguments"),
            docs=getdoc(FaultCode.ARITY_MISMATCH),
        )

    values = []
    for position, (argument, token) in enumerate(zip(arguments, tokens), 1):
        try:
            values.append(argument.kind.parse(token))
        except ValueError:
            raise ArgumentTypeMismatchError(
                "expected argument %r at position %d (%s) to be of type %r" % (
                    token, position, _ordinal(position), str(argument.kind)
                ),
                title="argument type mismatch",
                code=FaultCode.ARGUMENT_TYPE_MISMATCH,
                position=position,
                value=token,
                kind=argument.kind,
                hint="give the %s argument a valid %s value" % (_ordinal(position), argument.kind),
                docs=getdoc(FaultCode.ARGUMENT_TYPE_MISMATCH),
            ) from None

    return values


def _prepare(group, argv, printer, /):
    """
    Internal: run every parsing phase; return the dispatch thunk, or None once help was printed.
    """
    if printer is not Unset and not callable(getattr(printer, "print", None)):
        raise TypeError("parse() 'printer' must provide a print(page) method")
    argv = _sanitize_argv(argv, "parse")

    context = resolve(group, argv)
    route = " ".join((os.path.basename(argv[0]), *argv[1:context.index])) if argv else Unset

    raw_options, raw_arguments = split(argv[context.index:], context.options, route=route)
    values = parse_options(raw_options, context.options, route=route)

    if values[HELP.name].as_bool():
        printer = coalesce(printer, DefaultHelpPrinter())
        printer.print(HelpPage.collect(context, route=route))
        return None

    arguments = bind(context.group.arguments, raw_arguments, route=route)
    consumer = context.group.take_consumer()
    return functools.partial(consumer, arguments, values)


def parse(group, argv, /, *, printer=Unset):
    """
    Parse argv against the tree rooted at group and dispatch to the resolved consumer.

    Parameters
    - group: the root Group.
    - argv: sequence of strings, program name at index 0.
    - printer: Unset | HelpPrinter-like object with print(page); defaults to a
      DefaultHelpPrinter writing on stdout.

    Returns
    - None, after either printing help or calling the consumer exactly once.

    Raises
    - ParseError subclasses (see arbor.faults); the consumer is not called then.
    - RuntimeError: the resolved group has no consumer or its consumer was already taken.
    - Whatever the consumer itself raises.
    """
    if (dispatch := _prepare(group, argv, printer)) is not None:
        dispatch()


def parse_from_environment(group, /, *, printer=Unset, shell=False, fancy=False, colorful=False):
    """
    Parse the process arguments (sys.argv) against group.

    Modes
    - shell=False: behaves like parse(group, sys.argv); faults propagate to the caller.
    - shell=True: faults raised while parsing are rendered on stderr through rich and the
      process exits with status 1; parse warnings are rendered instead of going through
      warnings.warn. fancy/colorful style both the fault output and the default help printer.
      The consumer runs outside that handling: its exceptions and warnings reach the
      caller untouched.
    """
    if not shell:
        return parse(group, sys.argv, printer=printer)

    printer = coalesce(printer, DefaultHelpPrinter(fancy=fancy, colorful=colorful))
    options = {"shell": True, "fancy": fancy, "colorful": colorful}

    failure = dispatch = None
    records = []
    try:
        with catch_warnings(record=True) as records:
            warnings.simplefilter("always", ParseWarning)
            try:
                dispatch = _prepare(group, sys.argv, printer)
            except ParseError as fault:
                failure = fault
    finally:
        for record in records:
            if isinstance(record.message, ParseWarning):
                trigger(record.message, **options)
            else:
                warnings.warn_explicit(record.message, record.category, record.filename, record.lineno)

    if failure is not None:
        trigger(failure, **options)
    elif dispatch is not None:
        dispatch()


__all__ = (
    "HELP",
    "Context",
    "OptionSet",
    "resolve",
    "split",
    "parse_options",
    "bind",
    "parse",
    "parse_from_environment",
)
