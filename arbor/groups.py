"""
Arbor group layer: declare the command tree that the parser walks.

What this module provides
- Group: one node of the command tree. It holds
  • its own options (keyed by canonical name, aliases unique within the group),
  • its ordered positional arguments,
  • its children, reachable by canonical name or by any declared alias,
  • a consumer invoked once with the parsed values when the group is the resolved context,
  • a human-readable description.
- group(...): create a Group from a consumer, directly or as a decorator.

Building
- The builder methods return the group itself, so a tree reads as one expression:

    root = (
        Group(run, descr="Simple tool")
        .add_option(Option("the-truth", Kind.INT, default=42, descr="The truth about everything"))
        .add_argument(Argument(Kind.STR, descr="Test text"))
        .add_child("test", Group(test, descr="Run the tests"), "t")
    )

- Children can also be declared with the decorator form:

    @root.group("status", "st", descr="Show the status")
    def status(arguments, options):
        ...

Lifecycle
- Build the tree once, then hand it to arbor.parse(). Options declared on a group are
  visible to every descendant; a name declared twice along one path is reported when a
  parse first reaches that path (see arbor.faults.DeclarationConflictError).
- Consumers are single-use: the parser takes the consumer out of the resolved group on
  dispatch. Parsing again against a tree whose consumer already fired is a programming
  error and raises RuntimeError; build a fresh tree per invocation instead.
"""
import functools
import inspect
import operator
import re

from rich.text import Text

from .arguments import Argument, Option
from .utils import *


class GroupType(type):
    """
    Metaclass giving groups a typename, read-only fields and stable representations.

    Conventions
    - __typename__ is derived from the class name and used in validation messages.
    - Every name in __introspectable__ becomes a read-only property over "_<name>".
    - __displayable__ narrows what __repr__/__rich_repr__ show (children would otherwise
      recurse through the whole tree).
    """
    __introspectable__ = ()
    __displayable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__displayable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_route(cls, route, what, /):
    """
    Internal: validate a child name or alias and return it trimmed.

    Routes are matched verbatim against command-line tokens, so they follow the option
    key rules and additionally cannot start with "-" (such tokens are option occurrences).
    """
    if not isinstance(route, str):
        raise TypeError(f"{cls.__typename__} child {what} must be a string")
    elif not (route := route.strip()):
        raise ValueError(f"{cls.__typename__} child {what} cannot be an empty-string")
    elif not re.fullmatch(r"[^\W_]+(-[^\W_]+)*", route):
        raise ValueError(f"{cls.__typename__} child {what} {route!r} must be a valid command name")
    return route


class Group(metaclass=GroupType):
    """
    Node of the command tree (one invocable command context).

    Properties (read-only snapshots)
    - name: the name this group is registered under in its parent (None for a root).
    - descr: description shown in help (defaults to the consumer docstring).
    - options: mapping name -> Option for this group's own options.
    - arguments: tuple of Argument in binding order.
    - children: mapping name -> Group.
    - routes: mapping of every child name and alias -> child name.
    - parent: the parent group, None for a root.
    """

    __introspectable__ = (
        "name",
        "descr",
        "options",
        "arguments",
        "children",
        "routes",
        "parent",
    )

    __displayable__ = (
        "name",
        "descr",
        "options",
        "arguments",
    )

    def __new__(cls, consumer=Unset, /, descr=Unset):
        """
        Create a group bound to an optional consumer.

        Parameters
        - consumer: Unset | Callable[[list[Value], dict[str, Value]], Any]
          Called once with the bound positional values (declaration order) and the full
          option mapping (every visible option, defaults included). A group without
          consumer only routes to its children; dispatching to it raises RuntimeError.
        - descr: Unset | str | Text
          Help description; when Unset the docstring of a function or method consumer
          is used, if any (partials and callable instances have none of their own).

        Raises
        - TypeError: consumer not callable, or descr not a string.
        - ValueError: descr empty after trimming.
        """
        if consumer is not Unset and not callable(consumer):
            raise TypeError(f"{cls.__typename__} 'consumer' must be callable")

        if descr is Unset and inspect.isroutine(consumer):
            descr = inspect.getdoc(consumer) or Unset

        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

        self = super().__new__(cls)
        self._name = None
        self._descr = coalesce(descr)
        self._options = {}
        self._aliases = {}
        self._arguments = []
        self._children = {}
        self._routes = {}
        self._parent = None
        self._consumer = consumer
        self._consumed = False
        return self

    @property
    def root(self):
        """
        Return the topmost group of the tree this group belongs to.
        """
        group = self
        while group._parent is not None:
            group = group._parent
        return group

    @property
    def path(self):
        """
        Return the groups from the root down to this group (both included).
        """
        path = [group := self]
        while group._parent is not None:
            path.append(group := group._parent)
        return tuple(reversed(path))

    def add_option(self, option, /):
        """
        Declare an option on this group (visible to every descendant too).

        Raises
        - TypeError: option is not an Option.
        - ValueError: the name or an alias is already taken by this group's own options.
        """
        if not isinstance(option, Option):
            raise TypeError(f"{type(self).__typename__} option must be an option descriptor")

        if option.name in self._options:
            raise ValueError(f"{type(self).__typename__} option {option.name!r} is already declared")
        for key in option.keys:
            if key in self._options or key in self._aliases:
                raise ValueError(f"{type(self).__typename__} option key {key!r} is already in use")

        self._options[option.name] = option
        self._aliases.update(dict.fromkeys(option.aliases, option.name))
        return self

    def add_argument(self, argument, /):
        """
        Append a positional argument; declaration order is binding order.
        """
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} argument must be an argument descriptor")

        self._arguments.append(argument)
        return self

    def add_child(self, name, child, /, *aliases):
        """
        Register child under name, also reachable by each alias.

        Raises
        - TypeError: child is not a Group, or a route is not a string.
        - ValueError: invalid route, route already taken, child already attached
          elsewhere, or attaching would create a cycle.
        """
        if not isinstance(child, Group):
            raise TypeError(f"{type(self).__typename__} child must be a group")
        if child._parent is not None:
            raise ValueError(f"{type(self).__typename__} child is already registered as {child._name!r}")
        if child in self.path:
            raise ValueError(f"{type(self).__typename__} child cannot be one of its own ancestors")

        routes = [_sanitize_route(type(self), name, "name")]
        routes.extend(_sanitize_route(type(self), alias, "alias") for alias in aliases)
        for route in routes:
            if route in self._routes or routes.count(route) > 1:
                typeof = "subcommand" if self._parent is not None else "command"
                raise ValueError(f"{type(self).__typename__} {typeof} name {route!r} is already in use")

        name = routes[0]
        self._children[name] = child
        self._routes.update(dict.fromkeys(routes, name))
        child._name = name
        child._parent = self
        return self

    def group(self, name, /, *aliases, descr=Unset):
        """
        Decorator form of add_child: wrap a consumer into a child group.

        Returns the new child group (so options/arguments can be chained on it).
        """
        @rename("group")
        def wrapper(consumer, /):
            if not callable(consumer):
                raise TypeError("@group() must be applied to a callable")
            self.add_child(name, child := Group(consumer, descr=descr), *aliases)
            return child

        return wrapper

    def route(self, token, /):
        """
        Return the child reached by token (canonical name or alias), None when no child matches.

        Matching is exact and case-sensitive; there is no prefix or fuzzy matching.
        """
        try:
            return self._children[self._routes[token]]
        except KeyError:
            return None

    def aliases_of(self, name, /):
        """
        Return the aliases declared for the child registered under name.
        """
        return tuple(route for route, target in self._routes.items() if target == name and route != name)

    def take_consumer(self):
        """
        Move the consumer out of the group; it can be taken only once.

        Raises
        - RuntimeError: the group has no consumer, or it was already taken.
        """
        if self._consumed:
            raise RuntimeError(f"{type(self).__typename__} consumer has already been taken; build a fresh tree per parse")
        if self._consumer is Unset:
            raise RuntimeError(f"{type(self).__typename__} has no consumer to dispatch to")
        consumer, self._consumer, self._consumed = self._consumer, Unset, True
        return consumer


def group(consumer=Unset, /, *, descr=Unset):
    """
    Create a Group or return a decorator to build it later.

    Invocation modes
    - Direct:     root = group(run, descr="...")
    - Decorator:  @group(descr="...")
                  def root(arguments, options): ...

    Returns
    - Group | Callable[[Callable], Group]
    """
    @rename("group")
    def wrapper(consumer, /):
        if not callable(consumer):
            raise TypeError("@group() must be applied to a callable")
        return Group(consumer, descr=descr)

    return wrapper(consumer) if consumer is not Unset else wrapper


__all__ = (
    "Group",
    "group",
)

# Not part of the public API.
del GroupType
