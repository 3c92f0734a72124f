r"""
Arbor argument descriptors.

Overview
- Argument: positional descriptor (kind + description). A group keeps its arguments
  in declaration order; that order is the binding order of positional tokens.
- Option: named descriptor (canonical name, short aliases, kind, default, description).
  The default is given as a plain Python object and stored as a Value; when omitted
  the kind's natural default is used (false, "", 0, 0.0).

Introspection & representation
- ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the fields
  declared in __introspectable__ as read-only properties (see utils.mirror).
- Descriptors are immutable once built; groups and the parser only read them.

Metadata (sanitized on construction)
- kind: Kind member or one of bool/str/int/float.
- descr: Unset | str | Text, non-empty when provided (None when Unset).
- name/aliases (Option only): option keys written without their "-" prefix.
  They must match r"[^\W_]+(-[^\W_]+)*" (letters/digits separated by single hyphens,
  Unicode letters allowed), and the name plus aliases must be pairwise distinct.

Examples
    >>> Argument(Kind.STR, descr="file to read")
    argument(kind=<Kind.STR: 'string'>, descr='file to read')
    >>> Option("count", Kind.INT, "c", default=3).default
    value(integer, 3)

Public API
- Classes: Argument, Option
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *
from .values import Kind, Value


class ArgumentType(type):
    """
    Metaclass giving descriptors a typename, read-only fields and stable representations.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens) and
      used in validation messages ("option 'descr' cannot be empty").
    - Every name in __introspectable__ becomes a read-only property over "_<name>".
    - __repr__ renders "typename(field=value, ...)" following __introspectable__ order.
    """
    __introspectable__ = ()

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
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the fields shared by every descriptor (kind, descr).

    Raises
    - TypeError: kind is not resolvable, or descr is not a string/Text.
    - ValueError: descr is an empty string after trimming.
    """
    try:
        metadata["kind"] = Kind.of(metadata["kind"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'kind' must be a kind (Kind, bool, str, int or float)") from None

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

    metadata["descr"] = coalesce(descr)


def _sanitize_key(cls, key, what, /):
    """
    Internal: validate one option key (name or alias) and return it trimmed.
    """
    if not isinstance(key, str):
        raise TypeError(f"{cls.__typename__} {what} must be a string")
    elif not (key := key.strip()):
        raise ValueError(f"{cls.__typename__} {what} cannot be an empty-string")
    elif key.startswith("-"):
        raise ValueError(f"{cls.__typename__} {what} {key!r} must be given without its '-' prefix")
    elif not re.fullmatch(r"[^\W_]+(-[^\W_]+)*", key):
        raise ValueError(f"{cls.__typename__} {what} {key!r} must be a valid option key (unicodes are allowed)")
    return key


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the canonical name and the aliases of an option.

    Rules
    - Each key goes through _sanitize_key.
    - The name and the aliases must be pairwise distinct.
    - Aliases keep their declaration order (help output sorts them itself).
    """
    metadata["name"] = name = _sanitize_key(cls, metadata["name"], "name")

    seen = {name}
    aliases = []
    for alias in metadata["aliases"]:
        if (alias := _sanitize_key(cls, alias, "alias")) in seen:
            raise ValueError(f"{cls.__typename__} {alias!r} is declared more than once")
        seen.add(alias)
        aliases.append(alias)
    metadata["aliases"] = tuple(aliases)


def _sanitize_default_metadata(cls, metadata, /):
    """
    Internal: turn the declared default into a Value of the option kind.

    Accepted
    - Unset: the kind's natural default.
    - Value: must already be of the option kind.
    - plain object: validated by Value (bool for boolean, in-range int for integer, ...).
    """
    kind = metadata["kind"]
    default = metadata["default"]

    if default is Unset:
        metadata["default"] = kind.default
    elif isinstance(default, Value):
        if default.kind is not kind:
            raise TypeError(f"{cls.__typename__} 'default' must be a {kind} value, not a {default.kind} one")
    else:
        try:
            metadata["default"] = Value(kind, default)
        except TypeError:
            raise TypeError(f"{cls.__typename__} 'default' must be a {kind} value, got {default!r}") from None
        except ValueError as exception:
            raise ValueError(f"{cls.__typename__} 'default' {exception}") from None


class Argument(metaclass=ArgumentType):
    """
    Positional argument descriptor.

    Arguments are bound strictly by position: a group with N arguments accepts exactly
    N positional tokens, each converted with the declared kind.
    """

    __introspectable__ = (
        "kind",
        "descr",
    )

    def __new__(cls, kind, /, descr=Unset):
        metadata = {
            "kind": kind,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Option(metaclass=ArgumentType):
    """
    Named option descriptor.

    Parameters
    - name: canonical key; the value mapping handed to consumers is keyed by it.
    - kind: Kind member or bool/str/int/float.
    - aliases: alternative keys accepted on the command line (e.g. "c" for "count").
    - default: value used when the option is not given (see _sanitize_default_metadata).
    - descr: short description for help.

    Notes
    - Boolean options can be given bare ("--verbose") which means true.
    - The name "help" is reserved at parse time: every context already declares it.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "kind",
        "default",
        "descr",
    )

    def __new__(cls, name, kind, /, *aliases, default=Unset, descr=Unset):
        metadata = {
            "name": name,
            "aliases": aliases,
            "kind": kind,
            "default": default,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_default_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def keys(self):
        """
        Every key accepted for this option: the name first, then the aliases.
        """
        return (self._name, *self._aliases)


__all__ = (
    "Argument",
    "Option",
)

# Keep the metaclass out of star-imports and docs; it is an implementation detail.
del ArgumentType
