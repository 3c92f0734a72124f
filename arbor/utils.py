"""
Arbor utilities (internal helpers shared by the declaration and parsing layers)

Overview
- UnsetType / Unset
  • Singleton sentinel for “not provided”, distinct from None (a description may be
    legitimately absent, a consumer may be legitimately missing, ...).
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; every other value (None, 0, "", ...) passes through.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers (decorator factories).

- mirror("attr")
  • Read-only property over a private backing field (self._attr). Containers are handed out
    as immutable snapshots (tuple, frozenset, mappingproxy) so a built tree cannot be mutated
    through its public attributes.

- pluralize(word, count)
  • Count-aware noun for fault messages ("1 argument", "2 arguments").

Usage guidance
- Prefer Unset for defaults when None is meaningful; materialize with coalesce().
- Names not in __all__ are internal and may change without notice.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> pluralize("argument", 2)
    'arguments'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a per-process singleton.
    - Participates in PEP 604 unions so checks like isinstance(x, str | Unset) read naturally.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is the Unset sentinel, in which case return default.

    Falsey values such as None, 0, "" or False are preserved; only Unset is replaced.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name) -> decorator

    Raises
    - TypeError on wrong arity, a non-callable target, a non-string name, or a
      callable whose name attributes cannot be updated (some built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Snapshot a container into its immutable counterpart, recursively.

    - Sequence (non-string) → tuple
    - Mapping → mappingproxy over a fresh dict (keys kept, values frozen)
    - Set → frozenset
    - anything else → unchanged (descriptors, groups and values are already read-only)
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_freeze, object))
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(_freeze, object.values()))))
    elif isinstance(object, Set):
        return frozenset(map(_freeze, object))
    return object


def mirror(name, /):
    """
    Define a read-only property publishing the private backing field "_{name}".

    Example
    - Given self._arguments (a list), arguments = mirror("arguments") exposes a tuple.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(word, count=2, /):
    """
    Return word in singular when count is exactly one, plural otherwise.

    Only the regular English endings found in the library's vocabulary are covered
    (argument → arguments, alias → aliases, entry → entries).
    """
    if not isinstance(word, str):
        raise TypeError("pluralize() first argument must be a string")
    if count == 1 or not word:
        return word
    if word.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    if word.endswith("y") and len(word) > 1 and word[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


Unset = UnsetType()
"""
Internal sentinel for “not provided” (see UnsetType).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
