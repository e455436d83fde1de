"""
Clio utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided", distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are kept as-is.

- rename(callable, name, doc=None)
  • Public __name__/__qualname__/__doc__ for the generated add_*/get_*/set_*
    parser methods.

- mirror("attr")
  • Read-only property over a private backing field (self._attr); sequences
    are handed out as tuple snapshots so callers cannot mutate parser state.

Usage guidance
- Runtime flags (shell/colorful/fancy) default to Unset so a command parser can
  inherit them from its parent; materialize them with coalesce().
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
    - Non-subclassable and singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
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
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values such as None, 0, "" or [] are not treated as unset.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(callable, name, doc=None, /):
    """
    Give a generated method its public identity.

    Sets __name__ and __qualname__ to name and, when doc is given, __doc__;
    the accessor factories in clio.parsers build every add_*/get_*/set_*
    method through here so tracebacks and help() show the real method name.

    Raises
    - TypeError on a non-callable target or a non-string name/doc.
    """
    if not builtins.callable(callable):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    if not isinstance(doc, str | None):
        raise TypeError("rename() third argument must be a string")
    callable.__qualname__ = callable.__name__ = name
    if doc is not None:
        callable.__doc__ = doc
    return callable


def _snapshot(object):
    """
    Shallow read-only snapshot of a backing value.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType over a copy
    - Set                   → frozenset
    - anything else         → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Containers are returned as snapshots (see _snapshot), so mutating the
    result never touches the owner.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _snapshot(getattr(self, "_" + name))

    return property(rename(getter, name, "Read-only view of the %s attribute." % name))


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Use Unset as a default when None is a valid value but "no input" must still be
told apart (runtime flags inherited from a parent parser are the main case).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
