"""
Clio key registry: insertion-ordered names over an arena of shared values.

A parser registers options like "v verbose" and commands like "rm remove":
one value, several names. The registry stores each value once in an arena
and maps every name to the arena index of its value, so aliases share state
without any copying.

Rules
- Keys are whitespace-separated words of the key string; each must be unique
  within one registry. A rejected key string inserts nothing.
- Iteration and keys() follow key insertion order.
- values() yields each distinct value once, in arena order.
"""
from collections.abc import Mapping


class Registry(Mapping):
    """
    Read-mostly mapping of name -> shared value.

    Behaves like a Mapping (len/iter/contains/get/items over keys) and adds
    insert() plus arena-level access through values() and index().
    """

    def __init__(self):
        self._arena = []
        self._slots = {}

    def insert(self, keys, value, /):
        """
        Bind every whitespace-separated word of keys to value.

        Returns
        - int: the arena index of value.

        Raises
        - TypeError: keys is not a string.
        - ValueError: keys holds no names, or a name is already taken (either
          in this registry or earlier in the same key string).
        """
        if not isinstance(keys, str):
            raise TypeError("registry keys must be a string")
        if not (names := keys.split()):
            raise ValueError("registry keys cannot be empty")

        seen = set()
        for name in names:
            if name in self._slots or name in seen:
                raise ValueError(f"name {name!r} is already in use")
            seen.add(name)

        self._arena.append(value)
        index = len(self._arena) - 1
        for name in names:
            self._slots[name] = index
        return index

    def index(self, key, /):
        """
        Arena index bound to key (KeyError when absent).
        """
        return self._slots[key]

    def aliases(self, key, /):
        """
        Every name sharing key's value, in insertion order (key included).
        """
        index = self._slots[key]
        return tuple(name for name, slot in self._slots.items() if slot == index)

    def values(self):
        return tuple(self._arena)

    def get(self, key, default=None, /):
        try:
            return self[key]
        except KeyError:
            return default

    def __getitem__(self, key, /):
        return self._arena[self._slots[key]]

    def __contains__(self, key, /):
        return key in self._slots

    def __iter__(self):
        return iter(tuple(self._slots))

    def __len__(self):
        return len(self._slots)

    def __repr__(self):
        return "registry(%s)" % ", ".join("%s=%r" % (key, value) for key, value in self.items())

    def __rich_repr__(self):
        for key in self._slots:
            yield key, self[key]


__all__ = (
    "Registry",
)
