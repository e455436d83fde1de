"""
Clio positional arguments.

Arguments is the ordered, append-only list of tokens that a parser did not
consume as options or commands. Conversions to numbers reuse the same strict
coercion as integer and float options.
"""
from collections.abc import Sequence

from .values import to_integer, to_real


class Arguments(Sequence):
    """
    Positional tokens in first-seen order.

    Supports len(), indexing, iteration and truthiness like any sequence;
    snapshot(), integers() and reals() return independent lists.
    """

    def __init__(self):
        self._tokens = []

    def append(self, token, /):
        if not isinstance(token, str):
            raise TypeError("positional arguments must be strings")
        self._tokens.append(token)

    def snapshot(self):
        return list(self._tokens)

    def integers(self):
        """
        Every argument coerced to int; the first failure propagates as a
        NumericError.
        """
        return [to_integer(token) for token in self._tokens]

    def reals(self):
        """
        Every argument coerced to float; the first failure propagates as a
        NumericError.
        """
        return [to_real(token) for token in self._tokens]

    def __getitem__(self, index, /):
        return self._tokens[index]

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return f"arguments({self._tokens!r})"


__all__ = (
    "Arguments",
)
