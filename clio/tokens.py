"""
Clio token stream: a cursor over the raw argument tokens.

The parser and every command parser it recurses into share one stream, so a
command consumes exactly the tokens its own grammar needs and hands the rest
back implicitly by advancing the shared cursor.

Value-shaped tokens
- A token can be consumed as an option's argument unless it starts with "-",
  is longer than one character, and its second character is not a digit.
- So "-5", "-0.5" and a bare "-" are values; "-x", "--name" and "--" are not.
"""


def is_value_shaped(token, /):
    """
    Return True when token may be consumed as an option value.

    Examples
    - is_value_shaped("file.txt") -> True
    - is_value_shaped("-5")       -> True
    - is_value_shaped("-")        -> True
    - is_value_shaped("-v")       -> False
    - is_value_shaped("--")       -> False
    """
    return not token.startswith("-") or len(token) == 1 or token[1] in "0123456789"


class TokenStream:
    """
    Forward-only cursor over a sequence of string tokens.

    Operations
    - next(): return the current token and advance (IndexError when drained).
    - peek(): return the current token without advancing.
    - has_next(): any token left.
    - has_next_value(): a token is left and it is value-shaped.
    """

    def __init__(self, tokens, /):
        tokens = tuple(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("token stream items must be strings")
        self._tokens = tokens
        self._index = 0

    @property
    def index(self):
        """
        Number of tokens consumed so far.
        """
        return self._index

    @property
    def remaining(self):
        """
        The unconsumed tokens, as a tuple.
        """
        return self._tokens[self._index:]

    def next(self):
        try:
            token = self._tokens[self._index]
        except IndexError:
            raise IndexError("token stream is exhausted") from None
        self._index += 1
        return token

    def peek(self):
        try:
            return self._tokens[self._index]
        except IndexError:
            raise IndexError("token stream is exhausted") from None

    def has_next(self):
        return self._index < len(self._tokens)

    def has_next_value(self):
        return self.has_next() and is_value_shaped(self.peek())

    def __iter__(self):
        while self.has_next():
            yield self.next()

    def __len__(self):
        return len(self._tokens) - self._index

    def __repr__(self):
        return f"token-stream(consumed={self._tokens[:self._index]!r}, remaining={self.remaining!r})"


__all__ = (
    "TokenStream",
    "is_value_shaped",
)
