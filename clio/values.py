r"""
Clio option values and primitive coercion.

Overview
- Kind: the closed set of payload kinds an option can carry.
  • FLAG    → bool   (presence-only on the command line)
  • TEXT    → str
  • INTEGER → int    (C int range, base-prefix aware)
  • REAL    → float
  Each member knows its Python type, how to coerce raw text into it, how to
  check a programmatically supplied value, and how to render a value.

- OptionValue: the container registered under one or more option names.
  • Scalar options hold their default at index 0; every match appends, and
    the last value wins (current()).
  • List options start empty and expose the full ordered sequence.
  • found flips to True on the first match and is never reset by the parser.
  • greedy list options swallow every following value-shaped token.

- to_integer(text) / to_real(text): strict text → number conversion.
  • Integers follow strtol(..., base=0): leading whitespace, optional sign,
    "0x"/"0X" hexadecimal, leading "0" octal, decimal otherwise.
  • Reals follow strtod: decimal with exponent, hexadecimal floats,
    inf/infinity/nan (case-insensitive).
  • Overflow and underflow (to zero or a subnormal) raise
    NumericOutOfRangeError; trailing characters (or no digits
    at all) raise NumericInvalidFormatError.

Quick example:
    >>> option = OptionValue.scalar(Kind.INTEGER, 8)
    >>> option.append_text("0x10")
    >>> option.current()
    16
    >>> option.values
    (8, 16)
"""
import math
import re
import sys
from enum import Enum

from .faults import FaultCode, NumericOutOfRangeError, NumericInvalidFormatError
from .utils import mirror

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_INTEGER = re.compile(r"""
    [ \t\n\v\f\r]*
    (?P<sign>[+-]?)
    (?:
        0[xX](?P<hexadecimal>[0-9a-fA-F]+)
      | (?P<octal>0[0-7]*)
      | (?P<decimal>[1-9][0-9]*)
    )
""", re.VERBOSE)

_REAL = re.compile(r"""
    [ \t\n\v\f\r]*
    (?P<sign>[+-]?)
    (?:
        (?P<special>inf(?:inity)?|nan(?:\([0-9a-z_]*\))?)
      | 0x(?P<hexadecimal>(?:[0-9a-f]+(?:\.[0-9a-f]*)?|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?)
      | (?P<decimal>(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:e[+-]?[0-9]+)?)
    )
""", re.VERBOSE | re.IGNORECASE)


def to_integer(text, /):
    """
    Coerce text into an int the way strtol(text, &end, 0) would.

    Raises
    - NumericOutOfRangeError: the value does not fit a C int (however many
      digits it is written with).
    - NumericInvalidFormatError: no digits, or characters left after the number.
    """
    if not isinstance(text, str):
        raise TypeError("to_integer() argument must be a string")

    if not (match := _INTEGER.match(text)):
        raise NumericInvalidFormatError(
            "cannot parse '%s' as an integer" % text,
            code=FaultCode.NUMERIC_INVALID_FORMAT,
            title="invalid integer",
            input=text,
        )

    if match["hexadecimal"]:
        value = int(match["hexadecimal"], 16)
    elif match["octal"]:
        value = int(match["octal"], 8)
    elif len(match["decimal"]) <= len(str(INT_MAX)):
        value = int(match["decimal"])
    else:
        # too many digits for a C int; int() also refuses very long decimal strings
        value = 2 * INT_MAX
    if match["sign"] == "-":
        value = -value

    # range is checked before the tail, as strtol reports ERANGE first
    if not INT_MIN <= value <= INT_MAX:
        raise NumericOutOfRangeError(
            "'%s' is out of range" % text,
            code=FaultCode.NUMERIC_OUT_OF_RANGE,
            title="integer out of range",
            input=text,
        )

    if match.end() != len(text):
        raise NumericInvalidFormatError(
            "cannot parse '%s' as an integer" % text,
            code=FaultCode.NUMERIC_INVALID_FORMAT,
            title="invalid integer",
            input=text,
        )

    return value


def to_real(text, /):
    """
    Coerce text into a float the way strtod(text, &end) would.

    Raises
    - NumericOutOfRangeError: the literal overflows to infinity, or a non-zero
      literal underflows to zero or to a subnormal (strtod reports ERANGE for both).
    - NumericInvalidFormatError: no number, or characters left after it.
    """
    if not isinstance(text, str):
        raise TypeError("to_real() argument must be a string")

    if not (match := _REAL.match(text)):
        raise NumericInvalidFormatError(
            "cannot parse '%s' as a float" % text,
            code=FaultCode.NUMERIC_INVALID_FORMAT,
            title="invalid float",
            input=text,
        )

    sign = -1.0 if match["sign"] == "-" else 1.0
    overflow = False

    if special := match["special"]:
        value = math.inf if special[0] in "iI" else math.nan
    elif hexadecimal := match["hexadecimal"]:
        mantissa = re.split("[pP]", hexadecimal)[0]
        try:
            value = float.fromhex("0x" + hexadecimal)
        except OverflowError:
            value, overflow = math.inf, True
        overflow |= value == 0.0 and bool(mantissa.strip("0."))
    else:
        mantissa = re.split("[eE]", decimal := match["decimal"])[0]
        value = float(decimal)
        overflow = math.isinf(value) or (value == 0.0 and bool(mantissa.strip("0.")))

    # subnormal results are ERANGE for strtod as well
    if overflow or 0.0 < abs(value) < sys.float_info.min:
        raise NumericOutOfRangeError(
            "'%s' is out of range" % text,
            code=FaultCode.NUMERIC_OUT_OF_RANGE,
            title="float out of range",
            input=text,
        )

    if match.end() != len(text):
        raise NumericInvalidFormatError(
            "cannot parse '%s' as a float" % text,
            code=FaultCode.NUMERIC_INVALID_FORMAT,
            title="invalid float",
            input=text,
        )

    return sign * value


class Kind(Enum):
    """
    Payload kind of an option, fixed at registration.

    The member is the single source of truth for what an option stores: the
    parser never inspects values directly, it asks the kind to coerce, check
    or render them.
    """
    FLAG = "flag"
    TEXT = "text"
    INTEGER = "integer"
    REAL = "real"

    @property
    def type(self):
        """
        The Python type stored for this kind.
        """
        match self:
            case Kind.FLAG:
                return bool
            case Kind.TEXT:
                return str
            case Kind.INTEGER:
                return int
            case Kind.REAL:
                return float

    def coerce(self, text, /):
        """
        Convert a raw command-line token into this kind's payload.

        Flags never take a textual value; asking for one is a TypeError.
        """
        match self:
            case Kind.FLAG:
                raise TypeError("flag values cannot be coerced from text")
            case Kind.TEXT:
                return text
            case Kind.INTEGER:
                return to_integer(text)
            case Kind.REAL:
                return to_real(text)

    def check(self, value, /):
        """
        Validate a value supplied by code (defaults, set_* calls).

        Integers are accepted for REAL and widened to float; bool is never
        accepted as a number.
        """
        match self:
            case Kind.FLAG if isinstance(value, bool):
                return value
            case Kind.TEXT if isinstance(value, str):
                return value
            case Kind.INTEGER if isinstance(value, int) and not isinstance(value, bool):
                return value
            case Kind.REAL if isinstance(value, int | float) and not isinstance(value, bool):
                return float(value)
        raise TypeError(f"{self.value} option value must be {self.type.__name__!r}, not {type(value).__name__!r}")

    def render(self, value, /):
        match self:
            case Kind.FLAG:
                return "true" if value else "false"
            case Kind.TEXT:
                return value
            case Kind.INTEGER:
                return "%i" % value
            case Kind.REAL:
                return "%f" % value


class OptionValue:
    """
    Values of one registered option (shared by all of its aliases).

    Construction
    - OptionValue.scalar(kind, default): one value, default at index 0.
    - OptionValue.multiple(kind, greedy=False): starts empty.

    Read-only properties
    - kind, listed, greedy: fixed at construction.
    - values: tuple snapshot of the stored values.

    Mutable state
    - found: set by the parser on the first match.
    """
    kind = mirror("kind")
    listed = mirror("listed")
    greedy = mirror("greedy")
    values = mirror("values")

    def __init__(self, kind, /, *, listed=False, greedy=False):
        if not isinstance(kind, Kind):
            raise TypeError("option kind must be a Kind member")
        if greedy and kind is Kind.FLAG:
            raise ValueError("flag options cannot be greedy")
        self._kind = kind
        self._listed = bool(listed)
        self._greedy = bool(greedy)
        self._values = []
        self.found = False

    @classmethod
    def scalar(cls, kind, default, /):
        self = cls(kind)
        self.append(default)
        return self

    @classmethod
    def multiple(cls, kind, /, greedy=False):
        return cls(kind, listed=True, greedy=greedy)

    def append(self, value, /):
        self._values.append(self._kind.check(value))

    def append_text(self, text, /):
        """
        Coerce a raw token and append it (may raise a NumericError).
        """
        self._values.append(self._kind.coerce(text))

    def clear(self):
        self._values.clear()

    def current(self):
        """
        Return the most recently appended value.

        Raises ValueError when there is nothing to return (a list option that
        was never matched, or one that was cleared).
        """
        if not self._values:
            raise ValueError(f"{self._kind.value} option has no values")
        return self._values[-1]

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(tuple(self._values))

    def __str__(self):
        return "[%s]" % ", ".join(map(self._kind.render, self._values))

    def __repr__(self):
        return "option(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "kind", self._kind.value
        yield "values", self.values
        yield "found", self.found
        if self._listed:
            yield "greedy", self._greedy


__all__ = (
    "Kind",
    "OptionValue",
    "to_integer",
    "to_real",
    "INT_MIN",
    "INT_MAX",
)
