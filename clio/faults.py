"""
Clio faults (errors, interrupts and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- CommandException: fatal parse or query failures. They carry a message plus
  read-only options and know how to render themselves ("Error: <message>.").
- CommandInterrupt: early, successful stops (--help, --version, help <cmd>)
  carrying the text to print.
- CommandWarning: non-fatal notices.
- trigger(): central entry point to surface any fault.

Integration
- Parsing code raises faults; the parse entry point hands them to
  ArgParser.trigger(), which merges the parser's runtime options (shell,
  colorful, fancy) and calls trigger().
- In non-shell mode exceptions and interrupts are raised and warnings go through
  warnings.warn; in shell mode they are rendered via rich and the process exits
  (status 1 for errors, 0 for interrupts).
"""
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)
output = Console()


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - interrupts (100xx)
      • HELP_REQUESTED, VERSION_REQUESTED
    - options (111xx)
      • UNRECOGNISED_OPTION, MISSING_ARGUMENT, INVALID_EQUALS_FORM
    - commands (112xx)
      • UNRECOGNISED_COMMAND
    - numbers (113xx)
      • NUMERIC_OUT_OF_RANGE, NUMERIC_INVALID_FORMAT
    - api misuse (119xx)
      • UNREGISTERED_OPTION
    - warnings (12xxx)
      • UNCONSUMED_BUNDLE
    """
    # --- interrupts (10xxx) ---
    HELP_REQUESTED          = 10001
    VERSION_REQUESTED       = 10002

    # --- option errors (111xx) ---
    UNRECOGNISED_OPTION     = 11101
    MISSING_ARGUMENT        = 11102
    INVALID_EQUALS_FORM     = 11103

    # --- command errors (112xx) ---
    UNRECOGNISED_COMMAND    = 11201

    # --- numeric errors (113xx) ---
    NUMERIC_OUT_OF_RANGE    = 11301
    NUMERIC_INVALID_FORMAT  = 11302

    # --- api misuse (119xx) ---
    UNREGISTERED_OPTION     = 11901

    # --- warnings (12xxx) ---
    UNCONSUMED_BUNDLE       = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styling(options, palette):
    """
    build the (styler, text) helpers shared by every renderer.

    - styler(key) resolves a palette entry, or "" when colorful is off.
    - text(fragment, style) wraps a fragment into rich Text, dropping styles
      when colorful is off.
    palette entries can be overridden from __main__.__styles__.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = options.get("colorful", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style if colorful else "")

    return styler, text


def _header(options, styler, text, title):
    """
    fancy panel title: "[ <prog> — <code> | <title> ]".
    """
    main = __import__("__main__")
    tool = options.get("tool")
    prog = getattr(main, "__prog__", getattr(tool, "route", None) or os.path.basename(sys.argv[0]))
    parts = ["[ ", text(prog, styler("prog-name"))]
    if (code := options.get("code")) is not None:
        parts += [" — ", text(code.normalize(), styler("code"))]
    if title := options.get("title"):
        parts += [" | ", text(title.title(), styler("title"))]
    parts.append(" ]")
    return Text.assemble(*parts)


class CommandException(Exception):
    """
    base class for fatal faults.

    plain rendering is exactly "<prefix>: <message>." so the output stays
    compatible with the classic one-line diagnostic; colorful and fancy only
    add styling and chrome.
    """
    __prefix__ = "Error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styler, text = _styling(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "prefix": "bold #FF4DA6",
            "message": "#C8C8D0",  # soft light gray message
        })
        message = Text.assemble(text(self.message, styler("message")), ".")

        if self.options.get("fancy"):
            return Panel(message, title=_header(self.options, styler, text, self.options.get("title")), title_align="left")

        return Text.assemble(text(self.__prefix__, styler("prefix")), ": ", message)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognisedOptionError(CommandException): ...
class MissingArgumentError(CommandException): ...
class InvalidEqualsFormError(CommandException): ...
class UnrecognisedCommandError(CommandException): ...


class NumericError(CommandException, ValueError):
    """
    raised when raw text cannot be coerced into an integer or a float.
    """


class NumericOutOfRangeError(NumericError): ...
class NumericInvalidFormatError(NumericError): ...


class UnregisteredOptionError(CommandException, KeyError):
    """
    caller error: an option was queried or set under a name that was never
    registered. rendered with the "Abort" prefix to tell it apart from user
    input errors.
    """
    __prefix__ = "Abort"

    def __str__(self):
        # KeyError would otherwise quote the message
        return self.message


class CommandInterrupt(Exception):
    """
    base class for early, successful stops.

    the carried text is printed verbatim to stdout in shell mode, followed by
    a zero exit status; outside shell mode the interrupt is raised so callers
    can inspect `text`.
    """

    def __init__(self, text, /, **options):
        assert isinstance(text, str)
        super().__init__(text)
        self.text = text
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styler, text = _styling(self.options, {
            "prog-name": "bold #FF4D94",
            "code": "bold #00E6FF",
            "title": "bold #FF4D94",
            "body": "",
        })
        body = text(self.text, styler("body"))
        if self.options.get("fancy"):
            return Panel(body, title=_header(self.options, styler, text, self.options.get("title")), title_align="left")
        return body

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        output.print(self, soft_wrap=True)
        sys.exit(0)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.text, **{**self.options, **overrides})


class HelpInterrupt(CommandInterrupt): ...
class VersionInterrupt(CommandInterrupt): ...


class CommandWarning(Warning):
    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styler, text = _styling(self.options, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "prefix": "bold #FFB400",
            "message": "#D6D6DE",
        })
        message = Text.assemble(text(self.message, styler("message")), ".")
        if self.options.get("fancy"):
            return Panel(message, title=_header(self.options, styler, text, self.options.get("title")), title_align="left")
        return Text.assemble(text("Warning", styler("prefix")), ": ", message)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=4)
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnconsumedBundleWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - tool, shell, fancy, colorful, plus whatever context the fault carries
      (code, title, input, ...).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "UnrecognisedOptionError",
    "MissingArgumentError",
    "InvalidEqualsFormError",
    "UnrecognisedCommandError",
    "NumericError",
    "NumericOutOfRangeError",
    "NumericInvalidFormatError",
    "UnregisteredOptionError",
    "CommandInterrupt",
    "HelpInterrupt",
    "VersionInterrupt",
    "CommandWarning",
    "UnconsumedBundleWarning",
    "trigger",
)
