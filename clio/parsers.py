"""
Clio parser layer: register options and commands, parse argv, query results.

What this module provides
- ArgParser: one node of a command tree. It owns
  • an option Registry (names → OptionValue, aliases share one value),
  • a command Registry (names → child ArgParser) plus dispatch callbacks,
  • the positional Arguments it collected,
  • optional help text (enables --help) and version text (enables --version).
- invoke(parser, prompt): convenience runner from sys.argv, a shell-like
  string, or an iterable of tokens.

Command tree
- Every parser of one tree lives in a shared arena (a list); a parser knows
  its own arena index and its parent's index. The parent relation is used for
  upward lookups only (parent, root, path, route).
- A matched command is recorded as a name plus the child's arena index.

Parsing (one pass over a shared TokenStream)
- "--" turns option parsing off; every following token is positional.
- "--name", "--name=value", "-n", "-n=value" and bundles like "-abc".
- A non-flag option takes the next value-shaped token; greedy list options
  keep taking them. "-" and "-<digit>" are never option syntax.
- The first token naming a registered command hands the rest of the stream
  to that command's parser, then calls its callback with the child parser.
- "help <command>" prints the command's help text.

Faults
- Parsing raises typed faults (see clio.faults). parse() routes each one through
  trigger() of the parser that raised it, so a command's own runtime flags
  apply: in shell mode errors print "Error: <message>." and exit
  with status 1, help/version print their text and exit with status 0;
  otherwise the fault is raised to the caller.

Quick start
    from clio import ArgParser

    parser = ArgParser("usage: app [--verbose] <file>", "app 1.0")
    parser.add_flag("v verbose")
    parser.add_int("n count", 1)
    push = parser.command("push", "usage: app push [--force] <file>")
    push.add_flag("f force")

    parser.parse(["app", "--count=3", "push", "-f", "file.txt"])
    assert parser.get_int("count") == 3
    assert parser.cmd_name == "push" and push.get_args() == ["file.txt"]
"""
import os.path
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console, Group
from rich.text import Text

from .arguments import Arguments
from .faults import *
from .registry import Registry
from .tokens import TokenStream, is_value_shaped
from .utils import *
from .values import Kind, OptionValue

# Method-name suffix per kind, shared by the generated registrars/accessors.
_SUFFIXES = {
    Kind.FLAG: "flag",
    Kind.TEXT: "str",
    Kind.INTEGER: "int",
    Kind.REAL: "float",
}


def _registrar(kind, /, *, listed):
    """
    Build an add_<kind>[_list] registration method.

    Shapes
    - add_flag(name)                     → scalar flag, default False
    - add_<kind>(name, default)          → scalar option with a default
    - add_flag_list(name)                → list of flags (never greedy)
    - add_<kind>_list(name, greedy=False) → list option

    Every registrar returns the created OptionValue.
    """
    if listed and kind is Kind.FLAG:
        def register(self, name, /):
            return self._register(name, OptionValue.multiple(kind))
    elif listed:
        def register(self, name, /, greedy=False):
            return self._register(name, OptionValue.multiple(kind, greedy=greedy))
    elif kind is Kind.FLAG:
        def register(self, name, /):
            return self._register(name, OptionValue.scalar(kind, False))
    else:
        def register(self, name, default, /):
            return self._register(name, OptionValue.scalar(kind, default))

    return rename(
        register,
        "add_%s%s" % (_SUFFIXES[kind], "_list" if listed else ""),
        "Register the %s%s option under one or more whitespace-separated names." % (
            kind.value, " list" if listed else ""
        ),
    )


def _getter(kind, /):
    def getter(self, name, /):
        return self._typed(name, kind).current()

    return rename(
        getter,
        "get_" + _SUFFIXES[kind],
        "Return the current (last appended) value of the named %s option." % kind.value,
    )


def _lister(kind, /):
    def lister(self, name, /):
        return list(self._typed(name, kind).values)

    return rename(
        lister,
        "get_%s_list" % _SUFFIXES[kind],
        "Return a fresh list with every value of the named %s option." % kind.value,
    )


def _setter(kind, /):
    def setter(self, name, value, /):
        self._typed(name, kind).append(value)

    return rename(setter, "set_" + _SUFFIXES[kind], "Append a value to the named %s option." % kind.value)


class ArgParser:
    """
    A node of a command tree: options, commands and positional arguments.

    Responsibilities
    - Registration: options for four kinds (flag/str/int/float), scalar with a
      default or list-valued, each under one or more aliases; commands, each
      with its own ArgParser.
    - Parsing: parse(argv) drains the tokens into option values, positional
      arguments and at most one matched command per node.
    - Querying: typed getters/setters, positional accessors and conversions,
      matched-command accessors.

    Runtime flags
    - shell: render faults and exit instead of raising them.
    - colorful: style rendered faults.
    - fancy: render faults inside a panel.
    Unset flags inherit from the parent command (False at the root).

    Notes
    - Registries hand out shared OptionValue objects; list getters return
      independent copies.
    """

    helptext = mirror("helptext")
    version = mirror("version")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, helptext=None, version=None, *, shell=Unset, colorful=Unset, fancy=Unset):
        """
        Create a root parser.

        Parameters
        - helptext: str | None
          Text printed for --help (and for "help <name>" by a parent).
          None disables the automatic --help flag.
        - version: str | None
          Text printed for --version. None disables the automatic flag.
        - shell, colorful, fancy: bool | Unset
          Runtime flags (see class docstring).
        """
        if not isinstance(helptext, str | None):
            raise TypeError("parser 'helptext' must be a string")
        if not isinstance(version, str | None):
            raise TypeError("parser 'version' must be a string")

        self._helptext = helptext
        self._version = version
        self._shell = bool(coalesce(shell, False))
        self._colorful = bool(coalesce(colorful, False))
        self._fancy = bool(coalesce(fancy, False))

        self._name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "clio"
        self._options = Registry()
        self._commands = Registry()
        self._callbacks = {}
        self._arguments = Arguments()
        self._cmd_name = None
        self._cmd_index = None

        # Tree arena shared by every parser of this tree; the root sits at 0.
        self._tree = [self]
        self._index = 0
        self._parent = None

    # ── Tree ───────────────────────────────────────────────────────────────

    @property
    def name(self):
        """
        Program name at the root (argv[0]'s basename), first alias for commands.
        """
        return self._name

    @property
    def parent(self):
        """
        The parser this command was registered on, or None at the root.
        """
        return None if self._parent is None else self._tree[self._parent]

    @property
    def root(self):
        return self._tree[0]

    @property
    def path(self):
        """
        Ancestry from the root to this parser, as a tuple.
        """
        path = [parser := self]
        while parser.parent:
            path.append(parser := parser.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        Space-joined names along path, e.g. "app remote add".
        """
        return " ".join(parser.name for parser in self.path)

    @property
    def options(self):
        return self._options

    @property
    def commands(self):
        return self._commands

    @property
    def arguments(self):
        return self._arguments

    # ── Registration ───────────────────────────────────────────────────────

    def _register(self, name, option, /):
        self._options.insert(name, option)
        return option

    add_flag = _registrar(Kind.FLAG, listed=False)
    add_str = _registrar(Kind.TEXT, listed=False)
    add_int = _registrar(Kind.INTEGER, listed=False)
    add_float = _registrar(Kind.REAL, listed=False)

    add_flag_list = _registrar(Kind.FLAG, listed=True)
    add_str_list = _registrar(Kind.TEXT, listed=True)
    add_int_list = _registrar(Kind.INTEGER, listed=True)
    add_float_list = _registrar(Kind.REAL, listed=True)

    def command(self, name, /, helptext=None, callback=None, *, shell=Unset, colorful=Unset, fancy=Unset):
        """
        Register a command and return its parser.

        Parameters
        - name: str
          One or more whitespace-separated names (aliases) for the command.
        - helptext: str | None
          Help text of the command: printed by "<command> --help" and by
          "help <command>" on this parser.
        - callback: Callable[[ArgParser], Any] | None
          Called with the command's parser once that parser has consumed the
          rest of the tokens.
        - shell, colorful, fancy: bool | Unset
          Runtime flags; Unset inherits this parser's values.

        Returns
        - ArgParser: the command's own parser, to register its options and
          nested commands on.

        Raises
        - TypeError: callback is not callable.
        - ValueError: a name is empty or already registered on this parser.
        """
        if callback is not None and not callable(callback):
            raise TypeError("command callback must be callable")

        child = type(self)(
            helptext,
            shell=coalesce(shell, self.shell),
            colorful=coalesce(colorful, self.colorful),
            fancy=coalesce(fancy, self.fancy),
        )
        # Registry.insert validates the names before anything is grafted.
        index = self._commands.insert(name, child)
        self._callbacks[index] = callback

        # Graft the child into this tree's arena.
        child._name = name.split()[0]
        child._tree = self._tree
        child._index = len(self._tree)
        child._parent = self._index
        self._tree.append(child)
        return child

    # ── Faults ─────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime flags.

        In shell mode errors are printed and the process exits (1 for
        errors, 0 for help/version interrupts) and warnings are printed;
        otherwise errors and interrupts are raised and warnings go through
        the warnings module.
        """
        if "tool" not in getattr(fault, "options", {}):
            options.setdefault("tool", self)
        trigger(fault, **options, shell=self.shell, colorful=self.colorful, fancy=self.fancy)

    # ── Parsing ────────────────────────────────────────────────────────────

    def parse(self, argv=Unset, /):
        """
        Parse an argv-like sequence (argv[0] is the program name and is skipped).

        Parameters
        - argv: Iterable[str] | Unset
          Defaults to sys.argv.

        Behavior
        - Mutates this parser (and the command parsers it reaches) in place.
        - Faults are routed through trigger(): shell mode prints and exits,
          otherwise the typed fault is raised.
        """
        argv = list(sys.argv if argv is Unset else argv)
        if argv and isinstance(argv[0], str) and argv[0]:
            self._name = os.path.basename(argv[0])
        self._parseargs(argv[1:])

    def _parseargs(self, tokens, /):
        stream = TokenStream(tokens)
        try:
            self._parse_stream(stream)
        except (CommandException, CommandInterrupt) as fault:
            # surfaced with the runtime flags of the parser that raised it
            tool = fault.options.get("tool")
            (tool if isinstance(tool, ArgParser) else self).trigger(fault)

    def _parse_stream(self, stream, /):
        """
        drain a token stream into this parser.

        loop
        - option parsing disabled (after "--") → positional.
        - "--"                    → disable option parsing (token dropped).
        - "--<name>[=<value>]"    → _parse_long_option.
        - "-<chars>[=<value>]"    → _parse_short_option, unless "-" or "-<digit>".
        - registered command name → recurse into the command, run its
                                    callback, and stop.
        - "help" + another token  → help for the named command.
        - anything else           → positional.
        """
        parsing = True

        while stream.has_next():
            token = stream.next()

            if not parsing:
                self._arguments.append(token)
            elif token == "--":
                parsing = False
            elif token.startswith("--"):
                self._parse_long_option(token[2:], stream)
            elif token.startswith("-") and not is_value_shaped(token):
                self._parse_short_option(token[1:], stream)
            elif token in self._commands:
                self._dispatch(token, stream)
                return
            elif token == "help" and stream.has_next():
                self._parse_help(stream.next())
            else:
                self._arguments.append(token)

    def _dispatch(self, name, stream, /):
        """
        hand the remaining stream to a command, then call its callback.

        the command shares the stream with this parser, so it consumes as many
        tokens as its own grammar dictates (in practice, all of them).
        """
        index = self._commands.index(name)
        child = self._commands[name]

        self._cmd_name = name
        self._cmd_index = child._index

        child._parse_stream(stream)
        if (callback := self._callbacks[index]) is not None:
            callback(child)

    def _parse_help(self, name, /):
        if name not in self._commands:
            raise UnrecognisedCommandError(
                "'%s' is not a recognised command" % name,
                code=FaultCode.UNRECOGNISED_COMMAND,
                title="unrecognised command",
                input=name,
                tool=self,
            )
        child = self._commands[name]
        raise HelpInterrupt(child.helptext or "", code=FaultCode.HELP_REQUESTED, title="help", tool=child)

    def _parse_long_option(self, name, stream, /):
        """
        handle a token that started with "--" (prefix already stripped).

        order
        - "name=value"            → equals form.
        - registered option name  → flag/value consumption.
        - "help" with help text   → HelpInterrupt.
        - "version" with version  → VersionInterrupt.
        - anything else           → UnrecognisedOptionError.
        """
        if "=" in name:
            return self._parse_equals_option("--", name)

        if name in self._options:
            return self._consume(self._options[name], "--" + name, stream)

        if name == "help" and self._helptext is not None:
            raise HelpInterrupt(self._helptext, code=FaultCode.HELP_REQUESTED, title="help", tool=self)

        if name == "version" and self._version is not None:
            raise VersionInterrupt(self._version, code=FaultCode.VERSION_REQUESTED, title="version", tool=self)

        raise UnrecognisedOptionError(
            "--%s is not a recognised option" % name,
            code=FaultCode.UNRECOGNISED_OPTION,
            title="unrecognised option",
            input="--" + name,
            tool=self,
        )

    def _parse_short_option(self, name, stream, /):
        """
        handle a token that started with a single "-" (prefix already stripped).

        - "n=value" is the equals form with a "-" prefix.
        - otherwise every character is an option of its own ("-abc" is
          "-a -b -c"). a non-flag option takes the next value-shaped token from
          the stream (not the rest of the bundle) and ends the bundle; leftover
          characters are reported with an UnconsumedBundleWarning.
        """
        if "=" in name:
            return self._parse_equals_option("-", name)

        for offset, key in enumerate(name):
            if (option := self._options.get(key)) is None:
                raise UnrecognisedOptionError(
                    "-%s is not a recognised option" % key,
                    code=FaultCode.UNRECOGNISED_OPTION,
                    title="unrecognised option",
                    input="-" + key,
                    tool=self,
                )

            self._consume(option, "-" + key, stream)

            if option.kind is not Kind.FLAG:
                if rest := name[offset + 1:]:
                    self.trigger(UnconsumedBundleWarning(
                        "-%s took a value, so '%s' in -%s was not processed" % (key, rest, name),
                        code=FaultCode.UNCONSUMED_BUNDLE,
                        title="unprocessed options",
                        input="-" + name,
                    ))
                return

    def _parse_equals_option(self, prefix, name, /):
        """
        handle "<prefix><key>=<value>": the key must name a non-flag option and
        the value must not be empty.
        """
        key, _, value = name.partition("=")

        if (option := self._options.get(key)) is None:
            raise UnrecognisedOptionError(
                "%s%s is not a recognised option" % (prefix, key),
                code=FaultCode.UNRECOGNISED_OPTION,
                title="unrecognised option",
                input=prefix + key,
                tool=self,
            )
        option.found = True

        if option.kind is Kind.FLAG:
            raise InvalidEqualsFormError(
                "invalid format for boolean flag %s%s" % (prefix, key),
                code=FaultCode.INVALID_EQUALS_FORM,
                title="flag cannot take a value",
                input=prefix + key,
                tool=self,
            )

        if not value:
            raise InvalidEqualsFormError(
                "missing argument for the %s%s option" % (prefix, key),
                code=FaultCode.INVALID_EQUALS_FORM,
                title="empty option value",
                input=prefix + key,
                tool=self,
            )

        self._store(option, value)

    def _consume(self, option, input, stream, /):
        """
        record a match for option: True for flags, otherwise the next
        value-shaped token (and, for greedy lists, every following one).
        """
        option.found = True

        if option.kind is Kind.FLAG:
            option.append(True)
            return

        if not stream.has_next_value():
            raise MissingArgumentError(
                "missing argument for the %s option" % input,
                code=FaultCode.MISSING_ARGUMENT,
                title="missing option value",
                input=input,
                tool=self,
            )

        self._store(option, stream.next())
        while option.greedy and stream.has_next_value():
            self._store(option, stream.next())

    def _store(self, option, text, /):
        """
        coerce and append a raw value; numeric faults are tagged with this parser.
        """
        try:
            option.append_text(text)
        except NumericError as exception:
            raise exception.__replace__(tool=self) from None

    # ── Options ────────────────────────────────────────────────────────────

    def option(self, name, /):
        """
        Return the OptionValue registered under name.

        An unregistered name is a caller error: UnregisteredOptionError is
        triggered ("Abort: '<name>' is not a registered option." in shell mode).
        """
        try:
            return self._options[name]
        except KeyError:
            return self.trigger(UnregisteredOptionError(
                "'%s' is not a registered option" % name,
                code=FaultCode.UNREGISTERED_OPTION,
                title="unregistered option",
                input=name,
            ))

    def _typed(self, name, kind, /):
        if (option := self.option(name)).kind is not kind:
            raise TypeError(f"option {name!r} holds {option.kind.value} values, not {kind.value} values")
        return option

    def found(self, name, /):
        """
        True when the option was matched on the command line.
        """
        return self.option(name).found

    get_flag = _getter(Kind.FLAG)
    get_str = _getter(Kind.TEXT)
    get_int = _getter(Kind.INTEGER)
    get_float = _getter(Kind.REAL)

    def len_list(self, name, /):
        return len(self.option(name))

    get_flag_list = _lister(Kind.FLAG)
    get_str_list = _lister(Kind.TEXT)
    get_int_list = _lister(Kind.INTEGER)
    get_float_list = _lister(Kind.REAL)

    def clear_list(self, name, /):
        self.option(name).clear()

    set_flag = _setter(Kind.FLAG)
    set_str = _setter(Kind.TEXT)
    set_int = _setter(Kind.INTEGER)
    set_float = _setter(Kind.REAL)

    # ── Positional arguments ───────────────────────────────────────────────

    def has_args(self):
        return len(self._arguments) > 0

    def len_args(self):
        return len(self._arguments)

    def get_arg(self, index, /):
        return self._arguments[index]

    def get_args(self):
        return self._arguments.snapshot()

    def get_args_as_ints(self):
        """
        Every positional argument as an int; the first failure is triggered
        as a NumericError (exit status 1 in shell mode).
        """
        try:
            return self._arguments.integers()
        except NumericError as exception:
            return self.trigger(exception)

    def get_args_as_floats(self):
        """
        Every positional argument as a float; the first failure is triggered
        as a NumericError (exit status 1 in shell mode).
        """
        try:
            return self._arguments.reals()
        except NumericError as exception:
            return self.trigger(exception)

    # ── Commands ───────────────────────────────────────────────────────────

    def has_cmd(self):
        return self._cmd_name is not None

    @property
    def cmd_name(self):
        """
        Name of the matched command (as typed), or None.
        """
        return self._cmd_name

    @property
    def cmd_parser(self):
        """
        Parser of the matched command, or None.
        """
        return None if self._cmd_index is None else self._tree[self._cmd_index]

    # ── Rendering ──────────────────────────────────────────────────────────

    def __rich__(self):
        """
        Options, positional arguments and matched command, one section each.
        """
        label = "bold #00E6FF" if self.colorful else ""
        none = Text("  [none]", "dim" if self.colorful else "")

        options = Text("Options:", label)
        if self._options:
            for name, option in self._options.items():
                options.append("\n  %s: %s" % (name, option))
        else:
            options.append("\n").append(none)

        arguments = Text("Arguments:", label)
        if self._arguments:
            for argument in self._arguments:
                arguments.append("\n  " + argument)
        else:
            arguments.append("\n").append(none)

        command = Text("Command:", label)
        if self.has_cmd():
            command.append("\n  " + self._cmd_name)
        else:
            command.append("\n").append(none)

        return Group(options, Text(), arguments, Text(), command)

    def print(self):
        """
        Print the parser's state to stdout (debugging aid).
        """
        Console().print(self, soft_wrap=True)

    def __rich_repr__(self):
        yield "name", self.name
        yield "helptext", self.helptext
        yield "version", self.version
        yield "options", {name: option.values for name, option in self._options.items()}
        yield "arguments", self.get_args()
        yield "commands", tuple(self._commands)
        yield "command", self.cmd_name

    def __repr__(self):
        return "parser(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def invoke(parser, prompt=Unset, /):
    """
    Convenience runner for a parser.

    Parameters
    - parser: ArgParser
    - prompt:
      • Unset: parse sys.argv.
      • str: split with shlex.split (no program name expected).
      • Iterable[str]: tokens as-is (no program name expected).

    Returns
    - the parser, for chaining queries.

    Raises
    - TypeError: when parser is not an ArgParser, or prompt is of the wrong shape.
    """
    if not isinstance(parser, ArgParser):
        raise TypeError("invoke() first argument must be a parser")

    if prompt is Unset:
        parser.parse(sys.argv)
        return parser

    if isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() prompt must be a string or an iterable of strings")

    parser._parseargs(tokens)
    return parser


__all__ = (
    # Public API surface for consumers of clio.parsers.
    # These names are re-exported from the package __init__.
    "ArgParser",
    "invoke",
)
