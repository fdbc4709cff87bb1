"""
clparse command-line parser: register arguments, walk argv, write back.

What this module provides
- CommandLineParser: owns an ordered collection of arguments (any Argument
  kind), routes each option token to the argument registered under that
  spelling, and after the pass pushes every argument's value into its binding.

Parse pass
- every argument is re-initialized (init()) so a parser can be reused;
- tokens are walked left to right with an integer cursor; each argument's
  parse() returns the cursor after the tokens it consumed;
- "--" ends option processing: everything after it is additional input;
- tokens that do not look like options are additional input when
  accept_additional is set, and an UnexpectedTokenError otherwise;
- unknown options raise UnknownArgumentError with close-match suggestions;
- finally update_bound_object() runs for every argument.

Fault surfacing
- shell=False (default): faults are raised to the caller, decorated with the
  parser's prog/colorful options.
- shell=True: faults are rendered with rich on the parser console and the
  process exits with status 1.
"""
import difflib
import os.path
import re
import sys

from . import faults
from .arguments import _TOKEN, Argument
from .declarations import extract_argument_attributes
from .faults import *
from .messages import merge, resolve
from .utils import *

_OPTION_LIKE = re.compile(r"--?[^\W\d_].*")


class CommandLineParser:
    """
    Parser over a homogeneous, ordered collection of arguments.

    Parameters
    - arguments: Iterable[Argument]
      Initial arguments, registered in order (see add()).
    - prog: Unset | str
      Program name shown in rendered faults (defaults to basename of argv[0]).
    - messages: Unset | Mapping[str, str]
      Template overrides, overlaid on clparse.messages.DEFAULT_MESSAGES.
    - console: Unset | rich.console.Console
      Diagnostic console for value reports and shell-mode faults (stderr by default).
    - accept_additional: bool
      Collect non-option tokens into 'additional' instead of failing.
    - shell: bool
      Render faults and exit instead of raising.
    - colorful: bool
      Style rendered faults.
    """

    def __init__(
            self,
            arguments=(),
            *,
            prog=Unset,
            messages=Unset,
            console=Unset,
            accept_additional=False,
            shell=False,
            colorful=True
    ):
        if not isinstance(prog, str | UnsetType):
            raise TypeError("parser 'prog' must be a string")
        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "clparse")
        self._messages = merge(messages)
        self._console = console
        self._accept_additional = bool(accept_additional)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._arguments = []
        self._switches = {}
        self._additional = []
        self.extend(arguments)

    arguments = mirror("arguments")
    additional = mirror("additional")
    prog = mirror("prog")
    messages = mirror("messages")
    accept_additional = mirror("accept_additional")
    shell = mirror("shell")
    colorful = mirror("colorful")

    @property
    def console(self):
        return coalesce(self._console, faults.console)

    def add(self, argument, /):
        """
        Register an argument; its short and long spellings must be unused.
        """
        self.extend((argument,))
        return argument

    def extend(self, arguments, /):
        """
        Register a batch of arguments; nothing is registered if any fails.
        """
        arguments = list(arguments)
        switches = {}
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError("add() argument must be an argument")
            for flag in argument.flags:
                if owner := self._switches.get(flag) or switches.get(flag):
                    raise ValueError(f"name {flag!r} is already in use by {owner.name!r}")
                switches[flag] = argument

        self._switches.update(switches)
        for argument in arguments:
            self._arguments.append(argument)
            debug("registered %r as %s", argument, ", ".join(argument.flags))

    def extract_argument_attributes(self, object, /):
        """
        Register the arguments declared on type(object), bound to object.
        """
        arguments = extract_argument_attributes(object)
        self.extend(arguments)
        return arguments

    def lookup(self, token, /):
        """
        Argument registered under the given spelling ("-v", "--verbose"), or None.
        """
        return self._switches.get(token)

    def parse(self, argv=Unset, /):
        """
        Run one parse pass over argv (defaults to sys.argv[1:]).
        """
        tokens = list(coalesce(argv, sys.argv[1:]))
        debug("starting argv: %r", tokens)

        for argument in self._arguments:
            argument.init()
        self._additional.clear()

        try:
            self._walk(tokens)
            for argument in self._arguments:
                argument.update_bound_object(messages=self._messages)
        except CommandLineException as fault:
            trigger(fault, prog=self._prog, shell=self._shell, colorful=self._colorful, console=self.console)

    def show_parsed_arguments(self):
        """
        Print the value report of every argument matched in the last pass.
        """
        for argument in self._arguments:
            if argument.parsed:
                argument.print_value_info(self.console, self._messages)

    def _walk(self, tokens):
        index = 0
        while index < len(tokens):
            token = tokens[index]

            if token == "--":
                debug("remainder: tokens[%d:] => %r", index + 1, tokens[index + 1:])
                for position in range(index + 1, len(tokens)):
                    self._collect(tokens[position], position)
                return

            if argument := self._switches.get(token):
                index = argument.parse(tokens, index, messages=self._messages)
                continue

            if _OPTION_LIKE.fullmatch(token):
                self._reject(token, index)

            self._collect(token, index)
            index += 1

    def _reject(self, token, index):
        if not _TOKEN.fullmatch(token):
            raise MalformedTokenError(
                resolve(self._messages, "malformed-token", token=token, index=index),
                title="malformed option",
                code=FaultCode.MALFORMED_TOKEN,
                hint="spell options separately as -x or --long-name, with any value after a space",
                token=token,
                index=index,
            )

        suggestions = difflib.get_close_matches(token, self._switches.keys(), 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "known options are %s" % (", ".join(map(repr, self._switches)) or "none")
        raise UnknownArgumentError(
            resolve(self._messages, "unknown-argument", token=token, index=index),
            title="unknown option",
            code=FaultCode.UNKNOWN_ARGUMENT,
            hint=hint,
            token=token,
            index=index,
            suggestions=suggestions,
        )

    def _collect(self, token, index):
        if not self._accept_additional:
            raise UnexpectedTokenError(
                resolve(self._messages, "unexpected-token", token=token, index=index),
                title="unexpected token",
                code=FaultCode.UNEXPECTED_TOKEN,
                hint="this parser does not accept additional arguments",
                token=token,
                index=index,
            )
        debug("storing additional token %r", token)
        self._additional.append(token)

    def __repr__(self):
        return "command-line-parser(prog=%r, arguments=%r)" % (self._prog, self.arguments)


__all__ = (
    "CommandLineParser",
)
