"""
clparse faults (errors raised while parsing and binding) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error.
  Codes are grouped by domain to keep logs/searches predictable.
- CommandLineException: base type that carries message + options and knows how
  to render itself with rich in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface a fault (raise, or print and exit
  when running in shell mode).

Integration
- Arguments raise ArgumentParseError subclasses from parse() and BindingError
  from update_bound_object().
- The parser decorates faults with its own options (prog, shell, colorful) via
  trigger(fault, **options) before they reach the caller.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import *

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - tokens (1111x)
      • MALFORMED_TOKEN, NAME_MISMATCH, MISSING_TOKEN
    - values (1112x)
      • MISSING_VALUE, VALUE_CONVERSION
    - dispatch (1113x)
      • UNKNOWN_ARGUMENT, UNEXPECTED_TOKEN
    - binding (1310x)
      • BINDING_FAILURE
    """
    # --- token errors (1111x) ---
    MALFORMED_TOKEN   = 11111
    NAME_MISMATCH     = 11112
    MISSING_TOKEN     = 11113

    # --- value errors (1112x) ---
    MISSING_VALUE     = 11121
    VALUE_CONVERSION  = 11122

    # --- dispatch errors (1113x) ---
    UNKNOWN_ARGUMENT  = 11131
    UNEXPECTED_TOKEN  = 11132

    # --- binding errors (1310x) ---
    BINDING_FAILURE   = 13101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(sys.modules.get("__main__"), "__codes__", {}).get(self, self.value))


class CommandLineException(Exception):
    """
    base class of every fault raised by clparse.

    the message is the human-readable sentence; options carry structured
    context (code, title, hint, argument, token, index, ...) and the rendering
    switches (prog, shell, colorful) merged in by trigger().
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = sys.modules.get("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"
        header = Text.assemble(
            "[ ",
            text(self.options.get("prog", "clparse"), "prog-name"),
            " — ",
            text(code, "code"),
            " | ",
            text(self.options.get("title", "error").title(), "error-title"),
            " ]"
        )
        message = text(coalesce(self.message, ""), "error-message")
        if not (hint := self.options.get("hint")):
            return Group(header, message)
        return Group(header, message, Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    def __trigger__(self):
        if not self.options.get("shell", False):
            # keep __cause__ (e.g. the failed write of a BindingError) but hide the handling context
            self.__suppress_context__ = True
            raise self
        self.options.get("console", console).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class ArgumentParseError(CommandLineException):
    """
    a token could not be matched or consumed by an argument.
    """


class MalformedTokenError(ArgumentParseError): ...
class NameMismatchError(ArgumentParseError): ...
class MissingTokenError(ArgumentParseError): ...
class MissingValueError(ArgumentParseError): ...
class ValueConversionError(ArgumentParseError): ...
class UnknownArgumentError(ArgumentParseError): ...
class UnexpectedTokenError(ArgumentParseError): ...


class BindingError(CommandLineException):
    """
    writing a parsed value back into a bound field failed.

    options always include 'argument' (display name), 'field', 'object' and
    'cause' (the original exception, also chained as __cause__).
    """

    @property
    def cause(self):
        return self.options.get("cause")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base class).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.
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
    "CommandLineException",
    "ArgumentParseError",
    "MalformedTokenError",
    "NameMismatchError",
    "MissingTokenError",
    "MissingValueError",
    "ValueConversionError",
    "UnknownArgumentError",
    "UnexpectedTokenError",
    "BindingError",
    "FaultCode",
    "trigger",
)
