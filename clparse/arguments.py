r"""
clparse argument kinds and write-back bindings.

Overview
- Argument: the capability every argument kind exposes to the parser
  (parse, init, update_bound_object, print_value_info) plus the shared naming
  state (short/long name, description), the per-pass 'parsed' flag, and an
  optional Binding.
  • SwitchArgument: presence-only boolean; every occurrence flips the value.
  • ValueArgument: named option carrying one converted payload token.
- Binding: target object + field name + setter. The setter is fixed when the
  binding is built, so write-back never searches for members by name at
  parse time.

Names
- short name: one letter, matched on the command line as "-x".
- long name: two or more letters/digits with single inner hyphens, matched as
  "--long-name". Unicode letters are allowed.
- At least one of them must be given; the display name is the long name when
  present, otherwise the short name.

Cursor protocol
- parse(tokens, index) receives the whole token list and the position of the
  token naming this argument, and returns the position of the first token it
  did not consume. The base implementation only validates the naming token and
  returns index unchanged; argument kinds advance past what they consume.

Quick example:
    >>> verbose = SwitchArgument("v", "verbose", "talk more", False)
    >>> verbose.parse(["-v", "file.txt"], 0)
    1
    >>> verbose.value
    True
"""
import inspect
import re
import types
from abc import ABC, abstractmethod

from . import faults
from .faults import *
from .messages import resolve
from .utils import *

_SHORT_NAME = re.compile(r"[^\W\d_]")
_LONG_NAME = re.compile(r"[^\W\d_](-?[^\W_]+)+")
_TOKEN = re.compile(r"-[^\W\d_]|--[^\W\d_](-?[^\W_]+)+")


def _annotation(cls, field):
    """
    Return the class annotated for 'field' on cls (first hit along the MRO),
    or None when the annotation is missing or is not a plain class
    (parametrized generics such as list[str] included).
    """
    for klass in cls.__mro__:
        try:
            annotations = inspect.get_annotations(klass)
        except (NameError, TypeError):
            continue
        if field in annotations:
            annotation = annotations[field]
            if isinstance(annotation, type) and not isinstance(annotation, types.GenericAlias):
                return annotation
            return None
    return None


def _field_setter(object, field):
    """
    Build the default setter closure for Binding(object, field).

    The closure refuses to create new members: the field must already be
    reachable on the object or its class (attribute, property, slot). When the
    class annotates the field with a plain class, values of other types are
    rejected with TypeError; None always clears the field.
    """
    annotation = _annotation(type(object), field)

    @rename("set_" + field)
    def setter(value):
        if not (hasattr(object, field) or hasattr(type(object), field)):
            raise AttributeError(f"{type(object).__name__!r} object has no field {field!r}")
        if annotation is not None and value is not None and not isinstance(value, annotation):
            raise TypeError(f"field {field!r} expects {annotation.__name__}, got {type(value).__name__}")
        setattr(object, field, value)

    return setter


class Binding:
    """
    Association between an argument and a field of an external object.

    Parameters
    - object: any
      The target; the binding keeps a reference but does not own it.
    - field: str
      Name of the field/property to write. Must be a Python identifier.
    - setter: Unset | Callable[[value], None]
      Explicit write delegate. When Unset, a closure over (object, field) is
      built once here (see _field_setter).

    Calling the binding writes the value through the setter.
    """
    __slots__ = ("_object", "_field", "_setter")

    def __init__(self, object, field, /, setter=Unset):
        if not isinstance(field, str):
            raise TypeError("binding 'field' must be a string")
        elif not field.isidentifier():
            raise ValueError("binding 'field' must be a valid identifier")
        if setter is not Unset and not callable(setter):
            raise TypeError("binding 'setter' must be callable")
        self._object = object
        self._field = field
        self._setter = setter if setter is not Unset else _field_setter(object, field)

    @property
    def object(self):
        return self._object

    field = mirror("field")
    setter = mirror("setter")

    def __call__(self, value, /):
        self._setter(value)

    def __repr__(self):
        return "binding(object=%r, field=%r)" % (self._object, self._field)


class Argument(ABC):
    """
    Common capability of every argument kind.

    Subclasses provide parse/update_bound_object/print_value_info and call
    super().parse(...) and super().init() to reuse name matching and per-pass
    reset. Name-validity errors are raised here, at construction:
    - TypeError: no name at all, or a name/description that is not a string.
    - ValueError: a malformed name, or an empty description.
    """
    __introspectable__ = ("short_name", "long_name", "description")

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__).lower()

    def __init__(self, short_name=Unset, long_name=Unset, description=Unset):
        short_name = coalesce(short_name)
        long_name = coalesce(long_name)
        description = coalesce(description)

        if short_name is None and long_name is None:
            raise TypeError(f"{self.__typename__} must specify a short or a long name")

        if not isinstance(short_name, str | None):
            raise TypeError(f"{self.__typename__} 'short_name' must be a string")
        elif isinstance(short_name, str) and not _SHORT_NAME.fullmatch(short_name):
            raise ValueError(f"{self.__typename__} 'short_name' must be a single letter")

        if not isinstance(long_name, str | None):
            raise TypeError(f"{self.__typename__} 'long_name' must be a string")
        elif isinstance(long_name, str) and not _LONG_NAME.fullmatch(long_name):
            raise ValueError(f"{self.__typename__} 'long_name' must be a valid shell-style option name")

        if not isinstance(description, str | None):
            raise TypeError(f"{self.__typename__} 'description' must be a string")
        elif isinstance(description, str) and not (description := description.strip()):
            raise ValueError(f"{self.__typename__} 'description' cannot be empty")

        self._short_name = short_name
        self._long_name = long_name
        self._description = description
        self._parsed = False
        self._bind = None

    short_name = mirror("short_name")
    long_name = mirror("long_name")
    description = mirror("description")

    @property
    def name(self):
        """
        Display name: the long name when set, otherwise the short name.
        """
        return self._long_name or self._short_name

    @property
    def flags(self):
        """
        Command-line spellings of this argument, short form first.
        """
        flags = []
        if self._short_name is not None:
            flags.append("-" + self._short_name)
        if self._long_name is not None:
            flags.append("--" + self._long_name)
        return tuple(flags)

    @property
    def parsed(self):
        """
        Whether this argument was matched during the current parse pass.
        """
        return self._parsed

    @parsed.setter
    def parsed(self, parsed):
        self._parsed = bool(parsed)

    @property
    def bind(self):
        return self._bind

    @bind.setter
    def bind(self, bind):
        if not isinstance(bind, Binding | None):
            raise TypeError(f"{self.__typename__} 'bind' must be a binding or None")
        self._bind = bind

    def init(self):
        """
        Reset per-pass state before a new parse pass.
        """
        self._parsed = False

    @abstractmethod
    def parse(self, tokens, index, /, *, messages=Unset):
        """
        Validate that tokens[index] names this argument and return index.

        Raises MissingTokenError when index is out of range,
        MalformedTokenError when the token is not option-shaped and
        NameMismatchError when it names another argument. Nothing is mutated.
        """
        if not 0 <= index < len(tokens):
            raise MissingTokenError(
                resolve(messages, "missing-token", name=self.name, index=index),
                title="missing token",
                code=FaultCode.MISSING_TOKEN,
                hint="the cursor must point at one of %s" % ", ".join(map(repr, self.flags)),
                argument=self.name,
                index=index,
            )

        token = tokens[index]
        if not isinstance(token, str) or not _TOKEN.fullmatch(token):
            raise MalformedTokenError(
                resolve(messages, "malformed-token", token=token, index=index),
                title="malformed option",
                code=FaultCode.MALFORMED_TOKEN,
                hint="options are spelled -x or --long-name",
                argument=self.name,
                token=token,
                index=index,
            )

        if token not in self.flags:
            raise NameMismatchError(
                resolve(messages, "name-mismatch", token=token, index=index, name=self.name),
                title="option mismatch",
                code=FaultCode.NAME_MISMATCH,
                hint="expected one of %s" % ", ".join(map(repr, self.flags)),
                argument=self.name,
                token=token,
                index=index,
            )

        debug("matched %r at position %d to %r", token, index, self)
        return index

    @abstractmethod
    def update_bound_object(self, *, messages=Unset):
        """
        Push the current value into the bound field, if any.
        """

    @abstractmethod
    def print_value_info(self, console=Unset, messages=Unset):
        """
        Write a one-line value report to the diagnostic console.
        """

    def _write_back(self, value, messages):
        if self._bind is None:
            return
        try:
            self._bind(value)
        except Exception as exception:
            raise BindingError(
                resolve(messages, "binding", name=self.name, field=self._bind.field, object=self._bind.object),
                title="binding failure",
                code=FaultCode.BINDING_FAILURE,
                hint="check that %r exists on the target and accepts %s values" % (
                    self._bind.field, type(value).__name__
                ),
                argument=self.name,
                field=self._bind.field,
                object=self._bind.object,
                cause=exception,
            ) from exception
        debug("wrote %r into %r", value, self._bind)

    def _report(self, console, message):
        coalesce(console, faults.console).print(message, markup=False, highlight=False)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__typename__,
            ", ".join("%s=%r" % pair for pair in self.__rich_repr__())
        )


class SwitchArgument(Argument):
    """
    Presence-only boolean argument with toggle semantics.

    The switch starts at default_value; each occurrence on the command line
    flips the current value (so a switch given twice ends where it started).
    init() restores the default.

    Parameters
    - short_name: Unset | None | str, one letter ("v" for -v)
    - long_name: Unset | None | str ("verbose" for --verbose)
    - description: Unset | None | str
    - default_value: bool
    """
    __introspectable__ = Argument.__introspectable__ + ("default_value", "value", "parsed")

    def __init__(self, short_name=Unset, long_name=Unset, description=Unset, default_value=False):
        super().__init__(short_name, long_name, description)
        if not isinstance(default_value, bool):
            raise TypeError(f"{self.__typename__} 'default_value' must be a boolean")
        self._default_value = default_value
        self._value = default_value

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        if not isinstance(value, bool):
            raise TypeError(f"{self.__typename__} 'value' must be a boolean")
        self._value = value

    @property
    def default_value(self):
        """
        Value restored each time init() is called.
        """
        return self._default_value

    @default_value.setter
    def default_value(self, default_value):
        if not isinstance(default_value, bool):
            raise TypeError(f"{self.__typename__} 'default_value' must be a boolean")
        self._default_value = default_value

    def parse(self, tokens, index, /, *, messages=Unset):
        """
        Flip the value for the occurrence at tokens[index].

        A switch consumes only its own token: the returned cursor is index + 1.
        """
        index = super().parse(tokens, index, messages=messages)
        self._value = not self._value
        self._parsed = True
        debug("flipped %r to %s", self.name, self._value)
        return index + 1

    def update_bound_object(self, *, messages=Unset):
        self._write_back(self._value, messages)

    def print_value_info(self, console=Unset, messages=Unset):
        self._report(console, resolve(messages, "switch-value", name=self.name, value="1" if self._value else "0"))

    def init(self):
        super().init()
        self._value = self._default_value


class ValueArgument(Argument):
    """
    Named argument carrying a single converted payload.

    The value is taken from the token that follows the name (-o out.txt) and
    converted with 'type'. Converters signal bad input by raising ValueError
    or TypeError, which surface as ValueConversionError. A token that is
    itself option-shaped is not taken as a value (MissingValueError).
    """
    __introspectable__ = Argument.__introspectable__ + ("type", "default_value", "value", "parsed")

    def __init__(self, short_name=Unset, long_name=Unset, description=Unset, default_value=None, *, type=str):
        super().__init__(short_name, long_name, description)
        if not callable(type):
            raise TypeError(f"{self.__typename__} 'type' must be callable")
        self._type = type
        self._default_value = default_value
        self._value = default_value

    type = mirror("type")

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value

    @property
    def default_value(self):
        return self._default_value

    @default_value.setter
    def default_value(self, default_value):
        self._default_value = default_value

    def parse(self, tokens, index, /, *, messages=Unset):
        index = super().parse(tokens, index, messages=messages)

        if index + 1 >= len(tokens) or _TOKEN.fullmatch(tokens[index + 1]) or tokens[index + 1] == "--":
            raise MissingValueError(
                resolve(messages, "missing-value", name=self.name, index=index),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass a value after a space (for example: %s <value>)" % tokens[index],
                argument=self.name,
                token=tokens[index],
                index=index,
            )

        token = tokens[index + 1]
        try:
            value = self._type(token)
        except (TypeError, ValueError) as exception:
            raise ValueConversionError(
                resolve(messages, "value-conversion", token=token, name=self.name, index=index + 1),
                title="bad value",
                code=FaultCode.VALUE_CONVERSION,
                hint=str(exception) or "check the expected value format",
                argument=self.name,
                token=token,
                index=index + 1,
            ) from exception

        self._value = value
        self._parsed = True
        debug("stored %r into %r", value, self.name)
        return index + 2

    def update_bound_object(self, *, messages=Unset):
        self._write_back(self._value, messages)

    def print_value_info(self, console=Unset, messages=Unset):
        self._report(console, resolve(messages, "value-value", name=self.name, value=self._value))

    def init(self):
        super().init()
        self._value = self._default_value


__all__ = (
    # Interface
    "Argument",

    # Argument kinds
    "SwitchArgument",
    "ValueArgument",

    # Write-back
    "Binding",
)
