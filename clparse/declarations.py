"""
Declarative argument markers and the scanner that turns them into bound arguments.

Instead of creating arguments explicitly, a class can declare them as class
attributes and let extract_argument_attributes(...) build the arguments and
wire their bindings to an instance:

    class Settings:
        verbose: bool = Switch("v", "verbose", "print more", default=False)
        output: str = Value("o", "output", type=str, default="out.txt")

    settings = Settings()
    parser = CommandLineParser()
    parser.extract_argument_attributes(settings)
    parser.parse(["-v", "--output", "report.txt"])
    settings.verbose, settings.output   # (True, "report.txt")

Markers are non-data descriptors: reading the attribute on an instance that
was never written yields the declared default; once write-back stores a value
in the instance, that value wins. Reading the attribute on the class yields
the marker itself.
"""
import functools
from abc import ABC, abstractmethod

from .arguments import Binding, SwitchArgument, ValueArgument
from .utils import *


class Declaration(ABC):
    """
    Base marker: holds names, description and default of an argument.

    Subclasses implement __argument__() to build a fresh, unbound argument.
    """
    __introspectable__ = ("short_name", "long_name", "description", "default")

    def __init__(self, short_name=Unset, long_name=Unset, description=Unset, default=None):
        for parameter, object in (("short_name", short_name), ("long_name", long_name), ("description", description)):
            if not isinstance(object, str | UnsetType | None):
                raise TypeError(f"{type(self).__name__.lower()} '{parameter}' must be a string")
        self._short_name = coalesce(short_name)
        self._long_name = coalesce(long_name)
        self._description = coalesce(description)
        self._default = default
        self._field = None

    short_name = mirror("short_name")
    long_name = mirror("long_name")
    description = mirror("description")
    default = mirror("default")
    field = mirror("field")

    def __set_name__(self, owner, name):
        self._field = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return self._default

    @abstractmethod
    def __argument__(self):
        """
        Build a fresh, unbound argument from this declaration.
        """

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__.lower(),
            ", ".join("%s=%r" % (name, getattr(self, name)) for name in type(self).__introspectable__)
        )


class Switch(Declaration):
    """
    Declare a class attribute as backed by a SwitchArgument.
    """

    def __init__(self, short_name=Unset, long_name=Unset, description=Unset, default=False):
        if not isinstance(default, bool):
            raise TypeError("switch 'default' must be a boolean")
        super().__init__(short_name, long_name, description, default)

    def __argument__(self):
        return SwitchArgument(self._short_name, self._long_name, self._description, self._default)


class Value(Declaration):
    """
    Declare a class attribute as backed by a ValueArgument.
    """
    __introspectable__ = Declaration.__introspectable__ + ("type",)

    def __init__(self, short_name=Unset, long_name=Unset, description=Unset, default=None, *, type=str):
        if not callable(type):
            raise TypeError("value 'type' must be callable")
        super().__init__(short_name, long_name, description, default)
        self._type = type

    type = mirror("type")

    def __argument__(self):
        return ValueArgument(self._short_name, self._long_name, self._description, self._default, type=self._type)


@functools.lru_cache(maxsize=256)
def _scan(cls):
    """
    Collect (field, declaration) pairs of cls, base classes first.

    A field redefined by a subclass keeps its original position; a field
    overridden with a non-marker value is dropped.
    """
    declarations = {}
    for klass in reversed(cls.__mro__):
        for name, attribute in vars(klass).items():
            if isinstance(attribute, Declaration):
                declarations[name] = attribute
            elif name in declarations:
                del declarations[name]
    debug("scanned %s: %s", cls.__qualname__, ", ".join(declarations) or "no declarations")
    return tuple(declarations.items())


def extract_argument_attributes(object, /):
    """
    Build one bound argument per marker declared on type(object).

    Returns a list in declaration order; each argument's bind writes into the
    corresponding field of 'object'.
    """
    if isinstance(object, type):
        raise TypeError("extract_argument_attributes() argument must be an instance, not a class")

    arguments = []
    for field, declaration in _scan(type(object)):
        argument = declaration.__argument__()
        argument.bind = Binding(object, field)
        arguments.append(argument)
    return arguments


__all__ = (
    "Declaration",
    "Switch",
    "Value",
    "extract_argument_attributes",
)
