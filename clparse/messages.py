"""
clparse message templates.

Every user-facing sentence produced by the library (value reports and fault
messages) comes from a template table instead of being hard-coded at the call
site. DEFAULT_MESSAGES holds the documented defaults; a parser (or a direct
caller of print_value_info) may supply its own mapping, which is overlaid on
the defaults key by key.

Templates use str.format fields:
- name:   the argument display name (long name when set, otherwise short name)
- value:  the rendered value ("1"/"0" for switches)
- field:  the bound field name
- object: the bound object
- token:  the offending command-line token
- index:  the cursor position of the token
"""
from collections.abc import Mapping
from types import MappingProxyType

from .utils import *

DEFAULT_MESSAGES = MappingProxyType({
    # value reports
    "switch-value": "argument {name}, value: {value}",
    "value-value": "argument {name}, value: {value}",

    # binding faults
    "binding": "unable to bind argument {name!r} to field {field!r} of {object!r}",

    # parse faults
    "malformed-token": "bad form of option {token!r} at position {index}",
    "name-mismatch": "option {token!r} at position {index} does not name argument {name!r}",
    "missing-token": "no token at position {index} for argument {name!r}",
    "missing-value": "argument {name!r} at position {index} requires a value",
    "value-conversion": "cannot convert {token!r} for argument {name!r} at position {index}",
    "unknown-argument": "unknown option {token!r} at position {index}",
    "unexpected-token": "unexpected token {token!r} at position {index}",
})


def merge(messages=Unset, /):
    """
    Overlay a caller-supplied template table on the defaults.

    Unknown keys are rejected so that typos in a custom table surface early
    instead of silently falling back to the default wording.
    """
    if messages is Unset or messages is DEFAULT_MESSAGES:
        return DEFAULT_MESSAGES
    if not isinstance(messages, Mapping):
        raise TypeError("messages must be a mapping")
    if unknown := set(messages) - set(DEFAULT_MESSAGES):
        raise ValueError("unknown message keys: %s" % ", ".join(sorted(map(repr, unknown))))
    for key, template in messages.items():
        if not isinstance(template, str):
            raise TypeError("message template %r must be a string" % key)
    return MappingProxyType(DEFAULT_MESSAGES | dict(messages))


def resolve(messages, key, /, **fields):
    """
    Format the template stored under key using the given fields.
    """
    return merge(messages)[key].format(**fields)


__all__ = (
    "DEFAULT_MESSAGES",
    "merge",
    "resolve",
)
