r"""
Termline argument descriptors and leaf term builders.

Overview
- Descriptors
  • Flag: named, presence-only switch (no payload), e.g., -v/--verbose.
  • Option: named, value-bearing option with one or more aliases (e.g., -o/--output).
    An option whose `bare` value is set accepts a missing value (`--help` alone).
  • Positional: value taken from the positional arguments, either the one at
    `index` or, with `rest=True`, every positional from `index` on.

- Leaf terms
  • flag(...), option(...), positional(...), positionals(...) build the
    descriptor and wrap it in a Term whose evaluation reads the parsed
    command line through that descriptor only.

- Introspection & representation
  • DescriptorType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields declared in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- Shared
  • section: str (help section), defaults to "OPTIONS" for named descriptors and
    "ARGUMENTS" for positionals; non-empty.
  • doc: Unset | str (short help), non-empty when provided.
  • hidden: bool (suppresses from help).
- Named (Flag/Option)
  • names: "-x" short names and "--long-name" long names; duplicates rejected.
  • repeat: bool (accept several occurrences).
- Value-bearing (Option/Positional)
  • type: Callable converting the raw string (ValueError/TypeError mean invalid input).
  • choices: Iterable of accepted converted values (duplicates rejected unless a Set).
  • docv: Unset | str (value label in help), defaults to "VAL" / "ARG".
  • default: value used when absent; required: absence is a usage failure.

Quick example:
    >>> from termline.arguments import flag, option, positional
    >>> verbose = flag("-v", "--verbose", doc="Print progress.")
    >>> threads = option("-t", "--threads", type=int, default=1, docv="THD")
    >>> source = positional(0, docv="SRC", required=True)
"""
import builtins
import functools
import operator
import re
from collections.abc import Iterable, Set

from .faults import Ok, UsageFailure, FaultCode, alternatives, failed, invalid
from .terms import Term
from .utils import *


class DescriptorType(type):
    """
    Metaclass that turns descriptor classes into introspectable value types.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in validation messages.
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_name" field.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the 'section', 'doc' and 'hidden' fields.

    - section: must be a non-empty string after trimming.
    - doc: Unset becomes None; a provided string must be non-empty after trimming.
    """
    if not isinstance(section := metadata["section"], str):
        raise TypeError(f"{cls.__typename__} 'section' must be a string")
    elif not (section := section.strip()):
        raise ValueError(f"{cls.__typename__} 'section' cannot be empty")
    metadata["section"] = section

    if not isinstance(doc := metadata["doc"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'doc' must be a string")
    elif isinstance(doc, str) and not (doc := doc.strip()):
        raise ValueError(f"{cls.__typename__} 'doc' cannot be empty")
    metadata["doc"] = coalesce(doc)
    metadata["hidden"] = bool(metadata["hidden"])


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate and normalize names of Flag/Option descriptors.

    - names: required. Short names are a dash and one letter or digit ("-v", "-1");
      long names are two dashes and hyphen-separated segments ("--dry-run").
      Regex: r"-[^\W_]|--[^\W\d_](-?[^\W_]+)*". Unicode letters are allowed.
    - duplicates are rejected; declaration order is kept (help lists names in it).
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"-[^\W_]|--[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be '-x' or '--long-name' style ({name!r} given)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)
    metadata["repeat"] = bool(metadata["repeat"])


def _sanitize_parametric_metadata(cls, metadata, /, docv):
    """
    Internal: validate and normalize metadata for value-bearing descriptors.

    - type: must be callable (converter). Only callability is enforced.
    - choices: must be iterable; when not a Set, duplicates are rejected and the
      collection is normalized to a tuple.
    - docv: Unset falls back to the given default label; a provided string must be
      non-empty after trimming.
    - default is not validated: any value, None included, is accepted.
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be iterable")
    if not isinstance(choices, Set):
        sanitized = []
        for choice in choices:
            if choice in sanitized:
                raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
            sanitized.append(choice)
        choices = tuple(sanitized)
    metadata["choices"] = choices

    if not isinstance(label := metadata["docv"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'docv' must be a string")
    elif isinstance(label, str) and not (label := label.strip()):
        raise ValueError(f"{cls.__typename__} 'docv' cannot be empty")
    metadata["docv"] = coalesce(label, docv)
    metadata["required"] = bool(metadata["required"])


class Flag(metaclass=DescriptorType):
    """
    Named, presence-only descriptor.

    A flag carries no value; its presence is the signal. With repeat=True it
    may occur several times and its term counts the occurrences.
    """

    __introspectable__ = (
        "names",
        "doc",
        "section",
        "repeat",
        "hidden",
    )

    def __init__(self, *names, doc=Unset, section="OPTIONS", repeat=False, hidden=False):
        metadata = {
            "names": names,
            "doc": doc,
            "section": section,
            "repeat": repeat,
            "hidden": hidden,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def named(self):
        return True


class Option(metaclass=DescriptorType):
    """
    Named, value-bearing descriptor.

    Highlights
    - Aliases via 'names' ("-o", "--output").
    - Values given as "--output=FILE", "--output FILE" or "-oFILE".
    - bare: when set, the value may be omitted and `bare` is used instead; such
      an option only takes its value inline ("--help=plain"), never from the
      next token.
    - repeat: accept several occurrences; the term then yields a list.
    """

    __introspectable__ = (
        "names",
        "type",
        "default",
        "bare",
        "choices",
        "docv",
        "doc",
        "section",
        "repeat",
        "required",
        "hidden",
    )

    def __init__(
            self,
            *names,
            type=str,
            default=None,
            bare=Unset,
            choices=(),
            docv=Unset,
            doc=Unset,
            section="OPTIONS",
            repeat=False,
            required=False,
            hidden=False
    ):
        metadata = {
            "names": names,
            "type": type,
            "default": default,
            "bare": bare,
            "choices": choices,
            "docv": docv,
            "doc": doc,
            "section": section,
            "repeat": repeat,
            "required": required,
            "hidden": hidden,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata, "VAL")

        if metadata["required"] and metadata["bare"] is not Unset:
            raise TypeError(f"{builtins.type(self).__typename__} with a 'bare' value cannot be required")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def named(self):
        return True

    @property
    def optional(self):
        """
        True when the value may be omitted (a bare value is set).
        """
        return self._bare is not Unset


class Positional(metaclass=DescriptorType):
    """
    Positional, value-bearing descriptor.

    - index: 0-based position among the positional arguments (after the
      sub-command name, if any).
    - rest: when True, covers every positional from index on and the term
      yields a list.
    """

    __introspectable__ = (
        "index",
        "type",
        "default",
        "choices",
        "docv",
        "doc",
        "section",
        "rest",
        "required",
        "hidden",
    )

    def __init__(
            self,
            index=0,
            /,
            type=str,
            default=None,
            choices=(),
            docv=Unset,
            doc=Unset,
            section="ARGUMENTS",
            rest=False,
            required=False,
            hidden=False
    ):
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"{builtins.type(self).__typename__} 'index' must be an integer")
        elif index < 0:
            raise ValueError(f"{builtins.type(self).__typename__} 'index' cannot be negative")

        metadata = {
            "index": index,
            "type": type,
            "default": default,
            "choices": choices,
            "docv": docv,
            "doc": doc,
            "section": section,
            "rest": bool(rest),
            "required": required,
            "hidden": hidden,
        }
        _sanitize_metadata(builtins.type(self), metadata)
        _sanitize_parametric_metadata(builtins.type(self), metadata, "ARG")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def named(self):
        return False

    def covers(self, position, /):
        """
        True when the positional at `position` is read by this descriptor.
        """
        return position == self._index or (self._rest and position > self._index)


def _convert(descriptor, raw, what):
    try:
        value = descriptor.type(raw)
    except (ValueError, TypeError) as exception:
        if descriptor.choices:
            return invalid(what, raw, "expected %s" % alternatives(map(str, descriptor.choices)))
        return invalid(what, raw, str(exception) or None)
    if descriptor.choices and value not in descriptor.choices:
        return UsageFailure(
            "invalid value '%s' for %s, expected %s" % (raw, what, alternatives(map(str, descriptor.choices))),
            code=FaultCode.INVALID_CHOICE,
            token=raw,
        )
    return Ok(value)


def _missing(what):
    return UsageFailure("required %s is missing" % what, code=FaultCode.MISSING_ARGUMENT)


def flag(*names, **metadata):
    """
    Term[bool] that is True when the flag is present.

    With repeat=True the term is Term[int] and yields the number of occurrences.
    """
    descriptor = Flag(*names, **metadata)

    @rename("flag")
    def evaluate(context, line):
        occurrences = line.occurrences(descriptor)
        if descriptor.repeat:
            return Ok(len(occurrences))
        return Ok(bool(occurrences))

    return Term((descriptor,), evaluate)


def option(*names, **metadata):
    """
    Term[T] reading a named option's converted value.

    Absent → `default` (or a usage failure when `required`); present without a
    value → `bare`; with repeat=True the term yields the list of every value.
    """
    descriptor = Option(*names, **metadata)

    @rename("option")
    def evaluate(context, line):
        occurrences = line.occurrences(descriptor)
        if not occurrences:
            if descriptor.required:
                return _missing("option %s" % descriptor.names[0])
            return Ok([] if descriptor.repeat else descriptor.default)

        values = []
        for occurrence in occurrences:
            if occurrence.value is None:
                values.append(descriptor.bare)
                continue
            if failed(result := _convert(descriptor, occurrence.value, "option %s" % occurrence.name)):
                return result
            values.append(result.value)
        return Ok(values if descriptor.repeat else values[-1])

    return Term((descriptor,), evaluate)


def positional(index=0, /, **metadata):
    """
    Term[T] reading the positional argument at index.

    Absent → `default` (or a usage failure when `required`).
    """
    descriptor = Positional(index, **metadata)

    @rename("positional")
    def evaluate(context, line):
        values = line.values(descriptor)
        if not values:
            if descriptor.required:
                return _missing("argument %s" % descriptor.docv)
            return Ok(descriptor.default)
        return _convert(descriptor, values[0], "argument %s" % descriptor.docv)

    return Term((descriptor,), evaluate)


def positionals(index=0, /, **metadata):
    """
    Term[list[T]] reading every positional argument from index on.

    With required=True at least one value must be present.
    """
    descriptor = Positional(index, rest=True, **metadata)

    @rename("positionals")
    def evaluate(context, line):
        values = []
        for raw in line.values(descriptor):
            if failed(result := _convert(descriptor, raw, "argument %s" % descriptor.docv)):
                return result
            values.append(result.value)
        if not values and descriptor.required:
            return _missing("argument %s" % descriptor.docv)
        return Ok(values)

    return Term((descriptor,), evaluate)


__all__ = (
    # Descriptors
    "Flag",
    "Option",
    "Positional",

    # Leaf term builders
    "flag",
    "option",
    "positional",
    "positionals",
)

# The metaclass is an implementation detail of the descriptor classes.
del DescriptorType
