"""
Termline outcomes: success wrapper, failure family and fault codes.

Scope
- Ok: the success side of every evaluation step (parser, leaf terms, composed
  terms, dispatcher, engine).
- Failure: the closed family of terminal outcomes
  • UsageFailure     : the command line itself is invalid.
  • MessageFailure   : term logic rejected well-formed input.
  • HelpRequested    : the user asked for help (format + optional command name).
  • VersionRequested : the user asked for the version.
- FaultCode: canonical, stable numeric identifiers attached to usage and
  message failures so callers and logs can tell them apart without parsing text.
- unknown()/ambiguous()/invalid(): message builders shared by the dispatcher,
  the parser and help resolution.

Design
- Failures are plain values returned up the stack, never raised. Every
  combinator checks `isinstance(result, Failure)` and forwards it untouched,
  so the kind of failure stays inspectable until presentation.
- Presentation (streams, exit statuses) lives in termline.report.
"""
from enum import IntEnum, StrEnum
from types import MappingProxyType


class HelpFormat(StrEnum):
    """
    rendering formats accepted by `--help[=FMT]`.
    """
    PAGER = "pager"
    PLAIN = "plain"
    GROFF = "groff"


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND, AMBIGUOUS_COMMAND
    - named arguments (1111x)
      • UNKNOWN_OPTION, AMBIGUOUS_OPTION, FLAG_ASSIGNMENT,
        OPTION_VALUE_REQUIRED, DUPLICATED_OPTION
    - positionals (1112x)
      • UNEXPECTED_POSITIONAL, MISSING_ARGUMENT
    - values (1113x)
      • INVALID_VALUE, INVALID_CHOICE
    - delegated (1114x)
      • DELEGATED_ERROR (raised by term logic through ret())
    """
    # --- routing errors ---
    UNKNOWN_COMMAND       = 11101
    AMBIGUOUS_COMMAND     = 11102

    # --- option/flag errors ---
    UNKNOWN_OPTION        = 11111
    AMBIGUOUS_OPTION      = 11112
    FLAG_ASSIGNMENT       = 11113
    OPTION_VALUE_REQUIRED = 11114
    DUPLICATED_OPTION     = 11115

    # --- positional errors ---
    UNEXPECTED_POSITIONAL = 11121
    MISSING_ARGUMENT      = 11122

    # --- value errors ---
    INVALID_VALUE         = 11131
    INVALID_CHOICE        = 11132

    # --- delegated errors ---
    DELEGATED_ERROR       = 11141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Ok[_T]:
    """
    Successful outcome carrying a value.
    """
    __slots__ = ("_value",)
    __match_args__ = ("value",)

    def __init__(self, value, /):
        self._value = value

    @property
    def value(self):
        return self._value

    def __eq__(self, other):
        if not isinstance(other, Ok):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((Ok, self._value))

    def __repr__(self):
        return f"Ok({self._value!r})"


class Failure:
    """
    Base of the terminal outcomes. Not an exception: failures are returned.

    Subclasses declare their payload in __fields__; equality and repr are
    derived from it.
    """
    __slots__ = ()
    __fields__ = ()

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        cls.__match_args__ = cls.__fields__

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__fields__)

    def __hash__(self):
        return hash((type(self), *(getattr(self, name) for name in self.__fields__)))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(repr(getattr(self, name)) for name in self.__fields__))


class _DocumentedFailure(Failure):
    # Usage and message failures share the (doc, options) shape.
    __slots__ = ("_doc", "_options")
    __fields__ = ("doc",)

    def __init__(self, doc, /, **options):
        if not isinstance(doc, str):
            raise TypeError(f"{type(self).__name__} 'doc' must be a string")
        self._doc = doc
        self._options = MappingProxyType(options)

    @property
    def doc(self):
        return self._doc

    @property
    def options(self):
        return self._options

    @property
    def code(self):
        return self._options.get("code")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self._doc, **{**self._options, **overrides})


class UsageFailure(_DocumentedFailure):
    """
    The command line is invalid: unknown or ambiguous names, wrong arity,
    values that do not convert.
    """
    __slots__ = ()


class MessageFailure(_DocumentedFailure):
    """
    Term logic rejected otherwise well-formed input.
    """
    __slots__ = ()


class HelpRequested(Failure):
    """
    `--help` was given. `target` is None for the main command, otherwise the
    name of the sub-command being evaluated.
    """
    __slots__ = ("_format", "_target")
    __fields__ = ("format", "target")

    def __init__(self, format, target=None, /):
        if not isinstance(target, str | None):
            raise TypeError("HelpRequested 'target' must be a string")
        self._format = format
        self._target = target

    @property
    def format(self):
        return self._format

    @property
    def target(self):
        return self._target


class VersionRequested(Failure):
    """
    `--version` was given.
    """
    __slots__ = ()


def _quote(text):
    return "'%s'" % text


def alternatives(candidates, /):
    """
    "'a'", "either 'a' or 'b'", "either 'a', 'b' or 'c'".
    """
    quoted = [_quote(candidate) for candidate in candidates]
    if len(quoted) < 2:
        return "".join(quoted)
    return "either %s or %s" % (", ".join(quoted[:-1]), quoted[-1])


def unknown(kind, token, /, **options):
    """
    build the usage failure for a name that matches nothing.

    kind is the noun shown to the user ("command", "option").
    """
    code = FaultCode.UNKNOWN_COMMAND if kind == "command" else FaultCode.UNKNOWN_OPTION
    return UsageFailure("unknown %s %s" % (kind, _quote(token)), **{"code": code, "token": token} | options)


def ambiguous(kind, token, candidates, /, **options):
    """
    build the usage failure for a prefix shared by several names.

    candidates are listed in sorted order.
    """
    candidates = tuple(sorted(candidates))
    code = FaultCode.AMBIGUOUS_COMMAND if kind == "command" else FaultCode.AMBIGUOUS_OPTION
    return UsageFailure(
        "%s %s ambiguous, could be %s" % (kind, _quote(token), alternatives(candidates)),
        **{"code": code, "token": token, "candidates": candidates} | options
    )


def invalid(what, value, reason=None, /, **options):
    """
    build the usage failure for a value that failed conversion.
    """
    doc = "invalid value %s for %s" % (_quote(value), what)
    if reason:
        doc += ", %s" % reason
    return UsageFailure(doc, **{"code": FaultCode.INVALID_VALUE, "token": value} | options)


def failed(result, /):
    """
    True when result is a Failure (the only check combinators rely on).
    """
    return isinstance(result, Failure)


__all__ = (
    "HelpFormat",
    "FaultCode",
    "Ok",
    "Failure",
    "UsageFailure",
    "MessageFailure",
    "HelpRequested",
    "VersionRequested",
    "unknown",
    "ambiguous",
    "invalid",
    "alternatives",
    "failed",
)
