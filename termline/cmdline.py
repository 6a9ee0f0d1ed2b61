"""
Command-line parser: raw argument vector → ParsedCommandLine.

parse(descriptors, args) classifies every token against the descriptors of
the command being evaluated and returns Ok(ParsedCommandLine) or the first
UsageFailure met. It never converts values; leaf terms do that when they
read the line through their own descriptor.

Token grammar
- "--"                 ends option parsing; every later token is positional.
- "-"                  is a positional (conventionally stdin).
- "--name=value"       long option with inline value; "--name" may be any
                       unambiguous prefix of a declared long name.
- "--name value"       long option taking the next token as its value, unless
                       that token looks like an option ("-x", "--x").
- "-x", "-xVALUE"      short option with glued value; "-x VALUE" as above.
- "-abc"               bundled short flags (a value-bearing option may close
                       the bundle and take the rest as its value).
- anything else        positional.

Options whose value may be omitted (a `bare` value is declared, as for
`--help[=FMT]`) only take an inline/glued value, never the next token.
"""
import difflib
import logging
from collections import defaultdict
from typing import NamedTuple

from .arguments import Flag, Option
from .faults import Ok, UsageFailure, FaultCode, ambiguous, unknown
from .trie import PrefixDict, Found, Ambiguous, NotFound
from .utils import ordinal

logger = logging.getLogger(__name__)


class Occurrence(NamedTuple):
    """
    One appearance of a named descriptor on the command line.

    - name: the full declared name that matched ("--verbose", even for "--verb").
    - value: the raw value, or None when none was given.
    - index: 0-based index of the token in the argument vector.
    """
    name: str
    value: str | None
    index: int


class ParsedCommandLine:
    """
    Result of a successful parse: named occurrences per descriptor and the
    positional arguments in order.
    """
    __slots__ = ("_occurrences", "_positionals")

    def __init__(self, occurrences, positionals, /):
        self._occurrences = {descriptor: tuple(found) for descriptor, found in occurrences.items()}
        self._positionals = tuple(positionals)

    def occurrences(self, descriptor, /):
        return self._occurrences.get(descriptor, ())

    @property
    def positionals(self):
        return self._positionals

    def values(self, descriptor, /):
        """
        raw positional values read by a positional descriptor.
        """
        if descriptor.rest:
            return self._positionals[descriptor.index:]
        return self._positionals[descriptor.index:descriptor.index + 1]

    def __repr__(self):
        named = {", ".join(descriptor.names): found for descriptor, found in self._occurrences.items()}
        return f"parsed-command-line(named={named!r}, positionals={self._positionals!r})"


def _index(descriptors):
    shorts = {}
    longs = PrefixDict()
    positionals = []
    # A term may reuse one descriptor (the same leaf composed twice).
    for descriptor in dict.fromkeys(descriptors):
        if not descriptor.named:
            positionals.append(descriptor)
            continue
        for name in descriptor.names:
            if name in shorts or name in longs:
                raise ValueError(f"option name {name!r} is declared more than once")
            if name.startswith("--"):
                longs.add(name, (name, descriptor))
            else:
                shorts[name] = (name, descriptor)
    return shorts, longs, positionals


def _hint(name, shorts, longs):
    suggestions = difflib.get_close_matches(name, [*shorts, *longs], 1)
    if suggestions:
        return "did you mean %r?" % suggestions[0]
    return None


def _looks_like_option(token):
    return len(token) > 1 and token.startswith("-")


def parse(descriptors, args, /):
    """
    parse args against descriptors.

    returns
    - Ok(ParsedCommandLine) when every token was accounted for.
    - UsageFailure for the first problem found:
      • UNKNOWN_OPTION / AMBIGUOUS_OPTION  name resolution failed.
      • FLAG_ASSIGNMENT                    a flag was given a value.
      • OPTION_VALUE_REQUIRED              an option is missing its value.
      • DUPLICATED_OPTION                  a non-repeatable option appears twice.
      • UNEXPECTED_POSITIONAL              no positional descriptor reads a token.

    raises
    - ValueError when two descriptors declare the same option name.
    """
    shorts, longs, declared = _index(descriptors)
    occurrences = defaultdict(list)
    positionals = []
    tokens = list(args)

    def record(name, descriptor, value, index):
        if isinstance(descriptor, Flag) and value is not None:
            return UsageFailure(
                "flag '%s' cannot take a value" % name,
                code=FaultCode.FLAG_ASSIGNMENT,
                token=name,
                hint="remove everything from '=' (for example: %s)" % name,
            )
        if occurrences[descriptor] and not descriptor.repeat:
            return UsageFailure(
                "%s '%s' cannot be repeated" % ("flag" if isinstance(descriptor, Flag) else "option", name),
                code=FaultCode.DUPLICATED_OPTION,
                token=name,
            )
        occurrences[descriptor].append(Occurrence(name, value, index))
        return None

    def take_value(name, descriptor, value, index):
        # -> (value, consumed next token?) or a failure
        if value is not None or not isinstance(descriptor, Option) or descriptor.optional:
            return value, False
        if index + 1 < len(tokens) and not _looks_like_option(tokens[index + 1]):
            return tokens[index + 1], True
        return UsageFailure(
            "option '%s' needs an argument" % name,
            code=FaultCode.OPTION_VALUE_REQUIRED,
            token=name,
            hint="pass a value inline (%s=VALUE) or as the next argument" % name,
        )

    index = 0
    terminated = False
    while index < len(tokens):
        token = tokens[index]

        if terminated or not _looks_like_option(token):
            positionals.append(token)
            index += 1
            continue

        if token == "--":
            terminated = True
            index += 1
            continue

        if token.startswith("--"):
            name, equals, value = token.partition("=")
            match longs.lookup(name) if len(name) > 2 else NotFound():
                case Found((name, descriptor)):
                    pass
                case Ambiguous(candidates):
                    return ambiguous("option", name, candidates)
                case NotFound():
                    return unknown("option", name, hint=_hint(name, shorts, longs))
            outcome = take_value(name, descriptor, value if equals else None, index)
            if isinstance(outcome, UsageFailure):
                return outcome
            value, consumed = outcome
            if failure := record(name, descriptor, value, index):
                return failure
            index += 1 + consumed
            continue

        # Short names, possibly bundled ("-vx") or with a glued value ("-ofile").
        bundle = token[1:]
        consumed = False
        while bundle:
            name, bundle = "-" + bundle[0], bundle[1:]
            try:
                name, descriptor = shorts[name]
            except KeyError:
                return unknown("option", name, hint=_hint(name, shorts, longs))
            if isinstance(descriptor, Option):
                outcome = take_value(name, descriptor, bundle or None, index)
                if isinstance(outcome, UsageFailure):
                    return outcome
                value, consumed = outcome
                bundle = ""
            else:
                value = None
            if failure := record(name, descriptor, value, index):
                return failure
        index += 1 + consumed

    for position, token in enumerate(positionals):
        if not any(descriptor.covers(position) for descriptor in declared):
            return UsageFailure(
                "too many arguments, don't know what to do with '%s' (%s positional argument)" % (
                    token, ordinal(position + 1)
                ),
                code=FaultCode.UNEXPECTED_POSITIONAL,
                token=token,
            )

    logger.debug(
        "parsed %d tokens into %d named occurrences and %d positionals",
        len(tokens), sum(map(len, occurrences.values())), len(positionals)
    )
    return Ok(ParsedCommandLine(occurrences, positionals))


__all__ = (
    "Occurrence",
    "ParsedCommandLine",
    "parse",
)
