"""
Standard options injected into every evaluated command.

- `--help[=FMT]`: FMT ∈ {pager, plain, groff}; bare `--help` uses the main
  TermInfo's help_format (pager unless configured otherwise).
- `--version`: only when the main TermInfo declares a non-empty version.

They are documented in the sdocs section of the command being evaluated.

Both are appended to the descriptors of the command being evaluated, of the
main command and of every choice, so help pages list them everywhere in a
multi-command program. Injection returns a new EvalContext and never
mutates the one it was given.
"""
import copy
from typing import NamedTuple

from .arguments import flag, option
from .faults import HelpFormat


class StandardOptions(NamedTuple):
    """
    Lookup terms for the injected options (`version` is None when absent).
    """
    help: object
    version: object

    @property
    def descriptors(self):
        descriptors = self.help.descriptors
        if self.version is not None:
            descriptors += self.version.descriptors
        return descriptors


def standard_options(info, /, section=None):
    """
    build the `--help` (and `--version`) lookup terms for a main TermInfo.

    Both are documented in `section`, the main sdocs when omitted.
    """
    section = section or info.sdocs
    help = option(
        "--help",
        type=HelpFormat,
        choices=tuple(HelpFormat),
        bare=info.help_format,
        docv="FMT",
        section=section,
        doc="Show this help in format $(docv) (pager, plain, or groff).",
    )
    version = None
    if info.version:
        version = flag("--version", section=section, doc="Show version information.")
    return StandardOptions(help, version)


def add_standard_options(context, /):
    """
    return (help_lookup, version_lookup | None, augmented_context).

    A context that already carries standard options is returned as-is with
    its existing lookups, so `--help`/`--version` are never added twice.
    """
    if context.standard is not None:
        return context.standard.help, context.standard.version, context

    standard = standard_options(context.main.info, context.command.info.sdocs)
    extra = standard.descriptors

    def extend(command):
        return copy.replace(command, descriptors=command.descriptors + extra)

    augmented = copy.replace(
        context,
        command=extend(context.command),
        main=extend(context.main),
        choices=tuple(map(extend, context.choices)),
        standard=standard,
    )
    return standard.help, standard.version, augmented


__all__ = (
    "StandardOptions",
    "standard_options",
    "add_standard_options",
)
