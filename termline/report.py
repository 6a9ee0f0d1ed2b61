"""
Presentation of evaluation outcomes.

present() maps an Evaluation to what the user sees and to an exit status:

- UsageFailure      → "prog: message", the usage line and a "Try ... --help"
                      pointer on the error stream; status 1.
- MessageFailure    → "prog: message" on the error stream; status 1.
- VersionRequested  → the main program version on the output stream; status 0.
- HelpRequested     → the help page of the requested command on the output
                      stream (or through a pager); status 0. Asking help for
                      a command that does not exist is a usage failure.
- Ok                → nothing is written; status 0.

Streams are rich Consoles. Palette entries can be overridden by defining a
mapping named __styles__ in __main__; styles are dropped on non-terminals.
Fault codes are shown through FaultCode.normalize (see __main__.__codes__).
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .faults import *
from .manpage import help_page, help_subst, plain, print_page, synopsis
from .probe import SystemProbe
from .terms import EvalContext

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _styles():
    return defaultdict(str, {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "dim #00E5FF",  # neon cyan fault code

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "usage-label": "bold #00E6FF",  # cyan "Usage"
        "usage-section": "bold #36C5F0",  # sky-blue usage line
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text

        # version
        "program-version": "bold #00E6FF",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _text(fragment, style=""):
    if not fragment:
        return Text("")
    if isinstance(fragment, Text):
        return fragment
    return Text(str(fragment), style)


def _print(console, renderable):
    console.print(renderable, markup=False, highlight=False, emoji=False, soft_wrap=True)


def _header(failure, context, styles):
    header = Text.assemble(
        _text(context.main.info.name, styles["prog-name"]),
        ": ",
        _text(failure.doc, styles["error-message"]),
    )
    if (code := failure.code) is not None:
        label = code.normalize() if isinstance(code, FaultCode) else code
        header.append(" ")
        header.append(_text("[%s]" % label, styles["code"]))
    return header


def _hint(failure, styles):
    if not (hint := failure.options.get("hint")):
        return None
    return Text.assemble(_text(" → ", styles["hint-arrow"]), _text(hint, styles["hint"]))


def render_usage(failure, context, console, /):
    """
    write a usage failure: message, optional hint, usage line and help pointer.
    """
    styles = _styles()
    subst = help_subst(context)
    _print(console, _header(failure, context, styles))
    if hint := _hint(failure, styles):
        _print(console, hint)
    _print(console, Text.assemble(
        _text("Usage", styles["usage-label"]),
        ": ",
        _text(plain(synopsis(context), subst), styles["usage-section"]),
    ))

    name = context.main.info.name
    if not context.default:
        tried = "'%s %s --help'" % (name, context.command.info.name)
    elif context.choices:
        tried = "'%s --help' or '%s COMMAND --help'" % (name, name)
    else:
        tried = "'%s --help'" % name
    _print(console, "Try %s for more information." % tried)


def render_message(failure, context, console, /):
    """
    write a message failure.
    """
    styles = _styles()
    _print(console, _header(failure, context, styles))
    if hint := _hint(failure, styles):
        _print(console, hint)


def render_version(context, console, /):
    _print(console, _text(context.main.info.version, _styles()["program-version"]))


def render_help(format, context, console, probe, /):
    print_page(format, help_page(context), help_subst(context), console, probe)


def resolve_help(context, target, /):
    """
    context whose command is the help target.

    returns
    - Ok(context)  unchanged when target is None (help for the command being
                   evaluated), or with the named choice as command.
    - UsageFailure when no choice is named target.
    """
    if target is None:
        return Ok(context)
    if (choice := context.find(target)) is None:
        return unknown("command", target)
    return Ok(context._replace(command=choice))


def present(evaluation, /, *, stdout=None, stderr=None, probe=None):
    """
    present an Evaluation and return the process exit status.

    stdout/stderr are rich Consoles or writable text streams (default: the
    process streams); probe is the EnvironmentProbe used by the pager.
    """
    outcome, context = evaluation
    if not isinstance(context, EvalContext):
        raise TypeError("present() evaluation must carry an eval-context")

    def console(stream, error):
        if isinstance(stream, Console):
            return stream
        if stream is None:
            return Console(stderr=error)
        return Console(file=stream)

    match outcome:
        case Ok():
            return EXIT_SUCCESS
        case UsageFailure():
            render_usage(outcome, context, console(stderr, True))
            return EXIT_FAILURE
        case MessageFailure():
            render_message(outcome, context, console(stderr, True))
            return EXIT_FAILURE
        case VersionRequested():
            render_version(context, console(stdout, False))
            return EXIT_SUCCESS
        case HelpRequested(format, target):
            if failed(resolved := resolve_help(context, target)):
                render_usage(resolved, context, console(stderr, True))
                return EXIT_FAILURE
            render_help(format, resolved.value, console(stdout, False), probe or SystemProbe())
            return EXIT_SUCCESS
    raise TypeError("present() outcome must be Ok or a Failure, not %r" % (outcome,))


__all__ = (
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "present",
    "resolve_help",
    "render_usage",
    "render_message",
    "render_version",
    "render_help",
)
