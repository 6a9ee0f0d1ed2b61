"""
Evaluation engine and sub-command dispatcher.

evaluate_in() runs one term against an argument vector:

1. standard options are injected into the context (standard.add_standard_options);
2. the arguments are parsed against the augmented descriptors of the
   command being evaluated; a parse failure stops here;
3. `--help` wins over everything else and yields HelpRequested(format, target),
   target being None for the main command and the command name otherwise;
4. `--version` yields VersionRequested;
5. otherwise the term's own evaluation decides the outcome.

dispatch() picks the sub-command named by the first argument (any
unambiguous prefix of a choice name) and evaluate_choice() chains the two.
Neither presents anything: outcomes are returned with the context needed to
present them (termline.report).
"""
import difflib
import logging
from typing import NamedTuple

from .cmdline import parse
from .faults import Ok, HelpRequested, VersionRequested, ambiguous, failed, unknown
from .standard import add_standard_options
from .terms import Command, EvalContext, Term, TermInfo
from .trie import PrefixDict, Found, Ambiguous, NotFound

logger = logging.getLogger(__name__)


class Evaluation(NamedTuple):
    """
    An outcome and the (augmented) context it was produced in.
    """
    outcome: object
    context: EvalContext

    @property
    def ok(self):
        return not failed(self.outcome)


def evaluate_in(context, term, args, /):
    """
    evaluate term for context.command on args.

    returns Evaluation(outcome, augmented_context); outcome is Ok(value) or
    a Failure (UsageFailure, MessageFailure, HelpRequested, VersionRequested).
    """
    if not isinstance(term, Term):
        raise TypeError("evaluate_in() term must be a term")

    help, version, context = add_standard_options(context)

    if failed(line := parse(context.command.descriptors, args)):
        return Evaluation(line, context)
    line = line.value

    if failed(format := help.evaluate(context, line)):
        return Evaluation(format, context)
    if format.value is not None:
        target = None if context.default else context.command.name
        logger.debug("help requested for %s in format %s", target or "main command", format.value)
        return Evaluation(HelpRequested(format.value, target), context)

    if version is not None:
        match version.evaluate(context, line):
            case Ok(True):
                logger.debug("version requested")
                return Evaluation(VersionRequested(), context)
            case Ok(False):
                pass
            case failure:
                return Evaluation(failure, context)

    return Evaluation(term.evaluate(context, line), context)


def evaluate(term, info, args, /):
    """
    evaluate a single-term program; returns Ok(value) or a Failure.
    """
    return evaluate_in(EvalContext.single(term, info), term, args).outcome


def _hint(token, names):
    suggestions = difflib.get_close_matches(token, names, 1)
    if suggestions:
        return "did you mean %r?" % suggestions[0]
    return None


def dispatch(info, choices, args, /):
    """
    choose the command named by the first argument.

    returns
    - Ok((info, args))         when args is empty or starts with an option.
    - Ok((choice_info, rest))  when the first argument names a choice, fully
                               or by an unambiguous prefix.
    - UsageFailure             for an unknown or ambiguous command name.
    """
    args = list(args)
    if not args:
        return Ok((info, []))

    token, *rest = args
    if len(token) > 1 and token.startswith("-"):
        return Ok((info, args))

    index = PrefixDict()
    for choice, _ in choices:
        index.add(choice.name, choice)

    match index.lookup(token):
        case Found(choice):
            logger.debug("dispatching %r to command %r", token, choice.name)
            return Ok((choice, rest))
        case Ambiguous(candidates):
            return ambiguous("command", token, candidates)
        case NotFound():
            return unknown("command", token, hint=_hint(token, [*index]))


def _pair(pair, name):
    match pair:
        case (Term() as term, TermInfo() as info):
            return term, info
    raise TypeError(f"{name}() expects (term, term-info) pairs")


def evaluate_choice(main, choices, args, /):
    """
    evaluate a multi-command program.

    main and choices are (term, term-info) pairs. Dispatch failures are
    returned in a context where the main command is being evaluated, so they
    are presented against the program itself.
    """
    main = _pair(main, "evaluate_choice")
    choices = tuple(_pair(choice, "evaluate_choice") for choice in choices)
    commands = tuple(Command.of(term, info) for term, info in choices)
    program = Command.of(*main)

    if failed(chosen := dispatch(program.info, commands, args)):
        return Evaluation(chosen, EvalContext(program, program, commands))
    chosen, rest = chosen.value

    for term, info in (main, *choices):
        if info is chosen:
            break
    else:
        raise AssertionError("dispatch() returned an unknown command")

    context = EvalContext(Command.of(term, info), program, commands)
    return evaluate_in(context, term, rest)


__all__ = (
    "Evaluation",
    "evaluate",
    "evaluate_in",
    "dispatch",
    "evaluate_choice",
)
