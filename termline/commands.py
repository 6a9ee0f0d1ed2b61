"""
Entry points for programs built from terms.

Single-command programs
- eval_term(args, (term, info))   evaluate on an explicit argument vector.
- exec_term((term, info))         evaluate on sys.argv[1:].
- run((term, info))               exec_term, then call the resulting value.

Multi-command programs
- eval_choice(args, main, choices), exec_choice(main, choices),
  run_choice(main, choices): the same, the first argument choosing among
  the (term, info) pairs in choices.

On success the term's value is returned. Any other outcome is presented
(termline.report.present) and the process exits with its status: 1 for
usage and message failures, 0 once help or the version has been shown.

Every entry point accepts keyword-only `probe`, `stdout` and `stderr` to
replace the environment probe and the output streams.

Quick example:
    >>> from termline import TermInfo, flag, fmap, run
    >>> hello = fmap(lambda loud: lambda: print("HELLO" if loud else "hello"), flag("--loud"))
    >>> run((hello, TermInfo("hello", version="1.0")))  # doctest: +SKIP
"""
import sys

from .engine import evaluate_choice, evaluate_in
from .report import present
from .terms import EvalContext, Term, TermInfo


def _conclude(evaluation, options):
    if evaluation.ok:
        return evaluation.outcome.value
    sys.exit(present(evaluation, **options))


def _unpack(pair, name):
    match pair:
        case (Term() as term, TermInfo() as info):
            return term, info
    raise TypeError(f"{name}() expects a (term, term-info) pair")


def _call(action, name):
    if not callable(action):
        raise TypeError(f"{name}() term must evaluate to a callable")
    return action()


def eval_term(args, pair, /, *, probe=None, stdout=None, stderr=None):
    """
    evaluate a single-command program on args and return the term's value.
    """
    term, info = _unpack(pair, "eval_term")
    evaluation = evaluate_in(EvalContext.single(term, info), term, args)
    return _conclude(evaluation, {"probe": probe, "stdout": stdout, "stderr": stderr})


def exec_term(pair, /, **options):
    return eval_term(sys.argv[1:], pair, **options)


def run(pair, /, **options):
    """
    exec_term for a term whose value is a zero-argument callable; the
    callable is called and its result returned.
    """
    return _call(exec_term(pair, **options), "run")


def eval_choice(args, main, choices, /, *, probe=None, stdout=None, stderr=None):
    """
    evaluate a multi-command program on args and return the chosen term's value.
    """
    evaluation = evaluate_choice(main, choices, args)
    return _conclude(evaluation, {"probe": probe, "stdout": stdout, "stderr": stderr})


def exec_choice(main, choices, /, **options):
    return eval_choice(sys.argv[1:], main, choices, **options)


def run_choice(main, choices, /, **options):
    """
    exec_choice for terms whose values are zero-argument callables.
    """
    return _call(exec_choice(main, choices, **options), "run_choice")


__all__ = (
    "eval_term",
    "exec_term",
    "run",
    "eval_choice",
    "exec_choice",
    "run_choice",
)
