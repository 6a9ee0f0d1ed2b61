"""
Terms: the composable units termline programs are built from.

A Term pairs
- the argument descriptors it needs (a tuple, kept in declaration order so
  help pages list arguments the way they were written), and
- an evaluation function (context, line) -> Ok | Failure that reads the
  parsed command line through exactly those descriptors.

Terms are combined applicatively with explicit functions rather than
operators:

    >>> from termline import pure, fmap, apply, lift, flag, option
    >>> verbose = flag("-v", "--verbose", doc="Talk more.")
    >>> count = option("-n", "--count", type=int, default=1)
    >>> both = lift(lambda verbose, count: (verbose, count), verbose, count)
    >>> both.descriptors == verbose.descriptors + count.descriptors
    True

Evaluation of a composed term is left-biased: the left term runs first and
its failure, if any, is the one reported.

This module also holds the evaluation-time metadata: TermInfo (static
identity and documentation of a program or sub-command), Command (the
(info, descriptors) pair) and EvalContext (the command being evaluated, the
main command and the sibling choices).
"""
import copy
from collections.abc import Sequence
from typing import NamedTuple

from .faults import Ok, Failure, MessageFailure, FaultCode, HelpFormat, failed
from .utils import mirror, rename


class Term[_T]:
    """
    Immutable (descriptors, evaluate) pair.

    Terms are built by the leaf builders in termline.arguments or by
    composing existing terms; they can be evaluated any number of times.
    """
    __slots__ = ("_descriptors", "_evaluate")

    def __init__(self, descriptors, evaluate, /):
        if not callable(evaluate):
            raise TypeError("term 'evaluate' must be callable")
        self._descriptors = tuple(descriptors)
        self._evaluate = evaluate

    @property
    def descriptors(self):
        return self._descriptors

    def evaluate(self, context, line, /):
        return self._evaluate(context, line)

    def map(self, function, /):
        return fmap(function, self)

    def apply(self, term, /):
        return apply(self, term)

    def __repr__(self):
        name = getattr(self._evaluate, "__name__", type(self._evaluate).__name__)
        return f"term({len(self._descriptors)} descriptors, evaluate={name})"


def _check(term, name):
    if not isinstance(term, Term):
        raise TypeError(f"{name}() argument must be a term")
    return term


def pure(value, /):
    """
    Term with no descriptors whose evaluation always succeeds with value.
    """
    @rename("pure")
    def evaluate(context, line):
        return Ok(value)

    return Term((), evaluate)


def fmap(function, term, /):
    """
    Transform the success value of term; descriptors and failures are untouched.
    """
    if not callable(function):
        raise TypeError("fmap() function must be callable")
    _check(term, "fmap")

    @rename("fmap")
    def evaluate(context, line):
        result = term.evaluate(context, line)
        if failed(result):
            return result
        return Ok(function(result.value))

    return Term(term.descriptors, evaluate)


def apply(function, value, /):
    """
    Applicative combination: run function's term, then value's term, and
    apply the first result to the second.

    Descriptors are function.descriptors + value.descriptors. If the
    function term fails, its failure is returned and the value term does not
    run; otherwise a failure of the value term is returned.
    """
    _check(function, "apply")
    _check(value, "apply")

    @rename("apply")
    def evaluate(context, line):
        left = function.evaluate(context, line)
        if failed(left):
            return left
        right = value.evaluate(context, line)
        if failed(right):
            return right
        return Ok(left.value(right.value))

    return Term(function.descriptors + value.descriptors, evaluate)


def lift(function, /, *terms):
    """
    Apply an n-ary function to the values of n terms, evaluated left to right.

    Equivalent to apply(...apply(fmap(curried function, terms[0]), terms[1])..., terms[-1]).
    """
    if not callable(function):
        raise TypeError("lift() function must be callable")
    collected = pure(())
    for term in terms:
        _check(term, "lift")
        collected = apply(fmap(lambda values: lambda value: values + (value,), collected), term)
    return fmap(lambda values: function(*values), collected)


def ret(term, /):
    """
    Flatten a term whose value is itself an outcome.

    Term logic uses this to reject well-formed input: the inner function
    returns Ok(value) or a Failure (typically MessageFailure). Message
    failures without a code are tagged DELEGATED_ERROR.
    """
    _check(term, "ret")

    @rename("ret")
    def evaluate(context, line):
        result = term.evaluate(context, line)
        if failed(result):
            return result
        match result.value:
            case MessageFailure() as failure if failure.code is None:
                return copy.replace(failure, code=FaultCode.DELEGATED_ERROR)
            case Ok() | Failure() as outcome:
                return outcome
        raise TypeError("ret() term must produce an Ok or a Failure")

    return Term(term.descriptors, evaluate)


class TermInfo:
    """
    Static identity and documentation of a program or sub-command.

    Fields
    - name: str (non-empty): program or sub-command name, also the key used
      for sub-command dispatch.
    - version: str: when non-empty on the main term, `--version` is offered.
    - doc: str: one-line summary shown in NAME and command listings.
    - sdocs: str: help section receiving `--help`/`--version`.
    - man: Sequence of man blocks (termline.manpage) appended to the help page.
    - help_format: HelpFormat: format used by a bare `--help`.

    Instances are immutable; derive variants with copy.replace(info, ...).
    """
    __introspectable__ = ("name", "version", "doc", "sdocs", "man", "help_format")

    name = mirror("name")
    version = mirror("version")
    doc = mirror("doc")
    sdocs = mirror("sdocs")
    man = mirror("man")
    help_format = mirror("help_format")

    def __init__(self, name, /, *, version="", doc="", sdocs="OPTIONS", man=(), help_format=HelpFormat.PAGER):
        if not isinstance(name, str):
            raise TypeError("term-info 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("term-info 'name' cannot be empty")
        for field, value in (("version", version), ("doc", doc), ("sdocs", sdocs)):
            if not isinstance(value, str):
                raise TypeError(f"term-info {field!r} must be a string")
        if not sdocs.strip():
            raise ValueError("term-info 'sdocs' cannot be empty")
        if not isinstance(man, Sequence) or isinstance(man, str):
            raise TypeError("term-info 'man' must be a sequence of blocks")
        self._name = name
        self._version = version.strip()
        self._doc = doc.strip()
        self._sdocs = sdocs.strip()
        self._man = tuple(man)
        self._help_format = HelpFormat(help_format)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fields = {name: getattr(self, "_" + name) for name in self.__introspectable__[1:]} | overrides
        return type(self)(fields.pop("name", self._name), **fields)

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "term-info(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class Command(NamedTuple):
    """
    The (TermInfo, descriptors) pair describing one evaluable command.
    """
    info: TermInfo
    descriptors: tuple

    @classmethod
    def of(cls, term, info, /):
        return cls(info, _check(term, "command").descriptors)

    @property
    def name(self):
        return self.info.name


class EvalContext(NamedTuple):
    """
    Per-evaluation metadata threaded explicitly through term evaluation.

    - command: the Command actually being evaluated.
    - main: the program's top-level Command (default naming, version).
    - choices: sibling sub-commands, used to resolve help-by-name.
    - standard: injected standard option terms, None until injection.
    """
    command: Command
    main: Command
    choices: tuple = ()
    standard: object = None

    @classmethod
    def single(cls, term, info, /):
        """
        context for a single-term program: command and main are the term itself.
        """
        command = Command.of(term, info)
        return cls(command, command)

    def find(self, name, /):
        """
        the choice whose name is exactly name, or None.
        """
        for choice in self.choices:
            if choice.info.name == name:
                return choice
        return None

    @property
    def default(self):
        """
        True when the command being evaluated is the main command.
        """
        return self.command.info.name == self.main.info.name


__all__ = (
    "Term",
    "pure",
    "fmap",
    "apply",
    "lift",
    "ret",
    "TermInfo",
    "Command",
    "EvalContext",
)
