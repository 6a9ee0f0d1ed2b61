"""
Man pages: blocks, substitution, plain/groff rendering and the pager chain.

A page is a PageTitle plus a sequence of blocks:

- Section(title)         a ".SH" heading ("OPTIONS").
- Paragraph(text)        an indented paragraph.
- Item(label, text)      a labelled paragraph (options, arguments, commands).
- NoBlank()              suppresses the blank line before the next block.

Texts may contain
- `$(key)`               replaced by subst[key] (nested keys resolve too);
- `$(b,text)`/`$(i,text)` bold / italic markup, dropped in plain output;
- `$(g,text)`/`$(p,text)` text shown only in groff / only in plain output;
- `\\$`                  a literal dollar sign that is never expanded.

help_page() builds the page of the command being evaluated in an EvalContext;
print_page() writes a page in any HelpFormat.
"""
import logging
import os
import re
import shlex
import tempfile
import textwrap
from collections.abc import Mapping
from typing import NamedTuple

from .arguments import Flag, Option
from .faults import HelpFormat

logger = logging.getLogger(__name__)

PARAGRAPH_INDENT = 7
LABEL_INDENT = 4
WIDTH = 80


class Section(NamedTuple):
    title: str


class Paragraph(NamedTuple):
    text: str


class Item(NamedTuple):
    label: str
    text: str = ""


class NoBlank(NamedTuple):
    pass


class PageTitle(NamedTuple):
    """
    ".TH" fields: name, manual section number and the three header/footer strings.
    """
    name: str
    section: int = 1
    footer: str = ""
    source: str = ""
    header: str = ""


class Page(NamedTuple):
    title: PageTitle
    blocks: tuple


_PATTERN = re.compile(r"\\\$|\$\((?:(?P<style>[a-z]),(?P<body>(?:\\\(..|[^()])*)|(?P<key>[^(),]+))\)")


def _expand(text, subst, markup, unescape=True):
    def replace(match):
        if match["style"]:
            return markup(match["style"], match["body"])
        elif match["key"]:
            return subst.get(match["key"], match[0])
        return match[0]

    # Twice, so substitutions may produce further keys or markup.
    for _ in range(2):
        text = _PATTERN.sub(replace, text)
    return text.replace("\\$", "$") if unescape else text


def _keep(style, body):
    return "$(%s,%s)" % (style, body)


def _plain(style, body):
    return "" if style == "g" else body


def _groff(style, body):
    match style:
        case "b":
            return "\\fB%s\\fR" % body
        case "i":
            return "\\fI%s\\fR" % body
        case "p":
            return ""
    return body


def substitute(text, subst, /):
    """
    replace every `$(key)` of text found in subst.

    markup, unknown keys and escaped `\\$` are kept for rendering.
    """
    if not isinstance(subst, Mapping):
        raise TypeError("substitute() subst must be a mapping")
    return _expand(text, subst, _keep, unescape=False)


def _squash(text):
    return " ".join(text.split())


def _fill(text, indent):
    return textwrap.fill(
        text,
        WIDTH,
        initial_indent=" " * indent,
        subsequent_indent=" " * indent,
        break_on_hyphens=False,
        break_long_words=False,
    )


def plain(text, subst=None, /):
    """
    expand text for plain output: keys substituted, markup dropped, whitespace squashed.
    """
    return _squash(_expand(text, subst or {}, _plain))


def render_plain(page, subst=None, /):
    """
    render a page as indented plain text.
    """
    def prepare(text):
        return plain(text, subst)

    lines = []
    blank = False
    for block in page.blocks:
        match block:
            case NoBlank():
                blank = False
                continue
            case Section(title):
                if lines:
                    lines.append("")
                lines.append(prepare(title))
            case Paragraph(text):
                if blank:
                    lines.append("")
                lines.append(_fill(prepare(text), PARAGRAPH_INDENT))
            case Item(label, text):
                if blank:
                    lines.append("")
                label, text = prepare(label), prepare(text)
                lines.append(" " * PARAGRAPH_INDENT + label)
                if text:
                    filled = _fill(text, PARAGRAPH_INDENT + LABEL_INDENT)
                    if len(label) < LABEL_INDENT:
                        # Short labels share their line with the text.
                        lines[-1] += filled[PARAGRAPH_INDENT + len(label):]
                    else:
                        lines.append(filled)
            case _:
                raise TypeError("unknown man block %r" % (block,))
        blank = not isinstance(block, Section)
    return "\n".join(lines)


def render_groff(page, subst=None, /):
    """
    render a page as a groff (man macros) document.
    """
    subst = subst or {}

    def prepare(text):
        return _squash(_expand(text, subst, _groff)).replace("-", "\\-")

    title = page.title
    lines = [
        '.\\" Pipe this output to groff -man -Tutf8 | less',
        '.\\"',
        '.TH "%s" %d "%s" "%s" "%s"' % (title.name, title.section, title.footer, title.source, title.header),
        '.\\" Disable hyphenation and ragged-right',
        ".nh",
        ".ad l",
    ]
    for block in page.blocks:
        match block:
            case NoBlank():
                lines.append(".sp -1")
            case Section(text):
                lines.append(".SH " + prepare(text))
            case Paragraph(text):
                lines += [".P", prepare(text)]
            case Item(label, text):
                lines += [".TP 4", prepare(label), prepare(text)]
            case _:
                raise TypeError("unknown man block %r" % (block,))
    return "\n".join(lines)


def _which(probe, command):
    # $PAGER may carry arguments ("less -R").
    try:
        words = shlex.split(command)
    except ValueError:
        return None
    if not words or not (path := probe.which(words[0])):
        return None
    return shlex.join([path, *words[1:]])


def _print_to_pager(page, subst, console, probe):
    pagers = ["less", "more"]
    if environment := probe.getenv("PAGER"):
        pagers.insert(0, environment)

    pager = next(filter(None, (_which(probe, name) for name in pagers)), None)
    if pager is None:
        logger.debug("no pager found, printing plain help")
        return _print(render_plain(page, subst), console)

    roff = next(filter(None, map(probe.which, ("groff", "nroff"))), None)
    with tempfile.NamedTemporaryFile("w", suffix=".man", delete=False, encoding="utf-8") as file:
        file.write((render_groff if roff else render_plain)(page, subst) + "\n")
    try:
        if roff:
            formatter = shlex.quote(roff)
            if os.path.basename(roff) == "groff":
                formatter += " -Tascii"
            command = "%s -man < %s | %s" % (formatter, shlex.quote(file.name), pager)
        else:
            command = "%s < %s" % (pager, shlex.quote(file.name))
        logger.debug("paging help with %r", command)
        status = probe.system(command)
    finally:
        os.unlink(file.name)

    if status != 0:
        logger.debug("pager exited with status %d, printing plain help", status)
        _print(render_plain(page, subst), console)


def _print(text, console):
    console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_page(format, page, subst, console, probe, /):
    """
    write page in format: plain or groff text on console, or through a pager.

    pager: the first of $PAGER, less, more found on the system reads the page,
    formatted by groff/nroff when available. Plain text is written to the
    console when no pager is found or the pager command fails.
    """
    match HelpFormat(format):
        case HelpFormat.PLAIN:
            _print(render_plain(page, subst), console)
        case HelpFormat.GROFF:
            _print(render_groff(page, subst), console)
        case HelpFormat.PAGER:
            _print_to_pager(page, subst, console, probe)


def _docs(descriptor):
    doc = descriptor.doc or ""
    if isinstance(descriptor, Flag):
        return doc
    return substitute(doc, {"docv": "$(i,%s)" % descriptor.docv})


def _label(descriptor):
    if not descriptor.named:
        label = "$(i,%s)" % descriptor.docv
        return label + "..." if descriptor.rest else label

    labels = []
    for name in descriptor.names:
        label = "$(b,%s)" % name
        if isinstance(descriptor, Option):
            long = name.startswith("--")
            value = "$(i,%s)" % descriptor.docv
            if descriptor.optional:
                label += "[%s%s]" % ("=" if long else "", value)
            else:
                label += ("=" if long else " ") + value
        labels.append(label)
    return ", ".join(labels)


def synopsis(context, /):
    """
    usage line of context.command, with markup and $(mname)/$(tname) keys.
    """
    parts = ["$(b,$(mname))"]
    if not context.default:
        parts.append("$(b,$(tname))")
    elif context.choices:
        parts.append("[$(i,COMMAND)]")

    descriptors = [descriptor for descriptor in dict.fromkeys(context.command.descriptors) if not descriptor.hidden]
    if any(descriptor.named for descriptor in descriptors):
        parts.append("[$(i,OPTION)]...")
    for descriptor in sorted((d for d in descriptors if not d.named), key=lambda d: d.index):
        label = _label(descriptor)
        parts.append(label if descriptor.required else "[%s]" % label)
    return " ".join(parts)


def help_subst(context, /):
    """
    substitution keys available in help texts: mname, tname and version.
    """
    return {
        "mname": context.main.info.name,
        "tname": context.command.info.name,
        "version": context.main.info.version,
    }


def help_page(context, /):
    """
    build the help page of context.command.

    NAME, SYNOPSIS, the command's own man blocks, COMMANDS (main command of
    a multi-command program), then one section per descriptor section:
    ARGUMENTS and OPTIONS first, others in declaration order.
    """
    main, command = context.main.info, context.command.info
    name = command.name if context.default else "%s-%s" % (main.name, command.name)

    blocks = [Section("NAME"), Paragraph("%s - %s" % (name, command.doc) if command.doc else name)]
    blocks += [Section("SYNOPSIS"), Paragraph(synopsis(context))]
    blocks += command.man

    if context.default and context.choices:
        blocks.append(Section("COMMANDS"))
        blocks += [Item("$(b,%s)" % choice.info.name, choice.info.doc) for choice in context.choices]

    sections = {"ARGUMENTS": [], "OPTIONS": []}
    for descriptor in dict.fromkeys(context.command.descriptors):
        if not descriptor.hidden:
            sections.setdefault(descriptor.section, []).append(descriptor)
    for title, descriptors in sections.items():
        if not descriptors:
            continue
        blocks.append(Section(title))
        if title == "ARGUMENTS":
            descriptors.sort(key=lambda descriptor: descriptor.index if not descriptor.named else -1)
        for descriptor in descriptors:
            text = _docs(descriptor)
            if getattr(descriptor, "default", None) is not None and not getattr(descriptor, "repeat", False):
                text += " (absent=%s)" % descriptor.default
            blocks.append(Item(_label(descriptor), text.strip()))

    title = PageTitle(
        name.upper(),
        1,
        source=" ".join(filter(None, (main.name, main.version))),
        header="%s Manual" % main.name.capitalize(),
    )
    return Page(title, tuple(blocks))


__all__ = (
    "Section",
    "Paragraph",
    "Item",
    "NoBlank",
    "PageTitle",
    "Page",
    "substitute",
    "plain",
    "render_plain",
    "render_groff",
    "print_page",
    "synopsis",
    "help_subst",
    "help_page",
)
