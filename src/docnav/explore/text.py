"""Layout of documentation comments for page display.

Comment text is split into paragraphs, preformatted blocks, and headings.
Paragraphs are re-wrapped to the configured width; preformatted blocks keep
their line structure with an extra indent; headings are flagged so the page
can highlight them.
"""

from __future__ import annotations

from dataclasses import dataclass
import textwrap

__all__ = ["TextLine", "format_text", "is_heading"]

_HEADING_FORBIDDEN = set(",.;:!?+*/=()[]{}_^°&§~%#@<\">\\")


@dataclass(frozen=True, slots=True)
class TextLine:
    """One output line; ``heading`` marks section titles."""

    text: str
    heading: bool = False


def is_heading(line: str) -> bool:
    """Return whether ``line`` reads as a section heading.

    Example:
        >>> is_heading("Concurrency")
        True
        >>> is_heading("This is a sentence.")
        False
    """

    line = line.strip()
    if not line or not line[0].isupper():
        return False
    if not line[-1].isalnum():
        return False
    if any(char in _HEADING_FORBIDDEN for char in line):
        return False
    index = line.find("'")
    while index >= 0:
        if line[index + 1 : index + 2] != "s" or line[index + 2 : index + 3] not in (
            "",
            " ",
        ):
            return False
        index = line.find("'", index + 1)
    return True


def _blocks(text: str) -> list[tuple[str, list[str]]]:
    blocks: list[tuple[str, list[str]]] = []
    kind = ""
    lines: list[str] = []
    for raw in text.expandtabs(4).splitlines():
        if not raw.strip():
            if kind == "pre":
                lines.append("")
                continue
            if lines:
                blocks.append((kind, lines))
            kind, lines = "", []
            continue
        current = "pre" if raw[0] == " " else "para"
        if kind and current != kind:
            if kind == "pre" or current == "pre":
                blocks.append((kind, lines))
                lines = []
        kind = current
        lines.append(raw)
    if lines:
        blocks.append((kind, lines))
    trimmed = []
    for kind, lines in blocks:
        while lines and not lines[-1].strip():
            lines.pop()
        trimmed.append((kind, lines))
    return trimmed


def format_text(
    text: str,
    *,
    width: int = 80,
    indent: str = "    ",
    pre_indent: str = "\t",
) -> list[TextLine]:
    """Lay out comment ``text`` as indented, wrapped lines.

    Blocks are separated by one empty line. A single-line paragraph that
    sits between two other paragraphs and passes :func:`is_heading` is
    marked as a heading.
    """

    blocks = _blocks(text.strip("\n"))
    output: list[TextLine] = []
    for position, (kind, lines) in enumerate(blocks):
        if output:
            output.append(TextLine(""))
        if kind == "pre":
            for line in textwrap.dedent("\n".join(lines)).splitlines():
                output.append(TextLine(indent + pre_indent + line if line else ""))
            continue
        heading = (
            len(lines) == 1
            and 0 < position < len(blocks) - 1
            and blocks[position - 1][0] == "para"
            and blocks[position + 1][0] == "para"
            and is_heading(lines[0])
        )
        if heading:
            output.append(TextLine(indent + lines[0].strip(), heading=True))
            continue
        paragraph = " ".join(line.strip() for line in lines)
        for line in textwrap.wrap(
            paragraph,
            width=max(width - len(indent), 1),
            break_long_words=False,
            break_on_hyphens=False,
        ):
            output.append(TextLine(indent + line))
    return output
