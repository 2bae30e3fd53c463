"""Parse the supported Markdown subset into block and inline tokens.

Only these forms are recognised: "# ", "## ", "### " headings, "- " bullets
and plain paragraphs; inside bullets and paragraphs, [text](url) links,
bare http(s) URLs and **bold** spans. Spans do not nest.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

_SPAN_SPLIT = re.compile(r"(\[.*?\]\(.*?\)|\*\*.*?\*\*|https?://\S+)")
_LINK = re.compile(r"^\[(.*?)\]\((.*?)\)$")
_URL = re.compile(r"^https?://\S+$")
_BOLD = re.compile(r"^\*\*(.*)\*\*$")
_TRAILING_PUNCT = re.compile(r"[.,;:!?]$")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class Bullet:
    text: str


@dataclass(frozen=True)
class Paragraph:
    text: str


Block = Union[Heading, Bullet, Paragraph]


@dataclass(frozen=True)
class Span:
    text: str
    bold: bool = False
    url: str | None = None


def classify_line(line: str) -> Block | None:
    """Classify one line; blank lines yield None."""
    if not line.strip():
        return None
    if line.startswith("# "):
        return Heading(1, line[2:])
    if line.startswith("## "):
        return Heading(2, line[3:])
    if line.startswith("### "):
        return Heading(3, line[4:])
    if line.startswith("- "):
        return Bullet(line[2:])
    return Paragraph(line)


def parse_blocks(markdown_text: str) -> list[Block]:
    blocks = []
    for line in markdown_text.splitlines():
        block = classify_line(line.rstrip())
        if block is not None:
            blocks.append(block)
    return blocks


def parse_spans(text: str) -> list[Span]:
    """Split a line into plain, bold and link spans in a single pass."""
    spans: list[Span] = []
    for part in _SPAN_SPLIT.split(text):
        if not part:
            continue
        link = _LINK.match(part)
        if link:
            spans.append(Span(link.group(1), url=link.group(2)))
            continue
        if _URL.match(part):
            url = _TRAILING_PUNCT.sub("", part)
            spans.append(Span(url, url=url))
            if url != part:
                spans.append(Span(part[len(url):]))
            continue
        bold = _BOLD.match(part)
        if bold:
            spans.append(Span(bold.group(1), bold=True))
            continue
        spans.append(Span(part))
    return spans
