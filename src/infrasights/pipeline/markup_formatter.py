# -*- coding: utf-8 -*-
"""Render the small markdown subset the model uses in summaries and recommendations.

Line-oriented only: bullets (``- ``), numbered items (``1.``), level-4
headers (``#### ``) and paragraphs, with ``**bold**`` and ```code``` inline.
No nesting, links or multi-line paragraphs.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field

_NUMBERED_RE = re.compile(r"^\d+\.")
_INLINE_RE = re.compile(r"\*\*(.*?)\*\*|`([^`]+)`")

BULLET = "bullet"
NUMBERED = "numbered"
HEADER = "header"
PARAGRAPH = "paragraph"

TEXT = "text"
BOLD = "bold"
CODE = "code"


@dataclass(frozen=True)
class InlineSpan:
    kind: str
    text: str


@dataclass(frozen=True)
class MarkupBlock:
    kind: str
    spans: list[InlineSpan] = field(default_factory=list)
    label: str = ""

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.spans)


def format_inline(text: str) -> list[InlineSpan]:
    spans: list[InlineSpan] = []
    position = 0
    for match in _INLINE_RE.finditer(text):
        if match.start() > position:
            spans.append(InlineSpan(TEXT, text[position:match.start()]))
        if match.group(1) is not None:
            spans.append(InlineSpan(BOLD, match.group(1)))
        else:
            spans.append(InlineSpan(CODE, match.group(2)))
        position = match.end()
    if position < len(text):
        spans.append(InlineSpan(TEXT, text[position:]))
    return spans


def format_markup(content: str) -> list[MarkupBlock]:
    blocks: list[MarkupBlock] = []
    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("- "):
            blocks.append(MarkupBlock(BULLET, format_inline(line[2:])))
        elif _NUMBERED_RE.match(line):
            label, _, rest = line.partition(".")
            blocks.append(MarkupBlock(NUMBERED, format_inline(rest.strip()), label=label))
        elif line.startswith("#### "):
            blocks.append(MarkupBlock(HEADER, format_inline(line[5:])))
        else:
            blocks.append(MarkupBlock(PARAGRAPH, format_inline(line)))
    return blocks


def _spans_html(spans: list[InlineSpan]) -> str:
    parts = []
    for span in spans:
        escaped = html.escape(span.text)
        if span.kind == BOLD:
            parts.append(f"<b>{escaped}</b>")
        elif span.kind == CODE:
            parts.append(
                f'<code style="background-color:#ede9fe; color:#5b21b6; font-family:monospace;">{escaped}</code>'
            )
        else:
            parts.append(escaped)
    return "".join(parts)


def render_html(blocks: list[MarkupBlock]) -> str:
    """Render blocks for a Qt rich-text label or ``QTextDocument``."""
    parts = []
    for block in blocks:
        body = _spans_html(block.spans)
        if block.kind == BULLET:
            parts.append(f'<p style="margin:2px 0 2px 12px;">&#8226;&nbsp;{body}</p>')
        elif block.kind == NUMBERED:
            label = html.escape(block.label)
            parts.append(
                f'<p style="margin:2px 0 2px 12px;"><span style="color:#7c3aed; font-family:monospace;">'
                f"{label}.</span>&nbsp;{body}</p>"
            )
        elif block.kind == HEADER:
            parts.append(f'<p style="margin:8px 0 4px 0;"><b>{body}</b></p>')
        else:
            parts.append(f'<p style="margin:0 0 6px 0;">{body}</p>')
    return "\n".join(parts)


def markup_to_html(content: str) -> str:
    return render_html(format_markup(content))
