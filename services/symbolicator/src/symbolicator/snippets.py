"""
Source snippet extraction for resolved frames.

Given the original source text and a 1-based target line, builds a window of
``CONTEXT_LINES`` lines either side and renders it in the persisted format::

    ──────── src/app.js ────────
         40 |   const user = load(id);
         41 |   if (!user) {
    >>   42 |     user.notify();
         43 |   }

Source text comes from the map's inline ``sourcesContent`` or, failing that,
from the source URL resolved against the map URL.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urljoin

from .fetch import Fetcher
from .source_maps import ResolvedPosition, SourceMapDocument

CONTEXT_LINES = 5
LINE_NUMBER_WIDTH = 4
TARGET_MARKER = ">> "
CONTEXT_MARKER = "   "
HEADER_RULE = "────────"

# \n or \r\n only; \f, \v and \x85 stay inside the line
_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class SnippetLine:
    line_number: int
    text: str
    is_target: bool = False

    def render(self) -> str:
        marker = TARGET_MARKER if self.is_target else CONTEXT_MARKER
        return f"{marker}{self.line_number:>{LINE_NUMBER_WIDTH}} | {self.text}"


@dataclass(frozen=True)
class SourceSnippet:
    source: str
    target_line: int
    lines: list[SnippetLine] = field(default_factory=list)

    @property
    def header(self) -> str:
        return f"{HEADER_RULE} {self.source} {HEADER_RULE}"

    @property
    def start_line(self) -> int:
        return self.lines[0].line_number if self.lines else self.target_line

    @property
    def end_line(self) -> int:
        return self.lines[-1].line_number if self.lines else self.target_line

    def render(self) -> str:
        return "\n".join([self.header] + [ln.render() for ln in self.lines])


def render_snippet(
    source: str,
    text: str,
    line: int,
    context: int = CONTEXT_LINES,
) -> Optional[SourceSnippet]:
    """Window *text* around *line*; ``None`` if the line is not in the text."""
    if not text:
        return None
    all_lines = _LINE_BREAK.split(text)
    total = len(all_lines)
    if line < 1 or line > total:
        return None

    start = max(1, line - context)
    end = min(total, line + context)
    return SourceSnippet(
        source=source,
        target_line=line,
        lines=[
            SnippetLine(line_number=n, text=all_lines[n - 1], is_target=(n == line))
            for n in range(start, end + 1)
        ],
    )


class SourceSnippetExtractor:
    def __init__(self, fetcher: Fetcher, *, context: int = CONTEXT_LINES):
        self._fetcher = fetcher
        self._context = context

    def source_text(self, position: ResolvedPosition, document: SourceMapDocument) -> Optional[str]:
        """Inline source first, then a fetch relative to the map URL."""
        if not position.source:
            return None
        inline = document.source_content(position.source)
        if inline:
            return inline

        fetched = self._fetcher.fetch_text(urljoin(document.url, position.source))
        if not fetched.ok or not fetched.text:
            return None
        return fetched.text

    def extract(self, position: ResolvedPosition, document: SourceMapDocument) -> Optional[SourceSnippet]:
        if not position.source or not position.line:
            return None
        text = self.source_text(position, document)
        if text is None:
            return None
        return render_snippet(position.source, text, position.line, self._context)
