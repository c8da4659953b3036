"""
Source-map resolution for minified frames.

For a frame in ``https://cdn.example.com/app.min.js`` the map is fetched from
``https://cdn.example.com/app.min.js.map`` and queried for the original
(source, line, column, name). Every failure is returned as an ``Unresolved``
value rather than raised; the caller simply drops the frame.
"""
from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Optional, Union

import sourcemap
from sourcemap.exceptions import SourceMapDecodeError

from .fetch import Fetcher
from .stack_parser import RawFrame

MAP_SUFFIX = ".map"

NO_FILE_REFERENCE = "no_file_reference"
MAP_FETCH_FAILED = "map_fetch_failed"
MAP_INVALID = "map_invalid"
NO_MAPPING = "no_mapping"


@dataclass(frozen=True)
class ResolvedPosition:
    source: Optional[str]
    line: Optional[int]  # 1-based
    column: Optional[int]  # 0-based
    name: Optional[str] = None


@dataclass(frozen=True)
class Unresolved:
    reason: str
    detail: str = ""


class SourceMapDocument:
    """A decoded source map plus the URL it came from."""

    def __init__(self, url: str, index: Any):
        self.url = url
        self._index = index
        raw = getattr(index, "raw", None) or {}
        self._sources: list[str] = list(getattr(index, "sources", None) or raw.get("sources") or [])
        self._contents: list[Any] = list(raw.get("sourcesContent") or [])

    @classmethod
    def parse(cls, url: str, text: str) -> "SourceMapDocument":
        return cls(url, sourcemap.loads(text))

    def lookup(self, line: int, column: int) -> Optional[ResolvedPosition]:
        """Original position for a 1-based line and 0-based column.

        Falls back to the closest preceding segment on the same generated line.
        """
        if line < 1 or column < 0:
            return None
        try:
            token = self._index.lookup(line=line - 1, column=column)
        except (IndexError, KeyError):
            return None
        if token is None or token.src is None:
            return None
        if token.dst_line != line - 1 or token.dst_col > column:
            return None
        return ResolvedPosition(
            source=token.src,
            line=token.src_line + 1,
            column=token.src_col,
            name=token.name,
        )

    def source_content(self, source: str) -> Optional[str]:
        """Inline ``sourcesContent`` entry for *source*, if the map embeds one."""
        try:
            idx = self._sources.index(source)
        except ValueError:
            return None
        if idx >= len(self._contents):
            return None
        content = self._contents[idx]
        return content if isinstance(content, str) and content else None


class SourceMapCache:
    """Bounded LRU of parsed maps keyed by map URL.

    A deployed bundle's map never changes under the same URL, so entries are
    never refreshed; a new build must ship under a new URL or ``clear()``.
    """

    def __init__(self, max_entries: int = 64):
        self._max = max(1, max_entries)
        self._entries: OrderedDict[str, SourceMapDocument] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, url: str) -> Optional[SourceMapDocument]:
        with self._lock:
            doc = self._entries.get(url)
            if doc is not None:
                self._entries.move_to_end(url)
            return doc

    def put(self, doc: SourceMapDocument) -> None:
        with self._lock:
            self._entries[doc.url] = doc
            self._entries.move_to_end(doc.url)
            while len(self._entries) > self._max:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class MappedFrame:
    frame: RawFrame
    position: ResolvedPosition
    document: SourceMapDocument


def map_url_for(file_name: str) -> str:
    return f"{file_name}{MAP_SUFFIX}"


class SourceMapResolver:
    """Resolves frames against their bundle's source map.

    One resolver serves one symbolication request: maps fetched while
    resolving are remembered for the remaining frames of the same trace.
    """

    def __init__(self, fetcher: Fetcher, *, cache: Optional[SourceMapCache] = None):
        self._fetcher = fetcher
        self._cache = cache
        self._loaded: dict[str, Union[SourceMapDocument, Unresolved]] = {}

    def load(self, map_url: str) -> Union[SourceMapDocument, Unresolved]:
        if map_url in self._loaded:
            return self._loaded[map_url]

        result = self._cache.get(map_url) if self._cache is not None else None
        if result is None:
            result = self._fetch_and_parse(map_url)
            if self._cache is not None and isinstance(result, SourceMapDocument):
                self._cache.put(result)

        self._loaded[map_url] = result
        return result

    def _fetch_and_parse(self, map_url: str) -> Union[SourceMapDocument, Unresolved]:
        fetched = self._fetcher.fetch_text(map_url)
        if not fetched.ok:
            return Unresolved(MAP_FETCH_FAILED, fetched.error or f"HTTP {fetched.status}")
        try:
            return SourceMapDocument.parse(map_url, fetched.text)
        except (SourceMapDecodeError, ValueError, KeyError, TypeError, AttributeError) as e:
            return Unresolved(MAP_INVALID, f"{type(e).__name__}: {e}")

    def resolve(self, frame: RawFrame) -> Union[MappedFrame, Unresolved]:
        if not frame.file_name:
            return Unresolved(NO_FILE_REFERENCE)

        doc = self.load(map_url_for(frame.file_name))
        if isinstance(doc, Unresolved):
            return doc

        if frame.line_number is None:
            return Unresolved(NO_MAPPING, "frame has no line number")
        position = doc.lookup(frame.line_number, frame.column_number or 0)
        if position is None or not position.source or not position.line:
            return Unresolved(NO_MAPPING)
        return MappedFrame(frame=frame, position=position, document=doc)
