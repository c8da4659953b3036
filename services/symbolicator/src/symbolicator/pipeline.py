"""
Symbolication pipeline: raw stack string -> ordered list of mapped frames.

parse_stack -> SourceMapResolver.resolve -> SourceSnippetExtractor.extract,
frame by frame. A frame that fails at any stage is counted and dropped; the
trace as a whole only fails on non-string input.
"""
from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .fetch import Fetcher, HttpFetcher
from .logs import log_event
from .snippets import SourceSnippetExtractor
from .source_maps import MappedFrame, SourceMapCache, SourceMapResolver, Unresolved
from .stack_parser import RawFrame, parse_stack

NO_SNIPPET = "no_snippet"

SEPARATOR: dict[str, Any] = {"separator": True}


@dataclass(frozen=True)
class SymbolicatedFrame:
    function: Optional[str]
    source: str
    line: int
    column: Optional[int]
    name: Optional[str]
    snippet: str

    def to_dict(self) -> dict:
        return {
            "function": self.function,
            "source": self.source,
            "line": self.line,
            "column": self.column,
            "name": self.name,
            "snippet": self.snippet,
        }


@dataclass
class SymbolicationReport:
    error_name: str
    error_message: str
    frames: list[SymbolicatedFrame] = field(default_factory=list)
    frames_total: int = 0
    skipped: dict[str, int] = field(default_factory=dict)

    def to_records(self) -> list[dict]:
        """Persisted shape: frames with ``{"separator": True}`` between them."""
        records: list[dict] = []
        for frame in self.frames:
            if records:
                records.append(dict(SEPARATOR))
            records.append(frame.to_dict())
        return records


class SymbolicationPipeline:
    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        *,
        cache: Optional[SourceMapCache] = None,
        max_workers: int = 1,
    ):
        self._fetcher = fetcher or HttpFetcher()
        self._cache = cache
        self._max_workers = max(1, max_workers)
        self._extractor = SourceSnippetExtractor(self._fetcher)

    def _symbolicate_frame(
        self, resolver: SourceMapResolver, frame: RawFrame,
    ) -> Union[SymbolicatedFrame, Unresolved]:
        mapped = resolver.resolve(frame)
        if isinstance(mapped, Unresolved):
            return mapped

        snippet = self._extractor.extract(mapped.position, mapped.document)
        if snippet is None:
            return Unresolved(NO_SNIPPET, mapped.position.source or "")
        return _to_symbolicated(mapped, snippet.render())

    def symbolicate(self, raw_stack: str) -> SymbolicationReport:
        parsed = parse_stack(raw_stack)
        resolver = SourceMapResolver(self._fetcher, cache=self._cache)

        if self._max_workers > 1 and len(parsed.frames) > 1:
            workers = min(self._max_workers, len(parsed.frames))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self._symbolicate_frame, resolver, f)
                    for f in parsed.frames
                ]
                # futures list is in frame order
                results = [fut.result() for fut in futures]
        else:
            results = [self._symbolicate_frame(resolver, f) for f in parsed.frames]

        frames: list[SymbolicatedFrame] = []
        skipped: Counter[str] = Counter()
        for result in results:
            if isinstance(result, Unresolved):
                skipped[result.reason] += 1
            else:
                frames.append(result)

        report = SymbolicationReport(
            error_name=parsed.error_name,
            error_message=parsed.error_message,
            frames=frames,
            frames_total=len(parsed.frames),
            skipped=dict(skipped),
        )
        log_event(
            "symbolicate_done",
            error_name=report.error_name,
            frames_total=report.frames_total,
            frames_mapped=len(report.frames),
            skipped=report.skipped,
        )
        return report


def _to_symbolicated(mapped: MappedFrame, snippet: str) -> SymbolicatedFrame:
    pos = mapped.position
    return SymbolicatedFrame(
        function=mapped.frame.function_name,
        source=pos.source or "",
        line=pos.line or 0,
        column=pos.column,
        name=pos.name,
        snippet=snippet,
    )


def symbolicate(raw_stack: str, fetcher: Optional[Fetcher] = None, **kwargs) -> list[dict]:
    """Convenience wrapper returning the persisted record list."""
    return SymbolicationPipeline(fetcher, **kwargs).symbolicate(raw_stack).to_records()
