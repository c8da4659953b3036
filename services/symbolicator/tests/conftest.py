"""Shared fixtures: an in-memory fetcher and a source-map builder."""
import json

import pytest

from symbolicator.fetch import FetchResult

_B64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def vlq(value: int) -> str:
    v = ((-value) << 1) | 1 if value < 0 else value << 1
    out = ""
    while True:
        digit = v & 0x1F
        v >>= 5
        if v:
            digit |= 0x20
        out += _B64[digit]
        if not v:
            return out


def encode_mappings(lines: list[list[tuple]]) -> str:
    """Encode per-generated-line segments given in absolute, 0-based values.

    Each segment is ``(gen_col,)`` or ``(gen_col, src_idx, src_line, src_col[, name_idx])``.
    """
    prev_src = prev_line = prev_col = prev_name = 0
    encoded = []
    for segments in lines:
        prev_gen = 0
        parts = []
        for seg in sorted(segments):
            part = vlq(seg[0] - prev_gen)
            prev_gen = seg[0]
            if len(seg) > 1:
                src, src_line, src_col = seg[1:4]
                part += vlq(src - prev_src) + vlq(src_line - prev_line) + vlq(src_col - prev_col)
                prev_src, prev_line, prev_col = src, src_line, src_col
                if len(seg) > 4:
                    part += vlq(seg[4] - prev_name)
                    prev_name = seg[4]
            parts.append(part)
        encoded.append(",".join(parts))
    return ";".join(encoded)


def build_map(sources, lines, sources_content=None, names=None, source_root=None) -> str:
    smap = {
        "version": 3,
        "file": "app.min.js",
        "sources": list(sources),
        "names": list(names or []),
        "mappings": encode_mappings(lines),
    }
    if sources_content is not None:
        smap["sourcesContent"] = list(sources_content)
    if source_root is not None:
        smap["sourceRoot"] = source_root
    return json.dumps(smap)


def numbered_source(n: int, prefix: str = "line") -> str:
    return "\n".join(f"{prefix} {i}" for i in range(1, n + 1))


class FakeFetcher:
    """url -> body text, or url -> int HTTP status for a failure."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def fetch_text(self, url: str) -> FetchResult:
        self.calls.append(url)
        body = self.responses.get(url)
        if body is None:
            return FetchResult(url=url, ok=False, status=404, error="HTTP 404")
        if isinstance(body, int):
            return FetchResult(url=url, ok=False, status=body, error=f"HTTP {body}")
        return FetchResult(url=url, ok=True, status=200, text=body)


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def app_map():
    """app.min.js line 1: col 50 -> app.js 42:10 (foo), col 120 -> app.js 7:2."""
    return build_map(
        sources=["app.js"],
        names=["foo"],
        lines=[[(50, 0, 41, 10, 0), (120, 0, 6, 2)]],
        sources_content=[numbered_source(60)],
    )


@pytest.fixture
def make_map():
    return build_map


@pytest.fixture
def make_source():
    return numbered_source
