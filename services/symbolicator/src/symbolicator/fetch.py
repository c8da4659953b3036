"""HTTP text fetcher used for source maps and original sources.

Fetches never raise: HTTP errors, connection errors, timeouts and bad URLs are
all reported as ``FetchResult(ok=False)`` so callers can treat them as a
missing artifact.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit
from urllib.request import Request, urlopen

DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_USER_AGENT = "error-tracker-symbolicator/1.0"
MAX_BODY_BYTES = 20_000_000

# anything else (file:, data:, ftp:) is refused before urlopen sees it
ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class FetchResult:
    url: str
    ok: bool
    status: Optional[int] = None
    text: str = ""
    error: Optional[str] = None


class Fetcher(Protocol):
    def fetch_text(self, url: str) -> FetchResult:
        ...


class HttpFetcher:
    """GET with caching disabled and a hard timeout."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._timeout = timeout_seconds
        self._user_agent = user_agent

    def fetch_text(self, url: str) -> FetchResult:
        if urlsplit(url).scheme.lower() not in ALLOWED_SCHEMES:
            return FetchResult(url=url, ok=False, error="unsupported scheme")
        try:
            req = Request(url, method="GET")
        except ValueError as e:
            return FetchResult(url=url, ok=False, error=f"invalid url: {e}")
        req.add_header("User-Agent", self._user_agent)
        req.add_header("Cache-Control", "no-cache, no-store")
        req.add_header("Pragma", "no-cache")

        try:
            with urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read(MAX_BODY_BYTES)
                charset = resp.headers.get_content_charset() or "utf-8"
                return FetchResult(
                    url=url,
                    ok=True,
                    status=resp.status,
                    text=raw.decode(charset, errors="replace"),
                )
        except HTTPError as e:
            return FetchResult(url=url, ok=False, status=e.code, error=f"HTTP {e.code}")
        except URLError as e:
            return FetchResult(url=url, ok=False, error=f"connection error: {e.reason}")
        except (TimeoutError, OSError, ValueError, LookupError) as e:
            # OSError covers socket timeouts; LookupError an unknown charset
            return FetchResult(url=url, ok=False, error=f"{type(e).__name__}: {e}")
