from .fetch import FetchResult, Fetcher, HttpFetcher
from .pipeline import SymbolicatedFrame, SymbolicationPipeline, SymbolicationReport, symbolicate
from .snippets import SourceSnippet, SourceSnippetExtractor, render_snippet
from .source_maps import (
    ResolvedPosition,
    SourceMapCache,
    SourceMapDocument,
    SourceMapResolver,
    Unresolved,
)
from .stack_parser import ParsedStack, RawFrame, parse_stack

__all__ = [
    "FetchResult",
    "Fetcher",
    "HttpFetcher",
    "SymbolicatedFrame",
    "SymbolicationPipeline",
    "SymbolicationReport",
    "symbolicate",
    "SourceSnippet",
    "SourceSnippetExtractor",
    "render_snippet",
    "ResolvedPosition",
    "SourceMapCache",
    "SourceMapDocument",
    "SourceMapResolver",
    "Unresolved",
    "ParsedStack",
    "RawFrame",
    "parse_stack",
]
