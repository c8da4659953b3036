"""
JavaScript stack-trace parser.

Turns a client-reported ``error.stack`` string into a header (name, message)
and an ordered list of frames. Understands V8 (Chrome, Edge, Node) and
Gecko/WebKit (Firefox, Safari) frame syntax; any other line is skipped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_ERROR_NAME = "Error"

# ── V8 ────────────────────────────────────────────────────────────
#     at functionName (https://cdn.example.com/app.min.js:1:5043)
#     at https://cdn.example.com/app.min.js:1:5043
#     at async Promise.all (index 0)
_V8_PREFIX = re.compile(r"^\s*at\s+")
# eval frames report the outer location:
#     at eval (eval at load (https://x/app.js:1:2), <anonymous>:1:5)
_V8_EVAL_NOISE = re.compile(r"(\(eval at [^()]*)|(,.*$)")

# ── Gecko / WebKit ───────────────────────────────────────────────
#   functionName@https://cdn.example.com/app.min.js:1:5043
#   @https://cdn.example.com/app.min.js:1:5043
#   global code@https://cdn.example.com/app.min.js:1:5043
_GECKO_FRAME = re.compile(r"^\s*(?P<function>[^@]*?)@(?P<location>\S.*?)\s*$")

# file:line[:column]
_LOCATION = re.compile(r"^(?P<file>.+?):(?P<line>\d+)(?::(?P<column>\d+))?$")

_NATIVE_LOCATIONS = {"native", "<anonymous>", "unknown location"}
_INDEX_LOCATION = re.compile(r"^index \d+$")

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class RawFrame:
    function_name: Optional[str]
    file_name: Optional[str]
    line_number: Optional[int] = None
    column_number: Optional[int] = None


@dataclass(frozen=True)
class ParsedStack:
    error_name: str
    error_message: str
    frames: list[RawFrame] = field(default_factory=list)


def parse_header(line: str) -> tuple[str, str]:
    """Split ``"<Name>: <Message>"`` on the first colon."""
    colon = line.find(":")
    if colon == -1:
        return DEFAULT_ERROR_NAME, line
    name = line[:colon].strip() or DEFAULT_ERROR_NAME
    return name, line[colon + 1:].strip()


def _split_location(location: str) -> Optional[tuple[str, int, Optional[int]]]:
    m = _LOCATION.match(location.strip())
    if not m:
        return None
    column = m.group("column")
    return m.group("file"), int(m.group("line")), int(column) if column is not None else None


def _is_native(location: str) -> bool:
    loc = location.strip()
    return loc in _NATIVE_LOCATIONS or bool(_INDEX_LOCATION.match(loc))


def _parse_v8(line: str) -> Optional[RawFrame]:
    body = _V8_PREFIX.sub("", line, count=1).strip()
    if "(eval " in body:
        body = _V8_EVAL_NOISE.sub("", body.replace("eval code", "eval")).strip()
    if not body:
        return None

    function: Optional[str] = None
    location = body
    if body.endswith(")") and " (" in body:
        function, _, location = body[:-1].rpartition(" (")
        function = function.strip() or None
    elif body.startswith("(") and body.endswith(")"):
        location = body[1:-1]

    if _is_native(location):
        return RawFrame(function_name=function, file_name=None)

    parts = _split_location(location)
    if parts is None:
        return None
    file_name, line_no, column = parts
    return RawFrame(
        function_name=function,
        file_name=file_name,
        line_number=line_no,
        column_number=column,
    )


def _parse_gecko(line: str) -> Optional[RawFrame]:
    m = _GECKO_FRAME.match(line)
    if not m:
        return None
    parts = _split_location(m.group("location"))
    if parts is None:
        return None
    file_name, line_no, column = parts
    return RawFrame(
        function_name=m.group("function").strip() or None,
        file_name=file_name,
        line_number=line_no,
        column_number=column,
    )


def parse_frame(line: str) -> Optional[RawFrame]:
    """Parse one frame line; ``None`` when the line is not a frame."""
    if _V8_PREFIX.match(line):
        return _parse_v8(line)
    if "@" in line:
        return _parse_gecko(line)
    return None


def parse_stack(stack: str) -> ParsedStack:
    """Parse a raw stack string. Malformed lines are skipped, never raised."""
    if not isinstance(stack, str):
        raise TypeError(f"stack must be a string, got {type(stack).__name__}")

    lines = _LINE_BREAK.split(stack)
    name, message = parse_header(lines[0])
    frames: list[RawFrame] = []
    for line in lines[1:]:
        frame = parse_frame(line)
        if frame is not None:
            frames.append(frame)
    return ParsedStack(error_name=name, error_message=message, frames=frames)
