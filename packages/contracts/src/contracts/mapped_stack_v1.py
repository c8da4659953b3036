"""Persisted mapped-stack records (``mappedStack`` on a stored error)."""
from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class MappedFrameV1(BaseModel):
    function: Optional[str] = None
    source: str = Field(min_length=1)
    line: int = Field(ge=1)
    column: Optional[int] = Field(default=None, ge=0)
    name: Optional[str] = None
    snippet: str


class FrameSeparatorV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    separator: Literal[True]


MappedStackEntryV1 = Union[FrameSeparatorV1, MappedFrameV1]

mapped_stack_adapter = TypeAdapter(list[MappedStackEntryV1])


def validate_mapped_stack(records: list[dict]) -> list[MappedStackEntryV1]:
    return mapped_stack_adapter.validate_python(records)
