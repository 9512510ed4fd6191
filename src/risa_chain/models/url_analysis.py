"""Pydantic models for URL template suggestions."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field

from risa_chain.models.camel_model import CamelModel

SegmentKind = Literal["static", "uuid", "objectid", "number", "opaque"]


class UrlSegment(CamelModel):
    index: int
    value: str
    dynamic: bool = False
    kind: SegmentKind = "static"
    param_name: Optional[str] = None


class QueryParamSuggestion(CamelModel):
    name: str
    value: str


class UrlAnalysis(CamelModel):
    segments: list[UrlSegment] = Field(default_factory=list)
    query_params: list[QueryParamSuggestion] = Field(default_factory=list)
    suggested_path_template: str = "/"
    suggested_query_template: str = ""
    dynamic_count: int = 0
    dynamic_query_count: int = 0
