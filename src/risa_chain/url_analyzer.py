"""Heuristic suggestion of path and query templates from a sample URL."""

from __future__ import annotations

import json
import re

from risa_chain.http_templates import load_url, path_segments, url_pathname
from risa_chain.models.url_analysis import QueryParamSuggestion, SegmentKind, UrlAnalysis, UrlSegment

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
OBJECT_ID_RE = re.compile(r"^[0-9a-f]{24}$", re.IGNORECASE)
NUMBER_RE = re.compile(r"^\d{2,}$")
OPAQUE_MIN_LENGTH = 20

GENERIC_NAMES: dict[str, str] = {
    "uuid": "uuid",
    "objectid": "id",
    "number": "id",
    "opaque": "param",
}


def classify_segment(segment: str) -> SegmentKind:
    if UUID_RE.match(segment):
        return "uuid"
    if OBJECT_ID_RE.match(segment):
        return "objectid"
    if NUMBER_RE.match(segment):
        return "number"
    if len(segment) > OPAQUE_MIN_LENGTH:
        return "opaque"
    return "static"


def singularize(word: str) -> str:
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower.endswith(("sses", "xes", "zes", "ches", "shes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith("ss") and len(word) > 1:
        return word[:-1]
    return word


def resource_param_name(resource: str) -> str | None:
    """Turn a collection segment such as "order-items" into "orderItemId"."""
    parts = [part for part in re.split(r"[^A-Za-z0-9]+", singularize(resource)) if part]
    if not parts or not parts[0][0].isalpha():
        return None
    head, *rest = parts
    return head[0].lower() + head[1:] + "".join(part[:1].upper() + part[1:] for part in rest) + "Id"


def suggest_param_name(kind: SegmentKind, previous: UrlSegment | None) -> str:
    if kind in ("number", "objectid") and previous is not None and not previous.dynamic:
        derived = resource_param_name(previous.value)
        if derived:
            return derived
    return GENERIC_NAMES[kind]


def _unique(name: str, used: set[str]) -> str:
    candidate = name
    suffix = 2
    while candidate in used:
        candidate = f"{name}{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def analyze_url(raw_url: str) -> UrlAnalysis | None:
    try:
        url = load_url(raw_url)
    except ValueError:
        return None

    segments: list[UrlSegment] = []
    used_names: set[str] = set()
    for index, value in enumerate(path_segments(url_pathname(url))):
        kind = classify_segment(value)
        previous = segments[-1] if segments else None
        if kind == "static":
            segments.append(UrlSegment(index=index, value=value))
            continue
        name = _unique(suggest_param_name(kind, previous), used_names)
        segments.append(UrlSegment(index=index, value=value, dynamic=True, kind=kind, param_name=name))

    query_params: list[QueryParamSuggestion] = []
    seen_keys: set[str] = set()
    for key, value in url.params.multi_items():
        if key in seen_keys:
            continue
        seen_keys.add(key)
        query_params.append(QueryParamSuggestion(name=key, value=value))

    path_template = "/" + "/".join(
        f":{segment.param_name}" if segment.dynamic else segment.value for segment in segments
    )
    query_template = json.dumps([param.name for param in query_params]) if query_params else ""

    return UrlAnalysis(
        segments=segments,
        query_params=query_params,
        suggested_path_template=path_template,
        suggested_query_template=query_template,
        dynamic_count=sum(1 for segment in segments if segment.dynamic),
        dynamic_query_count=len(query_params),
    )
