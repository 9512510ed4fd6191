"""Parsing URLs against path templates and building URLs from them."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from risa_chain.codecs import url_decode, url_encode

PLACEHOLDER_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)|\{([A-Za-z_][A-Za-z0-9_]*)\}")
_JSON_PATH_TOKEN_RE = re.compile(r"\.?([^.\[\]]+)|\[(\d+)\]")


@dataclass(frozen=True)
class ParsedUrl:
    protocol: str
    host: str
    pathname: str
    search: str
    hash: str
    path_params: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "protocol": self.protocol,
            "host": self.host,
            "pathname": self.pathname,
            "search": self.search,
            "hash": self.hash,
            "pathParams": dict(self.path_params),
            "queryParams": dict(self.query_params),
        }


def load_url(raw_url: str) -> httpx.URL:
    text = raw_url.strip()
    try:
        url = httpx.URL(text)
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid URL {text!r}: {exc}") from exc
    if not url.scheme or not url.host:
        raise ValueError(f"Invalid URL {text!r}: expected an absolute URL such as https://host/path.")
    return url


def url_host(url: httpx.URL) -> str:
    """ASCII (punycode) host, bracketed for IPv6, with the port when one is set."""
    host = url.raw_host.decode("ascii")
    if ":" in host:
        host = f"[{host}]"
    return host if url.port is None else f"{host}:{url.port}"


def url_pathname(url: httpx.URL) -> str:
    return url.raw_path.decode("ascii").partition("?")[0] or "/"


def path_segments(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def template_param_name(segment: str) -> str | None:
    if segment.startswith(":") and len(segment) > 1:
        return segment[1:]
    if segment.startswith("{") and segment.endswith("}") and len(segment) > 2:
        return segment[1:-1]
    return None


def parse_query_template(query_template: str) -> list[str] | None:
    """Return the expected query keys, or None when no template is set."""
    if not query_template.strip():
        return None
    try:
        keys = json.loads(query_template)
    except json.JSONDecodeError as exc:
        raise ValueError(f"queryTemplate must be a JSON array of parameter names: {exc}") from exc
    if not isinstance(keys, list) or not all(isinstance(key, str) for key in keys):
        raise ValueError("queryTemplate must be a JSON array of parameter names.")
    return keys


def parse_url(raw_url: str, path_template: str = "", query_template: str = "") -> ParsedUrl:
    url = load_url(raw_url)
    pathname = url_pathname(url)

    path_params: dict[str, str] = {}
    if path_template:
        url_parts = path_segments(pathname)
        for index, template_part in enumerate(path_segments(path_template)):
            name = template_param_name(template_part)
            if name is None or index >= len(url_parts):
                continue
            path_params[name] = url_decode(url_parts[index])

    query_params: dict[str, str] = {}
    expected_keys = parse_query_template(query_template)
    if expected_keys is None:
        for key, value in url.params.multi_items():
            query_params[key] = value
    else:
        for key in expected_keys:
            value = url.params.get(key)
            if value is not None:
                query_params[key] = value

    query = url.query.decode("ascii")
    return ParsedUrl(
        protocol=f"{url.scheme}:",
        host=url_host(url),
        pathname=pathname,
        search=f"?{query}" if query else "",
        hash=f"#{url.fragment}" if url.fragment else "",
        path_params=path_params,
        query_params=query_params,
    )


def fill_path_template(path_template: str, values: Mapping[str, str]) -> str:
    missing: list[str] = []

    def replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        if name not in values:
            missing.append(name)
            return match.group(0)
        return url_encode(values[name])

    filled = PLACEHOLDER_RE.sub(replace, path_template)
    if missing:
        raise ValueError(f"Missing value for path parameter(s): {', '.join(missing)}")
    return filled


def join_url(base_url: str, path: str) -> str:
    if not base_url.endswith("/") and not path.startswith("/"):
        return f"{base_url}/{path}"
    if base_url.endswith("/") and path.startswith("/"):
        return base_url + path[1:]
    return base_url + path


def build_query(values: Mapping[str, str], expected_keys: list[str] | None = None) -> str:
    if expected_keys is None:
        items = [(key, value) for key, value in values.items() if value.strip()]
    else:
        items = [(key, values[key]) for key in expected_keys if values.get(key, "").strip()]
    return str(httpx.QueryParams(items))


def build_url(
    base_url: str,
    path_template: str = "",
    path_params: Mapping[str, str] | None = None,
    query_params: Mapping[str, str] | None = None,
    query_template: str = "",
) -> str:
    full_url = base_url
    if path_template:
        full_url = join_url(full_url, fill_path_template(path_template, path_params or {}))
    query = build_query(query_params or {}, parse_query_template(query_template))
    if query:
        full_url += ("&" if "?" in full_url else "?") + query
    return full_url


def extract_json_path(document: Any, path: str) -> str:
    """
    Extract a value using a small JSON path subset: "$.a.b[0].c" or "a.b".
    Non-string values are returned as JSON text.
    """
    expression = path.strip()
    if expression.startswith("$"):
        expression = expression[1:]
    current = document
    position = 0
    while position < len(expression):
        match = _JSON_PATH_TOKEN_RE.match(expression, position)
        if match is None:
            raise ValueError(f"Invalid JSON path {path!r}.")
        key, index = match.group(1), match.group(2)
        if index is not None:
            if not isinstance(current, list) or int(index) >= len(current):
                raise LookupError(f"JSON path {path!r} not found in input.")
            current = current[int(index)]
        else:
            if not isinstance(current, dict) or key not in current:
                raise LookupError(f"JSON path {path!r} not found in input.")
            current = current[key]
        position = match.end()
    if isinstance(current, str):
        return current
    return json.dumps(current, ensure_ascii=False)
