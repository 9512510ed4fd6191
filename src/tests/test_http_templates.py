import pytest

from risa_chain.http_templates import build_url
from risa_chain.http_templates import extract_json_path
from risa_chain.http_templates import fill_path_template
from risa_chain.http_templates import join_url
from risa_chain.http_templates import parse_query_template
from risa_chain.http_templates import parse_url


def test_parse_url_extracts_template_and_query_params() -> None:
    parsed = parse_url("https://api.example.com/users/42/posts?page=2", "/users/:userId/posts", '["page"]')

    assert parsed.path_params == {"userId": "42"}
    assert parsed.query_params == {"page": "2"}


def test_parse_url_supports_brace_placeholders_and_decodes_segments() -> None:
    parsed = parse_url("https://example.com/users/john%20doe/files/7", "/users/{name}/files/{fileId}")

    assert parsed.path_params == {"name": "john doe", "fileId": "7"}


def test_parse_url_without_query_template_returns_all_params() -> None:
    parsed = parse_url("https://example.com/search?q=rsa&page=3&limit=10")

    assert parsed.query_params == {"q": "rsa", "page": "3", "limit": "10"}


def test_parse_url_query_template_only_keeps_listed_keys() -> None:
    parsed = parse_url("https://example.com/search?q=rsa&page=3", query_template='["page", "missing"]')

    assert parsed.query_params == {"page": "3"}


def test_parse_url_ignores_template_segments_beyond_url_path() -> None:
    parsed = parse_url("https://example.com/users", "/users/:userId")

    assert parsed.path_params == {}


def test_parse_url_components() -> None:
    parsed = parse_url("http://localhost:8080/a/b?x=1#frag")

    assert parsed.as_dict() == {
        "protocol": "http:",
        "host": "localhost:8080",
        "pathname": "/a/b",
        "search": "?x=1",
        "hash": "#frag",
        "pathParams": {},
        "queryParams": {"x": "1"},
    }


def test_parse_url_defaults_pathname_to_root() -> None:
    parsed = parse_url("https://example.com")

    assert parsed.pathname == "/"
    assert parsed.search == ""
    assert parsed.hash == ""


@pytest.mark.parametrize("raw_url", ["not a url", "/relative/path", ""])
def test_parse_url_rejects_non_absolute_urls(raw_url: str) -> None:
    with pytest.raises(ValueError, match="Invalid URL"):
        parse_url(raw_url)


@pytest.mark.parametrize("template", ["page", '{"page": 1}', "[1, 2]"])
def test_parse_query_template_requires_json_array_of_strings(template: str) -> None:
    with pytest.raises(ValueError, match="JSON array"):
        parse_query_template(template)


def test_parse_query_template_blank_means_no_template() -> None:
    assert parse_query_template("  ") is None


def test_fill_path_template_encodes_values() -> None:
    assert fill_path_template("/users/:userId/{section}", {"userId": "a b", "section": "x/y"}) == "/users/a%20b/x%2Fy"


def test_fill_path_template_reports_missing_values() -> None:
    with pytest.raises(ValueError, match="userId"):
        fill_path_template("/users/:userId", {})


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    [
        ("https://h.com", "users", "https://h.com/users"),
        ("https://h.com/", "/users", "https://h.com/users"),
        ("https://h.com/", "users", "https://h.com/users"),
        ("https://h.com", "/users", "https://h.com/users"),
    ],
)
def test_join_url_normalizes_slash(base: str, path: str, expected: str) -> None:
    assert join_url(base, path) == expected


def test_build_url_with_query_template_orders_and_filters() -> None:
    url = build_url(
        "https://api.example.com/",
        "/users/:userId/posts",
        {"userId": "42"},
        {"sort": "desc", "page": "2", "empty": ""},
        '["page", "sort", "empty"]',
    )

    assert url == "https://api.example.com/users/42/posts?page=2&sort=desc"


def test_build_url_without_query_template_uses_all_non_empty_values() -> None:
    url = build_url("https://example.com/search", query_params={"q": "rsa", "blank": " "})

    assert url == "https://example.com/search?q=rsa"


def test_build_url_appends_to_existing_query() -> None:
    assert build_url("https://example.com/a?x=1", query_params={"y": "2"}) == "https://example.com/a?x=1&y=2"


def test_extract_json_path() -> None:
    document = {"user": {"id": 7, "tags": ["a", "b"], "name": "kim"}, "ok": True}

    assert extract_json_path(document, "$.user.name") == "kim"
    assert extract_json_path(document, "user.id") == "7"
    assert extract_json_path(document, "$.user.tags[1]") == "b"
    assert extract_json_path(document, "$.ok") == "true"
    assert extract_json_path(document, "$.user.tags") == '["a", "b"]'


def test_extract_json_path_missing_field() -> None:
    with pytest.raises(LookupError, match="not found"):
        extract_json_path({"user": {}}, "$.user.id")


def test_parse_url_reports_ascii_host_for_idn() -> None:
    parsed = parse_url("https://münchen.de/path")

    assert parsed.host == "xn--mnchen-3ya.de"


def test_parse_url_brackets_ipv6_host() -> None:
    parsed = parse_url("http://[::1]:8080/x")

    assert parsed.host == "[::1]:8080"
