from risa_chain.url_analyzer import analyze_url
from risa_chain.url_analyzer import classify_segment
from risa_chain.url_analyzer import resource_param_name
from risa_chain.url_analyzer import singularize


def test_analyze_uuid_segment() -> None:
    analysis = analyze_url("https://api.example.com/users/123e4567-e89b-12d3-a456-426614174000")

    assert analysis is not None
    assert analysis.dynamic_count == 1
    dynamic = [segment for segment in analysis.segments if segment.dynamic]
    assert dynamic[0].kind == "uuid"
    assert dynamic[0].param_name == "uuid"
    assert analysis.suggested_path_template == "/users/:uuid"


def test_analyze_numeric_ids_named_after_collection() -> None:
    analysis = analyze_url("https://api.example.com/users/42/posts/1001?page=2&sort=desc")

    assert analysis is not None
    assert analysis.suggested_path_template == "/users/:userId/posts/:postId"
    assert analysis.suggested_query_template == '["page", "sort"]'
    assert analysis.dynamic_count == 2
    assert analysis.dynamic_query_count == 2
    assert [param.name for param in analysis.query_params] == ["page", "sort"]


def test_analyze_object_id_and_opaque_segments() -> None:
    analysis = analyze_url("https://example.com/orders/507f1f77bcf86cd799439011/files/abcdefghijklmnopqrstuvwxyz")

    assert analysis is not None
    kinds = [(segment.kind, segment.param_name) for segment in analysis.segments if segment.dynamic]
    assert kinds == [("objectid", "orderId"), ("opaque", "param")]
    assert analysis.suggested_path_template == "/orders/:orderId/files/:param"


def test_analyze_generic_names_are_made_unique() -> None:
    analysis = analyze_url("https://example.com/12/34")

    assert analysis is not None
    assert analysis.suggested_path_template == "/:id/:id2"


def test_analyze_single_digit_segment_is_static() -> None:
    analysis = analyze_url("https://example.com/users/7")

    assert analysis is not None
    assert analysis.dynamic_count == 0
    assert analysis.suggested_path_template == "/users/7"


def test_analyze_root_url() -> None:
    analysis = analyze_url("https://example.com")

    assert analysis is not None
    assert analysis.segments == []
    assert analysis.suggested_path_template == "/"
    assert analysis.suggested_query_template == ""


def test_analyze_unparsable_url_returns_none() -> None:
    assert analyze_url("not a url") is None


def test_analysis_serializes_with_camel_case_keys() -> None:
    analysis = analyze_url("https://example.com/users/42")

    assert analysis is not None
    record = analysis.to_record()
    assert record["suggestedPathTemplate"] == "/users/:userId"
    assert record["segments"][1]["paramName"] == "userId"


def test_classify_segment() -> None:
    assert classify_segment("users") == "static"
    assert classify_segment("123E4567-E89B-12D3-A456-426614174000") == "uuid"
    assert classify_segment("12") == "number"
    assert classify_segment("x" * 21) == "opaque"
    assert classify_segment("x" * 20) == "static"


def test_singularize_and_resource_names() -> None:
    assert singularize("categories") == "category"
    assert singularize("boxes") == "box"
    assert singularize("address") == "address"
    assert resource_param_name("order-items") == "orderItemId"
    assert resource_param_name("v2") is not None
    assert resource_param_name("2024") is None
