import json
from pathlib import Path

import pytest

from risa_chain.models import ChainTemplate
from risa_chain.models import HistoryItem
from risa_chain.models import SavedKey
from risa_chain.models import parse_steps
from risa_chain.storage import JsonCollection
from risa_chain.template_registry import TemplateRegistry
from risa_chain.template_registry import dump_template
from risa_chain.template_registry import load_template_file


def make_key(key_id: str, name: str = "key") -> SavedKey:
    return SavedKey(id=key_id, name=name, public_key="PUB", private_key="PRIV", key_size=2048)


def write_template(path: Path, template_id: str, name: str, body: str = "Description.") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "\n".join(
            [
                "---",
                f"id: {template_id}",
                f"name: {name}",
                "steps:",
                "  - type: url-encode",
                "---",
                body,
                "",
            ]
        ),
        encoding="utf-8",
    )


def test_json_collection_missing_file_is_empty(tmp_path: Path) -> None:
    assert JsonCollection(tmp_path / "keys.json", SavedKey).list() == []


def test_json_collection_save_get_update_remove(tmp_path: Path) -> None:
    collection = JsonCollection(tmp_path / "nested" / "keys.json", SavedKey)

    collection.save(make_key("a", "first"))
    collection.save(make_key("b"))
    collection.save(make_key("a", "renamed"))

    assert [key.id for key in collection.list()] == ["a", "b"]
    found = collection.get("a")
    assert found is not None
    assert found.name == "renamed"
    assert collection.get("zzz") is None
    assert collection.remove("a") is True
    assert collection.remove("a") is False
    assert [key.id for key in collection.list()] == ["b"]


def test_json_collection_writes_camel_case_iso_dates(tmp_path: Path) -> None:
    path = tmp_path / "keys.json"
    JsonCollection(path, SavedKey).save(make_key("a"))

    record = json.loads(path.read_text(encoding="utf-8"))[0]

    assert record["publicKey"] == "PUB"
    assert record["keySize"] == 2048
    assert isinstance(record["created"], str)


def test_json_collection_newest_first(tmp_path: Path) -> None:
    history = JsonCollection(tmp_path / "history.json", HistoryItem, newest_first=True)

    for index in range(3):
        history.save(HistoryItem(id=str(index), type="chain", input_text="i", output_text="o", success=True))

    assert [item.id for item in history.list()] == ["2", "1", "0"]
    history.clear()
    assert history.list() == []


def test_json_collection_skips_invalid_records(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "keys.json"
    good = make_key("ok").model_dump(mode="json", by_alias=True)
    path.write_text(json.dumps([{"id": "broken"}, good]), encoding="utf-8")

    with caplog.at_level("WARNING"):
        keys = JsonCollection(path, SavedKey).list()

    assert [key.id for key in keys] == ["ok"]
    assert "Skipped invalid record 0" in caplog.text


def test_json_collection_rejects_non_array(tmp_path: Path) -> None:
    path = tmp_path / "keys.json"
    path.write_text('{"id": "a"}', encoding="utf-8")

    with pytest.raises(ValueError, match="JSON array"):
        JsonCollection(path, SavedKey).list()


def test_load_template_file_uses_body_as_description(tmp_path: Path) -> None:
    path = tmp_path / "encode.md"
    write_template(path, "enc", "Encode", "Encodes things.")

    template = load_template_file(path)

    assert template.id == "enc"
    assert template.name == "Encode"
    assert template.description == "Encodes things."
    assert [step.type for step in template.steps] == ["url-encode"]


def test_load_template_file_defaults_id_to_stem(tmp_path: Path) -> None:
    path = tmp_path / "my-chain.md"
    path.write_text("---\nname: Mine\n---\n", encoding="utf-8")

    template = load_template_file(path)

    assert template.id == "my-chain"
    assert template.steps == []


def test_dump_template_round_trips(tmp_path: Path) -> None:
    template = ChainTemplate(
        id="rsa",
        name="RSA",
        description="Encrypts.",
        steps=parse_steps([{"id": "s", "type": "rsa-encrypt", "params": {"keyId": "k"}}]),
        tags=["crypto"],
    )
    path = tmp_path / "rsa.md"
    path.write_text(dump_template(template), encoding="utf-8")

    loaded = load_template_file(path)

    assert loaded == template


def test_registry_get_by_id_and_name(tmp_path: Path) -> None:
    write_template(tmp_path / "a" / "one.md", "one", "First Chain")
    registry = TemplateRegistry([tmp_path / "a"])

    assert registry.get("one").name == "First Chain"
    assert registry.get("first chain").id == "one"
    with pytest.raises(FileNotFoundError, match="Chain template not found"):
        registry.get("missing")


def test_registry_first_root_wins(tmp_path: Path) -> None:
    write_template(tmp_path / "user" / "dup.md", "dup", "User copy")
    write_template(tmp_path / "builtin" / "dup.md", "dup", "Builtin copy")
    write_template(tmp_path / "builtin" / "other.md", "other", "Other")
    registry = TemplateRegistry([tmp_path / "user", tmp_path / "builtin", tmp_path / "absent"])

    assert registry.get("dup").name == "User copy"
    assert sorted(template.id for template in registry.list_templates()) == ["dup", "other"]


def test_registry_save_touch_and_remove(tmp_path: Path) -> None:
    user_root = tmp_path / "user"
    write_template(tmp_path / "builtin" / "enc.md", "enc", "Encode")
    registry = TemplateRegistry([user_root, tmp_path / "builtin"])

    touched = registry.touch("enc")

    assert touched.last_used is not None
    assert (user_root / "enc.md").exists()
    assert registry.get("enc").last_used == touched.last_used

    assert registry.remove("enc") is True
    assert registry.get("enc").last_used is None
    assert registry.remove("nope") is False


def test_json_collection_retain_drops_rejected_records(tmp_path: Path) -> None:
    collection = JsonCollection(tmp_path / "keys.json", SavedKey)
    for key_id in ("a", "b", "c"):
        collection.save(make_key(key_id))

    dropped = collection.retain(lambda key: key.id != "b")

    assert dropped == 1
    assert [key.id for key in collection.list()] == ["a", "c"]
    assert collection.retain(lambda key: True) == 0


def test_registry_skips_files_that_are_not_templates(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    root = tmp_path / "templates"
    write_template(root / "good.md", "good", "Good")
    (root / "README.md").write_text("# Notes\n\nNot a chain template.\n", encoding="utf-8")
    (root / "broken.md").write_text("---\nname: [unclosed\n---\n", encoding="utf-8")
    registry = TemplateRegistry([root])

    with caplog.at_level("WARNING"):
        templates = registry.list_templates()

    assert [template.id for template in templates] == ["good"]
    assert registry.get("good").name == "Good"
    assert "README.md" in caplog.text
    assert "broken.md" in caplog.text
