"""Tests for the command catalog and manifest loader."""

from __future__ import annotations

import json

import pytest

from realtime_cli.base.errors import CatalogError
from realtime_cli.catalog import CommandCatalog, as_path, catalog_from_mapping, load_catalog

_SMALL_MANIFEST = {
    "globalFlags": {
        "json": {"description": "Output in JSON format", "type": "boolean"},
        "host": {"description": "Override host", "type": "option", "hidden": True},
    },
    "topics": {"widgets": "Manage widgets"},
    "commands": {
        "widgets:list": {
            "description": "List widgets",
            "flags": {"limit": {"char": "l", "description": "Max rows", "type": "option", "default": "10"}},
        },
        "widgets:get": {
            "description": "Get one widget",
            "args": {"id": {"description": "Widget id", "required": True}},
        },
        "secret": {"description": "Not listed", "hidden": True},
        "status": {"description": "Service status"},
    },
}


@pytest.fixture()
def small() -> CommandCatalog:
    return catalog_from_mapping(_SMALL_MANIFEST)


def test_as_path_accepts_colon_space_and_sequence() -> None:
    assert as_path("channels:publish") == ("channels", "publish")  # nosec B101 - pytest assertion in test
    assert as_path("channels publish") == ("channels", "publish")  # nosec B101 - pytest assertion in test
    assert as_path(["channels", "", "publish"]) == ("channels", "publish")  # nosec B101 - pytest assertion in test


def test_top_level_includes_virtual_commands_and_skips_hidden(small: CommandCatalog) -> None:
    top = small.list_top_level()
    assert {"widgets", "status", "exit", "help"} <= top  # nosec B101 - pytest assertion in test
    assert "secret" not in top  # nosec B101 - pytest assertion in test


def test_hidden_command_still_resolves_by_exact_path(small: CommandCatalog) -> None:
    node = small.find("secret")
    assert node is not None and node.hidden  # nosec B101 - pytest assertion in test
    assert "secret" not in small.command_ids()  # nosec B101 - pytest assertion in test
    assert "secret" in small.command_ids(include_hidden=True)  # nosec B101 - pytest assertion in test


def test_topic_detection_and_subcommands(small: CommandCatalog) -> None:
    assert small.is_topic("widgets")  # nosec B101 - pytest assertion in test
    assert not small.is_topic("widgets:list")  # nosec B101 - pytest assertion in test
    assert small.list_subcommands("widgets") == ["get", "list"]  # nosec B101 - pytest assertion in test
    assert small.exists(("widgets",)) and not small.exists(("gadgets",))  # nosec B101 - pytest assertion in test


def test_global_flags_follow_command_flags(small: CommandCatalog) -> None:
    assert small.flags_for("widgets:list") == ["--limit", "-l", "--json"]  # nosec B101 - pytest assertion in test
    assert small.flags_for("widgets:list", show_hidden=True)[-1] == "--host"  # nosec B101 - pytest assertion in test


def test_descriptions_fall_back_to_topics(small: CommandCatalog) -> None:
    assert small.description("widgets") == "Manage widgets"  # nosec B101 - pytest assertion in test
    assert small.description("widgets:get") == "Get one widget"  # nosec B101 - pytest assertion in test
    assert small.description(("exit",)) == "Exit the interactive shell"  # nosec B101 - pytest assertion in test
    assert small.flag_description("widgets:list", "--limit=5") == "Max rows"  # nosec B101 - pytest assertion in test


def test_describe_command_and_topic(small: CommandCatalog) -> None:
    command = small.describe("widgets:get")
    assert command is not None and not command.is_topic  # nosec B101 - pytest assertion in test
    assert command.usage == "widgets get ID [FLAGS]"  # nosec B101 - pytest assertion in test
    topic = small.describe("widgets")
    assert topic is not None and topic.is_topic  # nosec B101 - pytest assertion in test
    assert [name for name, _ in topic.subcommands] == ["get", "list"]  # nosec B101 - pytest assertion in test
    assert small.describe("nope") is None  # nosec B101 - pytest assertion in test


def test_invalid_manifest_raises_catalog_error() -> None:
    with pytest.raises(CatalogError):
        catalog_from_mapping({"commands": {"bad::id": {}}})
    with pytest.raises(CatalogError):
        catalog_from_mapping(["not", "a", "mapping"])
    with pytest.raises(CatalogError):
        catalog_from_mapping({"commands": {"x": {"flags": {"f": {"char": "too-long"}}}}})


def test_yaml_manifest_via_environment(tmp_path) -> None:
    manifest = tmp_path / "manifest.yaml"
    manifest.write_text(
        "commands:\n  hello:\n    description: Say hello\n",
        encoding="utf-8",
    )
    catalog = load_catalog(env={"REALTIME_MANIFEST": str(manifest)}, use_cache=False)
    assert catalog.command_ids() == ["hello"]  # nosec B101 - pytest assertion in test


def test_unreadable_manifest_raises(tmp_path) -> None:
    broken = tmp_path / "manifest.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(broken, use_cache=False)
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.json", use_cache=False)


def test_json_manifest_from_file(tmp_path) -> None:
    path = tmp_path / "m.json"
    path.write_text(json.dumps(_SMALL_MANIFEST), encoding="utf-8")
    catalog = load_catalog(path, use_cache=False)
    assert "widgets:list" in catalog.command_ids()  # nosec B101 - pytest assertion in test


def test_bundled_manifest_shape(catalog: CommandCatalog) -> None:
    ids = catalog.command_ids(include_hidden=True)
    for expected in ("channels:publish", "channels:subscribe", "apps:delete", "accounts:current", "interactive"):
        assert expected in ids  # nosec B101 - pytest assertion in test
    subscribe = catalog.find("channels:subscribe")
    assert subscribe is not None and subscribe.args[0].multiple  # nosec B101 - pytest assertion in test
    assert "--json" in catalog.flags_for("channels:publish")  # nosec B101 - pytest assertion in test
