"""Tests for Tab completion over the mode-filtered namespace."""

from __future__ import annotations

import pytest

from realtime_cli.catalog import CommandCatalog
from realtime_cli.policy import HOSTED_ANONYMOUS, NORMAL, Mode, is_restricted
from realtime_cli.shell.completion import KIND_COMMAND, KIND_FLAG, CompletionEngine, render_result
from realtime_cli.shell.visibility import CommandView


@pytest.fixture()
def engine(catalog: CommandCatalog) -> CompletionEngine:
    return CompletionEngine(CommandView(catalog))


def test_top_level_prefix_lists_accounts_and_apps(engine: CompletionEngine) -> None:
    result = engine.complete_line("a", NORMAL)
    assert {"accounts", "apps"} <= set(result.candidates)  # nosec B101 - pytest assertion in test
    assert "autocomplete" not in result.candidates  # nosec B101 - pytest assertion in test
    # several matches: the buffer is left alone
    assert result.buffer == "a"  # nosec B101 - pytest assertion in test
    assert not result.replaced  # nosec B101 - pytest assertion in test


def test_subcommands_after_topic_and_space(engine: CompletionEngine) -> None:
    result = engine.complete_line("accounts ", NORMAL)
    assert "current" in result.candidates  # nosec B101 - pytest assertion in test
    assert result.buffer == "accounts "  # nosec B101 - pytest assertion in test


def test_single_match_rewrites_buffer(engine: CompletionEngine) -> None:
    result = engine.complete_line("accounts cur", NORMAL)
    assert result.candidates == ("current",)  # nosec B101 - pytest assertion in test
    assert result.buffer == "accounts current "  # nosec B101 - pytest assertion in test


def test_colon_form_completes_full_id(engine: CompletionEngine) -> None:
    result = engine.complete_line("channels:pub", NORMAL)
    assert result.buffer == "channels:publish "  # nosec B101 - pytest assertion in test


def test_flag_completion_for_leaf_command(engine: CompletionEngine) -> None:
    result = engine.complete_line("channels publish --co", NORMAL)
    assert result.kind == KIND_FLAG  # nosec B101 - pytest assertion in test
    assert result.buffer == "channels publish --count "  # nosec B101 - pytest assertion in test


def test_flag_completion_after_positional_argument(engine: CompletionEngine) -> None:
    assert engine.complete(["channels", "subscribe", "my-channel"], "--r", KIND_FLAG, NORMAL) == ["--rewind"]  # nosec B101 - pytest assertion in test
    result = engine.complete_line("channels subscribe my-channel --re", NORMAL)
    assert result.candidates == ("--rewind",)  # nosec B101 - pytest assertion in test
    assert result.buffer == "channels subscribe my-channel --rewind "  # nosec B101 - pytest assertion in test


def test_hidden_flags_need_dev_mode(engine: CompletionEngine) -> None:
    assert engine.complete(["channels", "publish"], "--ho", KIND_FLAG, NORMAL) == []  # nosec B101 - pytest assertion in test
    dev = Mode(show_dev_flags=True)
    assert engine.complete(["channels", "publish"], "--ho", KIND_FLAG, dev) == ["--host"]  # nosec B101 - pytest assertion in test


def test_leaf_command_offers_no_words(engine: CompletionEngine) -> None:
    assert engine.complete(["status"], "", KIND_COMMAND, NORMAL) == []  # nosec B101 - pytest assertion in test


def test_restricted_commands_never_offered(engine: CompletionEngine) -> None:
    assert engine.complete([], "acc", KIND_COMMAND, HOSTED_ANONYMOUS) == []  # nosec B101 - pytest assertion in test
    assert engine.complete([], "con", KIND_COMMAND, NORMAL) == ["connections"]  # nosec B101 - pytest assertion in test
    for partial in ("", "a", "c", "l", "s"):
        for cand in engine.complete([], partial, KIND_COMMAND, HOSTED_ANONYMOUS):
            assert cand.startswith(partial)  # nosec B101 - pytest assertion in test
            if cand not in ("exit", "help"):
                assert not is_restricted(cand, HOSTED_ANONYMOUS)  # nosec B101 - pytest assertion in test


def test_completion_is_idempotent(engine: CompletionEngine) -> None:
    first = engine.complete_line("ch", NORMAL)
    second = engine.complete_line("ch", NORMAL)
    assert first == second  # nosec B101 - pytest assertion in test


def test_render_lists_candidates_with_descriptions(engine: CompletionEngine) -> None:
    result = engine.complete_line("a", NORMAL)
    listing = render_result(engine, result)
    assert listing is not None  # nosec B101 - pytest assertion in test
    lines = listing.splitlines()
    assert lines[0].startswith("  accounts")  # nosec B101 - pytest assertion in test
    assert "Manage accounts" in lines[0]  # nosec B101 - pytest assertion in test
    assert render_result(engine, engine.complete_line("accounts cur", NORMAL)) is None  # nosec B101 - pytest assertion in test
