"""Tests for the restriction policy and the mode-filtered command view."""

from __future__ import annotations

import pytest

from realtime_cli.catalog import CommandCatalog
from realtime_cli.policy import (
    HOSTED,
    HOSTED_ANONYMOUS,
    NORMAL,
    Mode,
    RuleScope,
    is_restricted,
    matches_pattern,
    restriction_message,
    restriction_reason,
)
from realtime_cli.shell.visibility import CommandView


@pytest.mark.parametrize(
    "command_id, pattern, expected",
    [
        ("config", "config:*", True),
        ("config:show", "config:*", True),
        ("configure", "config:*", False),
        ("configure", "config*", True),
        ("accounts:list", "accounts:list", True),
        ("accounts:list:all", "accounts:list", False),
    ],
)
def test_matches_pattern(command_id: str, pattern: str, expected: bool) -> None:
    assert matches_pattern(command_id, pattern) is expected  # nosec B101 - pytest assertion in test


def test_mode_normalizes_anonymous_without_hosted() -> None:
    assert Mode(anonymous=True) == NORMAL  # nosec B101 - pytest assertion in test
    assert HOSTED_ANONYMOUS.label == "hosted-anonymous"  # nosec B101 - pytest assertion in test
    assert NORMAL.key != HOSTED.key  # nosec B101 - pytest assertion in test


def test_mode_from_env_reads_truthy_values() -> None:
    mode = Mode.from_env({"REALTIME_WEB_CLI_MODE": "yes", "REALTIME_ANONYMOUS_USER_MODE": "1"})
    assert mode == HOSTED_ANONYMOUS  # nosec B101 - pytest assertion in test
    assert Mode.from_env({"REALTIME_WEB_CLI_MODE": "0"}) == NORMAL  # nosec B101 - pytest assertion in test


def test_interactive_rules_apply_in_every_mode() -> None:
    for mode in (NORMAL, HOSTED, HOSTED_ANONYMOUS):
        assert is_restricted("version", mode)  # nosec B101 - pytest assertion in test
        assert is_restricted("config:show", mode)  # nosec B101 - pytest assertion in test
    assert restriction_reason("autocomplete", NORMAL) is RuleScope.INTERACTIVE  # nosec B101 - pytest assertion in test


def test_hosted_rules() -> None:
    assert not is_restricted("accounts:switch", NORMAL)  # nosec B101 - pytest assertion in test
    assert restriction_reason("accounts:switch", HOSTED) is RuleScope.HOSTED  # nosec B101 - pytest assertion in test
    assert not is_restricted("accounts:current", HOSTED)  # nosec B101 - pytest assertion in test


def test_anonymous_rules_are_additive_and_take_precedence() -> None:
    assert restriction_reason("accounts:current", HOSTED_ANONYMOUS) is RuleScope.ANONYMOUS  # nosec B101 - pytest assertion in test
    # restricted by both hosted and anonymous rules; anonymous reason wins
    assert restriction_reason("apps:delete", HOSTED_ANONYMOUS) is RuleScope.ANONYMOUS  # nosec B101 - pytest assertion in test
    assert restriction_reason("channels:publish", HOSTED_ANONYMOUS) is None  # nosec B101 - pytest assertion in test


def test_restriction_messages() -> None:
    assert restriction_message("config", RuleScope.INTERACTIVE) == "'config' is not available in interactive mode"  # nosec B101 - pytest assertion in test
    assert restriction_message("apps:create", RuleScope.HOSTED) == "'apps create' is not available in the web CLI mode"  # nosec B101 - pytest assertion in test
    anonymous = restriction_message("accounts:current", RuleScope.ANONYMOUS)
    assert anonymous.splitlines() == [  # nosec B101 - pytest assertion in test
        "'accounts current' is not available in anonymous mode",
        "Please provide an access token to use this command",
    ]


def test_top_level_changes_between_normal_and_hosted_anonymous(catalog: CommandCatalog) -> None:
    view = CommandView(catalog)
    normal = set(view.top_level(NORMAL))
    anonymous = set(view.top_level(HOSTED_ANONYMOUS))
    for name in ("accounts", "apps", "bench", "integrations", "queues", "logs"):
        assert name in normal  # nosec B101 - pytest assertion in test
        assert name not in anonymous  # nosec B101 - pytest assertion in test
    assert "config" not in anonymous  # nosec B101 - pytest assertion in test
    for name in ("channels", "auth", "exit"):
        assert name in anonymous  # nosec B101 - pytest assertion in test


def test_view_never_lists_restricted_paths(catalog: CommandCatalog) -> None:
    view = CommandView(catalog)
    for mode in (NORMAL, HOSTED, HOSTED_ANONYMOUS):
        for name in view.top_level(mode):
            if name in ("exit", "help"):
                continue
            assert not is_restricted(name, mode)  # nosec B101 - pytest assertion in test
            for child in view.subcommands((name,), mode):
                assert not is_restricted(f"{name}:{child}", mode)  # nosec B101 - pytest assertion in test


def test_view_memoizes_per_mode_key(catalog: CommandCatalog) -> None:
    view = CommandView(catalog)
    view.top_level(NORMAL)
    view.top_level(HOSTED_ANONYMOUS)
    view.top_level(NORMAL)
    assert view.cached_modes() == sorted({NORMAL.key, HOSTED_ANONYMOUS.key})  # nosec B101 - pytest assertion in test


def test_hidden_interactive_command_is_not_visible(catalog: CommandCatalog) -> None:
    view = CommandView(catalog)
    assert not view.is_visible("interactive", NORMAL)  # nosec B101 - pytest assertion in test
    assert "interactive" not in view.top_level(NORMAL)  # nosec B101 - pytest assertion in test
