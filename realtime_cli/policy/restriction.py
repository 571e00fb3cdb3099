"""Pure restriction checks.

``is_restricted`` and friends take the command id (``"channels:publish"``)
and an explicit :class:`Mode`; they never consult the environment.
"""
from __future__ import annotations

from typing import Optional, Tuple

from .mode import Mode
from .rules import ANONYMOUS_RULES, HOSTED_RULES, INTERACTIVE_RULES, RestrictionRule, RuleScope

RestrictionReason = RuleScope

_MESSAGES = {
    RuleScope.INTERACTIVE: "'{name}' is not available in interactive mode",
    RuleScope.HOSTED: "'{name}' is not available in the web CLI mode",
    RuleScope.ANONYMOUS: (
        "'{name}' is not available in anonymous mode\n"
        "Please provide an access token to use this command"
    ),
}


def matches_pattern(command_id: str, pattern: str) -> bool:
    """Match ``command_id`` against one rule pattern.

    ``"prefix:*"`` matches ``prefix`` and anything below ``prefix:``;
    ``"prefix*"`` matches anything starting with ``prefix``; any other
    pattern must be equal.
    """
    if pattern.endswith(":*"):
        base = pattern[:-2]
        return command_id == base or command_id.startswith(base + ":")
    if pattern.endswith("*"):
        return command_id.startswith(pattern[:-1])
    return command_id == pattern


def active_rules(mode: Mode) -> Tuple[RestrictionRule, ...]:
    """Rules in evaluation order; anonymous rules are added to, not substituted for, hosted ones."""
    rules: Tuple[RestrictionRule, ...] = INTERACTIVE_RULES
    if mode.anonymous:
        rules += ANONYMOUS_RULES
    if mode.hosted:
        rules += HOSTED_RULES
    return rules


def matching_rule(command_id: str, mode: Mode) -> Optional[RestrictionRule]:
    for rule in active_rules(mode):
        if matches_pattern(command_id, rule.pattern):
            return rule
    return None


def is_restricted(command_id: str, mode: Mode) -> bool:
    return matching_rule(command_id, mode) is not None


def restriction_reason(command_id: str, mode: Mode) -> Optional[RestrictionReason]:
    rule = matching_rule(command_id, mode)
    return rule.scope if rule is not None else None


def restriction_message(command_id: str, reason: RestrictionReason) -> str:
    return _MESSAGES[reason].format(name=command_id.replace(":", " "))


__all__ = [
    "RestrictionReason",
    "matches_pattern",
    "active_rules",
    "matching_rule",
    "is_restricted",
    "restriction_reason",
    "restriction_message",
]
