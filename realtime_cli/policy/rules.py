"""Restriction rule tables.

Three scopes:

* ``interactive``: commands that make no sense inside the interactive shell
  (autocomplete setup, config editing, version printing, the MCP server and
  the shell itself). Filtered in every mode.
* ``hosted``: commands unavailable in the web CLI (local account and app
  switching, credential storage).
* ``anonymous``: commands that need an authenticated account or expose
  account-wide data. Applied on top of the hosted rules.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class RuleScope(str, Enum):
    INTERACTIVE = "interactive"
    HOSTED = "hosted"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class RestrictionRule:
    pattern: str
    scope: RuleScope


INTERACTIVE_UNSUITABLE_PATTERNS: Tuple[str, ...] = (
    "autocomplete",
    "autocomplete:*",
    "config",
    "config:*",
    "version",
    "version:*",
    "mcp",
    "mcp:*",
    "interactive",
    "interactive:*",
)

HOSTED_RESTRICTED_PATTERNS: Tuple[str, ...] = (
    "accounts:login",
    "accounts:list",
    "accounts:logout",
    "accounts:switch",
    "apps:create",
    "apps:switch",
    "apps:delete",
    "auth:keys:switch",
    "autocomplete*",
    "config*",
    "mcp*",
)

ANONYMOUS_RESTRICTED_PATTERNS: Tuple[str, ...] = (
    "accounts*",
    "apps*",
    "auth:keys*",
    "auth:revoke-token",
    "bench*",
    "channels:list",
    "channels:logs",
    "connections:logs",
    "rooms:list",
    "spaces:list",
    "integrations*",
    "logs*",
    "queues*",
)


def _rules(patterns: Tuple[str, ...], scope: RuleScope) -> Tuple[RestrictionRule, ...]:
    return tuple(RestrictionRule(pattern=p, scope=scope) for p in patterns)


INTERACTIVE_RULES = _rules(INTERACTIVE_UNSUITABLE_PATTERNS, RuleScope.INTERACTIVE)
HOSTED_RULES = _rules(HOSTED_RESTRICTED_PATTERNS, RuleScope.HOSTED)
ANONYMOUS_RULES = _rules(ANONYMOUS_RESTRICTED_PATTERNS, RuleScope.ANONYMOUS)

__all__ = [
    "RuleScope",
    "RestrictionRule",
    "INTERACTIVE_RULES",
    "HOSTED_RULES",
    "ANONYMOUS_RULES",
    "INTERACTIVE_UNSUITABLE_PATTERNS",
    "HOSTED_RESTRICTED_PATTERNS",
    "ANONYMOUS_RESTRICTED_PATTERNS",
]
