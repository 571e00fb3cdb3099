"""Restriction policy: which commands a given mode may see and run."""
from __future__ import annotations

from .mode import HOSTED, HOSTED_ANONYMOUS, NORMAL, Mode
from .restriction import (
    RestrictionReason,
    is_restricted,
    matches_pattern,
    restriction_message,
    restriction_reason,
)
from .rules import RestrictionRule, RuleScope

__all__ = [
    "Mode",
    "NORMAL",
    "HOSTED",
    "HOSTED_ANONYMOUS",
    "RestrictionReason",
    "RestrictionRule",
    "RuleScope",
    "is_restricted",
    "matches_pattern",
    "restriction_message",
    "restriction_reason",
]
