"""Runtime mode value object.

A :class:`Mode` captures the three environment switches that change what the
shell shows: hosted (web CLI) sessions, anonymous hosted sessions and the
developer-flag toggle. It is built once per request and passed explicitly to
the restriction policy and completion engine; nothing below this module reads
the environment.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..config import env as env_names


@dataclass(frozen=True)
class Mode:
    """Frozen restriction mode.

    ``anonymous`` only has meaning inside a hosted session; a non-hosted
    anonymous mode is normalized to ``anonymous=False``.
    """

    hosted: bool = False
    anonymous: bool = False
    show_dev_flags: bool = False

    def __post_init__(self) -> None:
        if self.anonymous and not self.hosted:
            object.__setattr__(self, "anonymous", False)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Mode":
        return cls(
            hosted=env_names.env_flag(env_names.WEB_CLI_MODE, env),
            anonymous=env_names.env_flag(env_names.ANONYMOUS_USER_MODE, env),
            show_dev_flags=env_names.env_flag(env_names.SHOW_DEV_FLAGS, env),
        )

    @property
    def key(self) -> str:
        """Serialized form used to key memoized listings."""
        return f"hosted={int(self.hosted)};anonymous={int(self.anonymous)};dev={int(self.show_dev_flags)}"

    @property
    def label(self) -> str:
        if self.anonymous:
            return "hosted-anonymous"
        return "hosted" if self.hosted else "normal"


NORMAL = Mode()
HOSTED = Mode(hosted=True)
HOSTED_ANONYMOUS = Mode(hosted=True, anonymous=True)

__all__ = ["Mode", "NORMAL", "HOSTED", "HOSTED_ANONYMOUS"]
