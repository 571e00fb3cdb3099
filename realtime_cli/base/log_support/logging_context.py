"""Fields attached to every shell log event."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Who emitted an event: the command id, the restriction mode and the session.

    Unset fields and ``None`` entries of ``extra`` are left out of
    :meth:`to_dict`, so a context built mid-dispatch never adds empty keys.
    """

    command: Optional[str] = None
    mode: Optional[str] = None
    session_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        merged = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        merged.update(self.extra)
        return {key: value for key, value in merged.items() if value is not None}


__all__ = ["LogContext"]
