"""
Revalidation component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# --- Payloads ---


@dataclass(frozen=True)
class ManualRevalidateRequest:
    """Explicit purge request from an operator or the editor UI."""

    page: str | None = None
    homepage: bool = False
    template_slug: str | None = None


@dataclass(frozen=True)
class ChangeEvent:
    """Row-change notification from the data store."""

    table: str
    type: str = ""
    record: dict[str, Any] | None = None
    old_record: dict[str, Any] | None = None


RevalidatePayload = ManualRevalidateRequest | ChangeEvent


# --- Component Input / Output ---


@dataclass(frozen=True)
class RevalidateInput:
    provided_secret: str | None
    raw_body: bytes = b""


@dataclass(frozen=True)
class RevalidationResult:
    ok: bool
    revalidated: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None
    status_code: int = 200

    def to_body(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        return {"ok": True, "revalidated": list(self.revalidated)}
