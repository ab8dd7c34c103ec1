"""Volatile audit log repository."""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable


@dataclass(frozen=True)
class AuditEntry:
    id: int
    action: str
    entity: str
    entity_id: int | None
    detail: str
    created_at: str


class AuditRepository:
    """Keeps CREATE/READ/UPDATE/NOTIFY audit entries for the session."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._entries: list[AuditEntry] = []
        self._lock = threading.Lock()

    def add_log(self, action: str, entity: str, entity_id: int | None, detail: str) -> None:
        """Append an audit log record."""
        with self._lock:
            self._entries.append(
                AuditEntry(
                    id=len(self._entries) + 1,
                    action=action,
                    entity=entity,
                    entity_id=entity_id,
                    detail=detail,
                    created_at=self._clock().isoformat(sep=" ", timespec="seconds"),
                )
            )

    def list_logs(
        self,
        limit: int = 200,
        offset: int = 0,
        action: str | None = None,
        entity: str | None = None,
        keyword: str | None = None,
    ) -> list[dict[str, Any]]:
        """List audit logs newest first with optional filters."""
        with self._lock:
            entries = list(reversed(self._entries))

        if action:
            entries = [entry for entry in entries if entry.action == action]
        if entity:
            entries = [entry for entry in entries if entry.entity == entity]
        if keyword:
            needle = keyword.strip().lower()
            entries = [entry for entry in entries if needle in entry.detail.lower()]

        return [asdict(entry) for entry in entries[offset : offset + limit]]
