"""Request/confirm protocol for destructive actions.

A deletion is first requested, which records what would be removed and
returns a :class:`DeletionRequest`. Nothing is mutated until the request is
confirmed. Requests are single-use.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..utils import _now_iso


class DeletionKind(str, Enum):
    TASK = "task"
    FOLDER = "folder"


@dataclass(frozen=True)
class DeletionRequest:
    """A pending destructive action awaiting confirmation."""

    kind: DeletionKind
    entity_id: str
    label: str
    request_id: str = field(default_factory=lambda: f"del-{uuid.uuid4().hex[:8]}")
    requested_at: str = field(default_factory=_now_iso)

    @property
    def prompt(self) -> str:
        if self.kind == DeletionKind.FOLDER:
            return f'Delete folder "{self.label}"?'
        return "Delete this task?"


class PendingDeletions:
    """In-memory registry of deletion requests."""

    def __init__(self) -> None:
        self._pending: dict[str, DeletionRequest] = {}
        self._lock = threading.Lock()

    def request(self, kind: DeletionKind, entity_id: str, label: str) -> DeletionRequest:
        req = DeletionRequest(kind=kind, entity_id=entity_id, label=label)
        with self._lock:
            self._pending[req.request_id] = req
        return req

    def take(self, request_id: str) -> Optional[DeletionRequest]:
        """Remove and return a pending request; ``None`` if unknown or already used."""
        with self._lock:
            return self._pending.pop(request_id, None)

