"""Content-addressed idempotency keys and the registry of in-flight writes."""
import hashlib
import json
import logging
from datetime import date
from threading import Lock
from typing import Iterable, Optional, Set

from ..errors import DuplicateOperationError

logger = logging.getLogger(__name__)


def make_idempotency_key(
    patient_id: str,
    tool: str,
    tooth: Optional[int],
    zones: Iterable[str] = (),
    material: Optional[str] = None,
    code: Optional[str] = None,
    day: Optional[date] = None,
) -> str:
    payload = {
        "patient_id": patient_id,
        "tool": tool,
        "tooth": tooth,
        "zones": sorted(set(zones)),
        "material": material,
        "code": code,
        "day": (day or date.today()).isoformat(),
    }
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class PendingOperations:
    """Tracks keys that are being written or were written by this registry."""

    def __init__(self):
        self._pending: Set[str] = set()
        self._committed: Set[str] = set()
        self._lock = Lock()

    def reserve(self, key: str) -> None:
        with self._lock:
            if key in self._pending or key in self._committed:
                raise DuplicateOperationError(key)
            self._pending.add(key)

    def commit(self, key: str) -> None:
        with self._lock:
            self._pending.discard(key)
            self._committed.add(key)

    def release(self, key: str) -> None:
        """Drop a key so the same content can be written again, e.g. after a delete."""
        with self._lock:
            self._pending.discard(key)
            self._committed.discard(key)

    def is_known(self, key: str) -> bool:
        with self._lock:
            return key in self._pending or key in self._committed

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)
