"""Analysis result store with bounded retention."""

import logging
import time
from typing import Optional

from ..analyzer.models import StoredAnalysis
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "analysis_"
DEFAULT_RETENTION = 10


def now_ms() -> int:
    return int(time.time() * 1000)


class ResultStore:
    """Owns every ``analysis_*`` record in the key-value store.

    Recency is decided by the record's ``timestamp`` field (numeric), with the
    key string as tiebreaker. Keys derived from opaque email ids do not sort
    chronologically, so key order alone is not used.
    """

    def __init__(self, kv: KeyValueStore, clock=now_ms):
        self.kv = kv
        self.clock = clock

    def make_key(self, email_id: Optional[str] = None) -> str:
        """``analysis_<emailId>``, or ``analysis_<epoch ms>`` without a stable id."""
        return f"{KEY_PREFIX}{email_id or self.clock()}"

    def put(self, key: str, record: StoredAnalysis) -> None:
        """Write a record. A second write to the same key replaces the first."""
        if not key.startswith(KEY_PREFIX):
            key = f"{KEY_PREFIX}{key}"
        self.kv.set({key: record.to_dict()})

    def get(self, key: str) -> Optional[StoredAnalysis]:
        data = self.kv.get([key]).get(key)
        return StoredAnalysis.from_dict(data) if data else None

    def _ordered(self) -> list[tuple[str, dict]]:
        """All records, most recent first."""
        records = [
            (key, value)
            for key, value in self.kv.get_all().items()
            if key.startswith(KEY_PREFIX) and isinstance(value, dict)
        ]
        records.sort(key=lambda item: (int(item[1].get("timestamp") or 0), item[0]), reverse=True)
        return records

    def items(self) -> list[tuple[str, StoredAnalysis]]:
        return [(key, StoredAnalysis.from_dict(value)) for key, value in self._ordered()]

    def latest(self) -> Optional[StoredAnalysis]:
        records = self._ordered()
        if not records:
            return None
        return StoredAnalysis.from_dict(records[0][1])

    def evict_excess(self, limit: int = DEFAULT_RETENTION) -> list[str]:
        """Keep the ``limit`` most recent records and remove the rest."""
        records = self._ordered()
        if len(records) <= limit:
            return []
        keys_to_remove = [key for key, _ in records[limit:]]
        self.kv.remove(keys_to_remove)
        logger.info("Cleaned up %d old analysis results", len(keys_to_remove))
        return keys_to_remove
