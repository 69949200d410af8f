"""Polling delivery of results that complete outside the client's lifetime."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from ..analyzer.models import StoredAnalysis
from ..storage.results import ResultStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0
DEFAULT_MAX_ATTEMPTS = 30


@dataclass(frozen=True)
class PollOutcome:
    """Result of waiting for a stored analysis."""
    status: str  # completed | timed_out
    record: Optional[StoredAnalysis] = None
    attempts: int = 0

    @property
    def completed(self) -> bool:
        return self.status == "completed"

    @property
    def timed_out(self) -> bool:
        return self.status == "timed_out"


class ResultPoller:
    """Samples the result store until a qualifying record appears."""

    def __init__(
        self,
        store: ResultStore,
        interval: float = DEFAULT_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.store = store
        self.interval = interval
        self.max_attempts = max_attempts

    async def wait(self, since: Optional[int] = None) -> PollOutcome:
        """Poll for the latest record stored at or after ``since`` (epoch ms).

        A timeout is an outcome, not an error: the analysis may still finish
        and be picked up on the next launch.
        """
        for attempt in range(1, self.max_attempts + 1):
            await asyncio.sleep(self.interval)
            record = self.store.latest()
            if record is not None and (since is None or record.timestamp >= since):
                return PollOutcome(status="completed", record=record, attempts=attempt)

        logger.warning("Analysis timed out after %d polling attempts", self.max_attempts)
        return PollOutcome(status="timed_out", attempts=self.max_attempts)

    def start(self, since: Optional[int] = None) -> "asyncio.Task[PollOutcome]":
        """Run :meth:`wait` as a task. Cancelling it stops polling only."""
        return asyncio.ensure_future(self.wait(since))
