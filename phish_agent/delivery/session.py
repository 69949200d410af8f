"""Client session: what a UI does when it opens and when it asks for a scan."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..analyzer.models import AnalysisResult, EmailData, StoredAnalysis
from ..storage.results import DEFAULT_RETENTION, ResultStore
from .poller import ResultPoller

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """What the client ends up showing."""
    status: str  # completed | error | timed_out
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "completed"


class ClientSession:
    """A short-lived client of the analysis pipeline.

    The pipeline may outlive the session; results it stores later are found by
    polling or on the next :meth:`open`.
    """

    def __init__(
        self,
        channel,
        store: ResultStore,
        poller: Optional[ResultPoller] = None,
        retention_limit: int = DEFAULT_RETENTION,
        reply_timeout: Optional[float] = None,
    ):
        self.channel = channel
        self.store = store
        self.poller = poller or ResultPoller(store)
        self.retention_limit = retention_limit
        self.reply_timeout = reply_timeout

    def open(self) -> Optional[StoredAnalysis]:
        """Prune old results and return the most recent one, if any."""
        self.store.evict_excess(self.retention_limit)
        return self.store.latest()

    async def scan(self, email: EmailData) -> ScanResult:
        """Request an analysis.

        An error reply is final. A late reply, or one without a result, falls
        back to polling the store.
        """
        started = self.store.clock()
        reply = await self.channel.request(
            {"action": "analyzeEmail", "emailData": email.to_dict()},
            timeout=self.reply_timeout,
        )

        if reply is not None and not reply.get("success", True):
            return ScanResult(status="error", error=reply.get("error") or "Unknown error")
        if reply is not None and reply.get("result"):
            return ScanResult(status="completed", result=AnalysisResult.from_dict(reply["result"]))

        logger.info("No result in reply, waiting for stored result")
        outcome = await self.poller.wait(since=started)
        if outcome.completed:
            return ScanResult(status="completed", result=outcome.record.result)
        return ScanResult(status="timed_out", error="Analysis timed out. Please try again.")

    def notify(self, title: str, message: str) -> None:
        self.channel.post({"action": "showNotification", "title": title, "message": message})
