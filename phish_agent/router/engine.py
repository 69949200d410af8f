"""Analysis routing engine."""

import asyncio
import logging
import time
from typing import Optional, Union

from ..analyzer import LocalScanner, OpenRouterAnalyzer, reconcile
from ..analyzer.errors import AnalysisError, ConfigurationError
from ..analyzer.models import AnalysisResult, EmailData, StoredAnalysis
from ..config.settings import SettingsProvider
from ..storage.results import ResultStore
from .models import LocalFallbackOutcome, LocalOutcome, RemoteOutcome

logger = logging.getLogger(__name__)

Outcome = Union[RemoteOutcome, LocalOutcome, LocalFallbackOutcome]


class Router:
    """Chooses the remote or local scanner for each email."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        result_store: ResultStore,
        remote: Optional[OpenRouterAnalyzer] = None,
        local: Optional[LocalScanner] = None,
        audit_logger=None,
    ):
        self.settings_provider = settings_provider
        self.result_store = result_store
        self.remote = remote or OpenRouterAnalyzer()
        self.local = local or LocalScanner()
        self.audit_logger = audit_logger

    async def analyze(self, email: EmailData) -> AnalysisResult:
        """Analyze an email. Remote failures never reach the caller."""
        outcome = await self.analyze_outcome(email)
        return outcome.result

    async def analyze_outcome(self, email: EmailData) -> Outcome:
        started = time.monotonic()
        settings = self.settings_provider.resolve()

        if not settings.has_api_key:
            logger.warning("No API key configured. Running local, basic scan.")
            outcome = LocalOutcome(result=self.local.scan(email))
        else:
            try:
                result = await self.remote.scan(email, settings)
            except (AnalysisError, ConfigurationError) as e:
                logger.error("Remote scan failed (%s): %s. Falling back to local scan.", e.kind, e)
                outcome = LocalFallbackOutcome(
                    result=self.local.scan(email, fallback=True),
                    cause_kind=e.kind,
                    cause_message=str(e),
                )
            else:
                result = reconcile(result, settings.threshold)
                key = self.result_store.make_key(email.email_id)
                self.result_store.put(key, StoredAnalysis(
                    result=result,
                    timestamp=self.result_store.clock(),
                    email_summary=email.summary,
                    settings_snapshot=settings.snapshot(),
                ))
                outcome = RemoteOutcome(result=result, key=key)

        if self.audit_logger:
            await asyncio.to_thread(
                self.audit_logger.log_outcome,
                email,
                outcome,
                processing_time_ms=int((time.monotonic() - started) * 1000),
            )
        return outcome
