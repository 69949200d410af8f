"""Router models - tagged analysis outcomes."""

from dataclasses import dataclass
from typing import Optional

from ..analyzer.models import AnalysisResult


@dataclass(frozen=True)
class RemoteOutcome:
    """Remote scan succeeded; result reconciled and stored under ``key``."""
    result: AnalysisResult
    key: str
    kind = "remote"

    @property
    def source(self) -> str:
        return f"AI ({self.result.confidence}% confident)"


@dataclass(frozen=True)
class LocalOutcome:
    """No credential configured; local heuristics only."""
    result: AnalysisResult
    kind = "local"

    @property
    def source(self) -> str:
        return "Local scan"


@dataclass(frozen=True)
class LocalFallbackOutcome:
    """Remote scan failed; local heuristics in fallback mode."""
    result: AnalysisResult
    cause_kind: str
    cause_message: Optional[str] = None
    kind = "local_fallback"

    @property
    def source(self) -> str:
        return f"Local scan (fallback: {self.cause_kind})"
