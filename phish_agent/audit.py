"""
Analysis audit log.
Appends one JSON line per analysis outcome: verdict, source and fallback cause.
"""

import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .analyzer.models import EmailData


@dataclass
class AnalysisLogEntry:
    """A single analysis log entry."""
    timestamp: str
    email_id: Optional[str]
    from_addr: str
    subject: str

    outcome: str  # remote, local, local_fallback
    is_phishing: bool
    confidence: int
    indicator_count: int

    processing_time_ms: int = 0
    cause_kind: Optional[str] = None
    cause_message: Optional[str] = None


class AnalysisLogger:
    """JSONL logger for analysis outcomes."""

    def __init__(self, log_dir: str, session_id: str = None):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.session_id = session_id or datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.log_file = self.log_dir / f"analysis_log_{self.session_id}.jsonl"

    def log_outcome(self, email: EmailData, outcome, processing_time_ms: int = 0) -> AnalysisLogEntry:
        """Log a router outcome."""
        entry = AnalysisLogEntry(
            timestamp=datetime.now().isoformat(),
            email_id=email.email_id,
            from_addr=email.from_addr,
            subject=email.subject,
            outcome=outcome.kind,
            is_phishing=outcome.result.is_phishing,
            confidence=outcome.result.confidence,
            indicator_count=len(outcome.result.indicators),
            processing_time_ms=processing_time_ms,
            cause_kind=getattr(outcome, "cause_kind", None),
            cause_message=getattr(outcome, "cause_message", None),
        )

        with open(self.log_file, "a") as f:
            f.write(json.dumps(asdict(entry)) + "\n")

        return entry

    def get_logs(self, session_id: str = None, limit: int = 100) -> list:
        """Get log entries for a session (or the current one)."""
        if session_id is None:
            log_file = self.log_file
        else:
            log_file = self.log_dir / f"analysis_log_{session_id}.jsonl"

        if not log_file.exists():
            return []

        entries = []
        with open(log_file, "r") as f:
            for line in f:
                if line.strip():
                    entries.append(json.loads(line))

        return entries[-limit:] if limit else entries

    def get_stats(self, session_id: str = None) -> dict:
        logs = self.get_logs(session_id, limit=0)

        stats = {
            "total": len(logs),
            "phishing": 0,
            "by_outcome": {},
            "by_cause": {},
            "avg_confidence": 0.0,
        }

        confidence_sum = 0
        for log in logs:
            if log.get("is_phishing"):
                stats["phishing"] += 1

            kind = log.get("outcome")
            if kind:
                stats["by_outcome"][kind] = stats["by_outcome"].get(kind, 0) + 1

            cause = log.get("cause_kind")
            if cause:
                stats["by_cause"][cause] = stats["by_cause"].get(cause, 0) + 1

            confidence_sum += log.get("confidence", 0)

        if logs:
            stats["avg_confidence"] = round(confidence_sum / len(logs), 1)

        return stats
