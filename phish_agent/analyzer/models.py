"""Analysis data models."""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from .errors import InvalidEmailError


@dataclass(frozen=True)
class EmailData:
    """Email as extracted from the webmail page."""
    from_addr: str = ""
    subject: str = ""
    body: str = ""
    links: tuple = ()  # Document order
    email_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "EmailData":
        """Build from the wire form. Absent fields are treated as empty."""
        if data is None:
            raise InvalidEmailError("No email data provided")
        if not isinstance(data, dict):
            raise InvalidEmailError(f"Email data must be an object, got {type(data).__name__}")

        links = data.get("links") or []
        if isinstance(links, str):
            links = [links]
        email_id = data.get("emailId")

        return cls(
            from_addr=str(data.get("from") or ""),
            subject=str(data.get("subject") or ""),
            body=str(data.get("body") or ""),
            links=tuple(str(link) for link in links),
            email_id=str(email_id) if email_id else None,
        )

    def to_dict(self) -> dict:
        return {
            "from": self.from_addr,
            "subject": self.subject,
            "body": self.body,
            "links": list(self.links),
            "emailId": self.email_id,
        }

    @property
    def summary(self) -> dict:
        """Sender and subject only, as persisted with results."""
        return {"from": self.from_addr, "subject": self.subject}


@dataclass(frozen=True)
class AnalysisResult:
    """Phishing verdict for one email."""
    is_phishing: bool
    confidence: int  # 0-100
    indicators: tuple = ()
    recommendation: str = ""

    def with_changes(self, **changes) -> "AnalysisResult":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "isPhishing": self.is_phishing,
            "confidence": self.confidence,
            "indicators": list(self.indicators),
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        return cls(
            is_phishing=bool(data.get("isPhishing", False)),
            confidence=int(round(data.get("confidence", 0))),
            indicators=tuple(data.get("indicators") or ()),
            recommendation=data.get("recommendation", ""),
        )


@dataclass(frozen=True)
class StoredAnalysis:
    """A persisted remote analysis."""
    result: AnalysisResult
    timestamp: int  # epoch millis
    email_summary: dict = field(default_factory=dict)
    settings_snapshot: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = self.result.to_dict()
        data.update({
            "timestamp": self.timestamp,
            "emailData": dict(self.email_summary),
            "settings": dict(self.settings_snapshot),
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "StoredAnalysis":
        return cls(
            result=AnalysisResult.from_dict(data),
            timestamp=int(data.get("timestamp") or 0),
            email_summary=dict(data.get("emailData") or {}),
            settings_snapshot=dict(data.get("settings") or {}),
        )
