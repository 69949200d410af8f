"""Keyword and link heuristic scanner. No network, no persistence."""

from urllib.parse import urlsplit

from .models import AnalysisResult, EmailData

# Fixed local decision boundary, independent of the user threshold
PHISHING_THRESHOLD = 45

# A basic scan is never reported as fully confident
MAX_CONFIDENCE = 90

KEYWORD_WEIGHT = 15
LINKS_WEIGHT = 10
MISMATCH_WEIGHT = 30

PHISHING_KEYWORDS = (
    "urgent",
    "account suspended",
    "verify account",
    "click here to update",
    "password expired",
    "payment failed",
    "unauthorized access",
    "invoice attached",
)

RECOMMENDATION_PHISHING = (
    "Potential Phishing Detected via Local Scan. Use extreme caution and "
    "manually verify the sender and links."
)
RECOMMENDATION_CAUTION = (
    "Email appears safe based on basic local checks, but minor indicators were found. "
    "Use caution for complex or novel threats."
)
RECOMMENDATION_SAFE = "Email appears safe based on basic local checks."
FALLBACK_NOTICE = "API Scan failed due to error/limit."


def link_host(link: str):
    """Return the lowercase host of an absolute URL, or None if it does not parse.

    URLs with a scheme but no authority (mailto:, tel:) have an empty host.
    """
    try:
        parts = urlsplit(link.strip())
        host = parts.hostname
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return (host or "").lower()


class LocalScanner:
    """Deterministic heuristic phishing scanner."""

    def __init__(self, keywords=PHISHING_KEYWORDS, threshold: int = PHISHING_THRESHOLD):
        self.keywords = tuple(kw.lower() for kw in keywords)
        self.threshold = threshold

    def scan(self, email: EmailData, fallback: bool = False) -> AnalysisResult:
        """Score an email. ``fallback`` marks a scan run because the remote scan failed."""
        subject = (email.subject or "").lower()
        body = (email.body or "").lower()
        links = list(email.links or ())

        indicators = []
        confidence = 0

        for kw in self.keywords:
            if kw in body or kw in subject:
                indicators.append(f'Keyword detected: "{kw}"')
                confidence += KEYWORD_WEIGHT

        if links:
            if confidence < self.threshold:
                indicators.append("Links found (Requires manual verification)")
                confidence += LINKS_WEIGHT

            if any(self._is_mismatched(link, subject, body) for link in links):
                indicators.append("Link domain does not match email context (high risk)")
                confidence += MISMATCH_WEIGHT

        confidence = min(confidence, MAX_CONFIDENCE)
        is_phishing = confidence >= self.threshold

        if is_phishing:
            recommendation = RECOMMENDATION_PHISHING
        elif confidence > 0:
            recommendation = RECOMMENDATION_CAUTION
        else:
            recommendation = RECOMMENDATION_SAFE

        if fallback:
            recommendation = f"{FALLBACK_NOTICE} {recommendation}"

        return AnalysisResult(
            is_phishing=is_phishing,
            confidence=confidence,
            indicators=tuple(indicators),
            recommendation=recommendation,
        )

    @staticmethod
    def _is_mismatched(link: str, subject: str, body: str) -> bool:
        host = link_host(link)
        if host is None:
            return True
        return host not in body and host not in subject
