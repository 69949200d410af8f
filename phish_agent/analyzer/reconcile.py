"""Verdict/confidence/indicator reconciliation for model output."""

import logging

from .models import AnalysisResult

logger = logging.getLogger(__name__)

# Confidence floor once a result carries any indicator
INDICATOR_CONFIDENCE_FLOOR = 50


def reconcile(result: AnalysisResult, threshold: int) -> AnalysisResult:
    """Force a result to be internally consistent with the user threshold.

    1. Any indicator means phishing, with confidence at least 50.
    2. Confidence at or above the threshold means phishing; the
       recommendation is prefixed with the reason.

    Idempotent for a fixed threshold.
    """
    is_phishing = result.is_phishing
    confidence = result.confidence
    recommendation = result.recommendation

    if result.indicators:
        if not is_phishing:
            logger.warning(
                "Model output was inconsistent (safe, but with %d indicators). Forcing result to phishing.",
                len(result.indicators),
            )
        is_phishing = True
        confidence = max(confidence, INDICATOR_CONFIDENCE_FLOOR)

    if confidence >= threshold and not is_phishing:
        is_phishing = True
        recommendation = (
            f"Flagged due to high confidence ({confidence}%) exceeding threshold ({threshold}%). "
            f"{recommendation}"
        )

    return result.with_changes(
        is_phishing=is_phishing,
        confidence=confidence,
        recommendation=recommendation,
    )
