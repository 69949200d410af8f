"""Phish Agent - Analyzer package."""

from .local import LocalScanner
from .models import AnalysisResult, EmailData, StoredAnalysis
from .openrouter import OpenRouterAnalyzer
from .reconcile import reconcile

__all__ = [
    "LocalScanner",
    "OpenRouterAnalyzer",
    "AnalysisResult",
    "EmailData",
    "StoredAnalysis",
    "reconcile",
]
