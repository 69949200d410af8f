"""Phish Agent - Phishing analysis for webmail messages."""

__version__ = "0.1.0"

# Re-export main components for convenience
from .config import load_config, AppConfig, Settings, SettingsProvider
from .analyzer import LocalScanner, OpenRouterAnalyzer, AnalysisResult, EmailData, StoredAnalysis, reconcile
from .router import Router
from .storage import ResultStore, JSONFileStore, MemoryStore
from .delivery import ResultPoller, ClientSession
from .messaging import MessageHandler, LocalChannel
from .app import Agent, create_agent, configure_logging

__all__ = [
    "load_config",
    "AppConfig",
    "Settings",
    "SettingsProvider",
    "LocalScanner",
    "OpenRouterAnalyzer",
    "AnalysisResult",
    "EmailData",
    "StoredAnalysis",
    "reconcile",
    "Router",
    "ResultStore",
    "JSONFileStore",
    "MemoryStore",
    "ResultPoller",
    "ClientSession",
    "MessageHandler",
    "LocalChannel",
    "Agent",
    "create_agent",
    "configure_logging",
]
