"""Phish Agent - Result delivery package."""

from .poller import PollOutcome, ResultPoller
from .session import ClientSession, ScanResult

__all__ = ["PollOutcome", "ResultPoller", "ClientSession", "ScanResult"]
