"""Phish Agent - Router package."""

from .engine import Router
from .models import LocalFallbackOutcome, LocalOutcome, RemoteOutcome

__all__ = ["Router", "RemoteOutcome", "LocalOutcome", "LocalFallbackOutcome"]
