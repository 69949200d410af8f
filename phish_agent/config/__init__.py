"""Phish Agent - Configuration package."""

from .loader import load_config
from .models import AppConfig, Settings
from .settings import SettingsProvider

__all__ = ["load_config", "AppConfig", "Settings", "SettingsProvider"]
