"""Phish Agent - Messaging package."""

from .channel import LocalChannel
from .handler import MessageHandler
from .notifier import ConsoleNotifier

__all__ = ["LocalChannel", "MessageHandler", "ConsoleNotifier"]
