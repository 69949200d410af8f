"""Inbound message handling for the analysis context."""

import logging
from typing import Optional

from ..analyzer.models import EmailData
from ..router import Router
from .notifier import ConsoleNotifier

logger = logging.getLogger(__name__)


class MessageHandler:
    """Dispatches ``analyzeEmail`` and ``showNotification`` requests."""

    def __init__(self, router: Router, notifier=None):
        self.router = router
        self.notifier = notifier or ConsoleNotifier()

    async def handle(self, message: dict) -> Optional[dict]:
        """Handle one request. Only ``analyzeEmail`` has a reply."""
        action = message.get("action") if isinstance(message, dict) else None

        if action == "analyzeEmail":
            return await self._analyze(message.get("emailData"))

        if action == "showNotification":
            self.notifier.notify(message.get("title", ""), message.get("message", ""))
            return None

        logger.debug("Ignoring message with action %r", action)
        return None

    async def _analyze(self, email_data) -> dict:
        try:
            email = EmailData.from_dict(email_data)
            result = await self.router.analyze(email)
        except Exception as e:
            logger.exception("Analysis request failed")
            return {"success": False, "error": str(e)}
        return {"success": True, "result": result.to_dict()}
