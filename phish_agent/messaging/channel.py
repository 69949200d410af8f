"""In-process asynchronous message channel."""

import asyncio
from typing import Optional

from .handler import MessageHandler


class LocalChannel:
    """Runs each request in its own task so analysis outlives the requester."""

    def __init__(self, handler: MessageHandler):
        self.handler = handler
        self._pending: set = set()

    def _spawn(self, message: dict) -> asyncio.Task:
        task = asyncio.ensure_future(self.handler.handle(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def request(self, message: dict, timeout: Optional[float] = None) -> Optional[dict]:
        """Send a request and wait for its reply.

        Returns None when ``timeout`` elapses first; the request keeps running.
        """
        task = self._spawn(message)
        if timeout is None:
            return await task
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout)
        except asyncio.TimeoutError:
            return None

    def post(self, message: dict) -> None:
        """Fire-and-forget send, for requests without a reply contract."""
        self._spawn(message)

    async def drain(self) -> None:
        """Wait for every in-flight request to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
