"""Cache revalidation signals.

A revalidation tells an external caching layer that previously rendered
output for a page path is stale. Signals are fire-and-forget: they never
return a value and never raise into the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import httpx

from threadline.core.settings import settings

logger = logging.getLogger(__name__)

RevalidationListener = Callable[[str], None]


class Revalidator:
    """Dispatch revalidation signals to in-process listeners and a webhook."""

    def __init__(
        self,
        webhook_url: str | None = None,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.revalidate_timeout_seconds
        )
        self._transport = transport
        self._listeners: list[RevalidationListener] = []
        self._pending: set[asyncio.Task[None]] = set()

    def add_listener(self, listener: RevalidationListener) -> None:
        """Register a callable invoked with each revalidated path."""
        self._listeners.append(listener)

    def remove_listener(self, listener: RevalidationListener) -> None:
        """Unregister a previously added listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def revalidate(self, path: str) -> None:
        """Signal that cached output for ``path`` is stale."""
        logger.info("Revalidating path %s", path)
        for listener in list(self._listeners):
            try:
                listener(path)
            except Exception:
                logger.exception("Revalidation listener failed for %s", path)

        if not self.webhook_url:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; skipping revalidation webhook for %s", path)
            return
        task = loop.create_task(self._post(path))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _post(self, path: str) -> None:
        assert self.webhook_url is not None
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                transport=self._transport,
            ) as client:
                response = await client.post(self.webhook_url, json={"path": path})
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Revalidation webhook failed for %s: %s", path, exc)

    async def drain(self) -> None:
        """Wait for in-flight webhook calls to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


class _RevalidatorSingleton:
    """Singleton wrapper for Revalidator."""

    _instance: Revalidator | None = None

    @classmethod
    def get_instance(cls) -> Revalidator:
        """Get or create the singleton Revalidator instance."""
        if cls._instance is None:
            cls._instance = Revalidator(settings.revalidate_webhook_url)
        return cls._instance

    @classmethod
    def set_instance(cls, revalidator: Revalidator | None) -> Revalidator | None:
        previous = cls._instance
        cls._instance = revalidator
        return previous


def get_revalidator() -> Revalidator:
    """Return the process-wide revalidator."""
    return _RevalidatorSingleton.get_instance()


def set_revalidator(revalidator: Revalidator | None) -> Revalidator | None:
    """Install ``revalidator`` as the process-wide instance and return the previous one."""
    return _RevalidatorSingleton.set_instance(revalidator)


def revalidate_path(path: str) -> None:
    """Signal the process-wide revalidator that ``path`` is stale."""
    get_revalidator().revalidate(path)
