# app/services/notifications.py
"""File d'envoi des emails de confirmation.

Les requêtes déposent un message et repartent aussitôt; un worker unique,
démarré dans le lifespan de l'app, fait les envois. À l'arrêt, la file est
vidée (dans la limite du timeout) puis le worker est annulé.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.integrations.email.base import EmailSender

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str


class NotificationDispatcher:
    def __init__(self, sender: Optional[EmailSender], shutdown_timeout: float = 10.0):
        self.sender = sender
        self.shutdown_timeout = shutdown_timeout
        self._queue: "asyncio.Queue[EmailMessage]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self.sender is not None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        if self.enabled and not self.running:
            self._worker = asyncio.create_task(self._run(), name="email-notifications")

    def submit(self, message: EmailMessage) -> bool:
        """Dépose le message sans attendre l'envoi. False si aucun transport."""
        if not self.enabled:
            logger.info("Aucun transport email configuré, notification ignorée")
            return False
        self._queue.put_nowait(message)
        return True

    async def _deliver(self, message: EmailMessage) -> None:
        try:
            ok = await self.sender.send(message.to, message.subject, message.html)
        except Exception:
            logger.warning("Échec d'envoi de l'email '%s'", message.subject, exc_info=True)
            return
        if not ok:
            logger.warning("Email '%s' non envoyé: tous les transports ont échoué", message.subject)

    async def _run(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._deliver(message)
            finally:
                self._queue.task_done()

    async def drain(self) -> None:
        await self._queue.join()

    async def shutdown(self) -> None:
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=self.shutdown_timeout)
        except asyncio.TimeoutError:
            logger.warning("%d email(s) abandonné(s) à l'arrêt", self._queue.qsize())
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
