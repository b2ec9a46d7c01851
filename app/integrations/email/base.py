# app/integrations/email/base.py
from __future__ import annotations
from typing import Protocol, Sequence
import logging

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    name: str

    async def send(self, to: str, subject: str, html: str) -> bool: ...


class FallbackEmailSender:
    """Essaie chaque transport dans l'ordre et s'arrête au premier succès."""

    name = "fallback"

    def __init__(self, senders: Sequence[EmailSender]):
        self.senders = list(senders)

    async def send(self, to: str, subject: str, html: str) -> bool:
        for sender in self.senders:
            try:
                if await sender.send(to, subject, html):
                    logger.info("Email '%s' envoyé via %s", subject, sender.name)
                    return True
                logger.warning("Transport %s: envoi refusé", sender.name)
            except Exception:
                logger.warning("Transport %s en échec", sender.name, exc_info=True)
        return False
