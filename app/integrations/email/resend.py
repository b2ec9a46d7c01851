# app/integrations/email/resend.py
from __future__ import annotations
from typing import Optional

import httpx

from app.modules.employees.errors import NotificationFailure


class ResendSender:
    name = "resend"

    def __init__(
        self,
        api_key: str,
        sender: str,
        *,
        api_base: str = "https://api.resend.com",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.url = f"{api_base.rstrip('/')}/emails"
        self._timeout = timeout
        self._transport = transport

    async def send(self, to: str, subject: str, html: str) -> bool:
        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            r = await client.post(self.url, json=payload, headers=headers)
        if r.status_code >= 400:
            raise NotificationFailure("resend_failed", r.text[:500], status_code=r.status_code)
        return True
