"""
HerbScape Backend — Remedies Webhook Service
==============================================

What:  Posts a free-text symptom description to the remedies webhook and
       returns whatever text comes back.
How:   Single POST of {"message": <text>}; the body is returned verbatim
       whatever the HTTP status. No retry, no timeout, no rate limiting.
Who:   RemedyWidget.submit().
"""

import logging
import time
from typing import Optional

import httpx

from herbscape.config import settings
from herbscape.exceptions import RemedyServiceError

logger = logging.getLogger(__name__)


class RemedyService:
    """Client for the fixed remedies webhook."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url or settings.remedies_webhook_url
        self._transport = transport

    async def ask(self, message: str) -> str:
        """
        Send `message` and return the raw answer text.

        Raises:
            RemedyServiceError: the webhook could not be reached
        """
        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(self.webhook_url, json={"message": message})
        except httpx.HTTPError as e:
            logger.warning("Remedies webhook unreachable: %s", str(e))
            raise RemedyServiceError(context={"error_type": type(e).__name__})

        logger.info(
            "Remedies webhook answered %d in %.0fms (%d chars)",
            response.status_code,
            (time.time() - start_time) * 1000,
            len(response.text),
        )
        return response.text


# ── Singleton Instance ────────────────────────────────────────────────────
remedy_service = RemedyService()
