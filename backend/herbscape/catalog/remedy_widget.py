"""
HerbScape Backend — Remedies Widget
=====================================

What:  Floating "Remedies AI" control and its dialog.
How:   Non-empty text is posted once to the remedies webhook; the answer is
       shown verbatim. Rendering escapes it through Jinja2 autoescape only.
Who:   Owned by CatalogPage in the full catalog; driven by POST /remedies.
"""

import logging
from typing import Optional

from herbscape.catalog.notifications import Notifier
from herbscape.exceptions import HerbScapeError
from herbscape.services.remedy_service import RemedyService, remedy_service

logger = logging.getLogger(__name__)

PLACEHOLDER_RESPONSE = "Remedies will appear here..."
THINKING_RESPONSE = "🩺 Thinking... please wait..."
EMPTY_RESPONSE = "⚠️ No response received."
ERROR_RESPONSE = "❌ Error connecting to Remedies AI."


class RemedyWidget:
    """Dialog state: visibility, the user's text, and the displayed answer."""

    def __init__(self, notifier: Notifier, service: Optional[RemedyService] = None):
        self.notifier = notifier
        self.service = service or remedy_service

        self.is_open = False
        self.user_input = ""
        self.response = PLACEHOLDER_RESPONSE
        self.is_loading = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    async def submit(self, text: str) -> str:
        """
        Ask the webhook for a remedy.

        Whitespace-only input only raises a warning toast; no request is made.
        Returns the text now displayed in the dialog.
        """
        self.is_open = True
        self.user_input = text

        if not text.strip():
            self.notifier.error(
                "Please describe your symptoms",
                "Enter your physical problem to get a remedy",
            )
            return self.response

        self.is_loading = True
        self.response = THINKING_RESPONSE

        try:
            answer = await self.service.ask(text)
            self.response = answer or EMPTY_RESPONSE
        except HerbScapeError as e:
            logger.error("Remedies request failed: %s | Context: %s", e.message, e.context)
            self.response = ERROR_RESPONSE
            self.notifier.error(
                "Connection Error",
                "Failed to connect to Remedies AI. Please try again.",
            )
        finally:
            self.is_loading = False

        return self.response
