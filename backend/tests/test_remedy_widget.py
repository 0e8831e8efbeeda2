"""
HerbScape Backend — Remedies Widget Unit Tests
================================================

What we test:
    ✅ Empty / whitespace-only text → warning toast, no webhook call
    ✅ Answer text is displayed verbatim
    ✅ Empty answer → "No response received"
    ✅ Webhook unreachable → error text + "Connection Error" toast
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from herbscape.catalog.notifications import Notifier
from herbscape.catalog.remedy_widget import (
    EMPTY_RESPONSE,
    ERROR_RESPONSE,
    PLACEHOLDER_RESPONSE,
    RemedyWidget,
)
from herbscape.exceptions import RemedyServiceError


def _widget(answer=None, error=None):
    service = MagicMock()
    service.ask = AsyncMock(return_value=answer, side_effect=error)
    return RemedyWidget(Notifier(), service)


class TestRemedyWidget:

    def test_initial_state(self):
        widget = _widget()
        assert widget.response == PLACEHOLDER_RESPONSE
        assert widget.is_open is False
        assert widget.is_loading is False

    def test_open_close(self):
        widget = _widget()
        widget.open()
        assert widget.is_open is True
        widget.close()
        assert widget.is_open is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_text_makes_no_call(self, text):
        widget = _widget(answer="never")

        shown = await widget.submit(text)

        widget.service.ask.assert_not_awaited()
        assert shown == PLACEHOLDER_RESPONSE
        toast = widget.notifier.drain()[0]
        assert toast.title == "Please describe your symptoms"
        assert toast.description == "Enter your physical problem to get a remedy"
        assert toast.variant == "destructive"

    @pytest.mark.asyncio
    async def test_answer_shown_verbatim(self):
        answer = "Try ginger tea.\n<b>Rest</b> well."
        widget = _widget(answer=answer)

        assert await widget.submit("  sore throat ") == answer

        widget.service.ask.assert_awaited_once_with("  sore throat ")
        assert widget.response == answer
        assert widget.is_loading is False
        assert widget.notifier.pending == []

    @pytest.mark.asyncio
    async def test_empty_answer(self):
        widget = _widget(answer="")
        assert await widget.submit("headache") == EMPTY_RESPONSE

    @pytest.mark.asyncio
    async def test_unreachable_webhook(self):
        widget = _widget(error=RemedyServiceError())

        assert await widget.submit("headache") == ERROR_RESPONSE
        assert widget.is_loading is False

        toast = widget.notifier.drain()[0]
        assert toast.title == "Connection Error"
        assert toast.description == "Failed to connect to Remedies AI. Please try again."
