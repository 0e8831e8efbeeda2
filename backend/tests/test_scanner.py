"""
HerbScape Backend — Plant Scanner Unit Tests
==============================================

What:  SearchWithScanner with a mocked FunctionsClient.

What we test:
    ✅ Successful scan shows the top suggestion and a confidence with one decimal
    ✅ No suggestions → "No Match Found" toast and no result card
    ✅ Service failure → "Identification Failed" toast, loading cleared
    ✅ Malformed identify-plant answer → same toast, never a raised error
    ✅ No file → nothing happens
    ✅ Data URL uses the upload's content type
"""

import base64
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from herbscape.catalog.notifications import Notifier
from herbscape.catalog.scanner import ImageFile, SearchWithScanner, to_data_url
from herbscape.exceptions import RemoteFunctionError
from herbscape.schemas.herb import IdentificationResult
from herbscape.services.functions_client import FunctionsClient


def _scanner(functions, on_search_change=None):
    return SearchWithScanner(
        Notifier(),
        on_search_change=on_search_change or MagicMock(),
        functions=functions,
        access_token=lambda: "user-jwt",
    )


@pytest.fixture
def photo(sample_image_bytes):
    return ImageFile(filename="leaf.jpg", content=sample_image_bytes, content_type="image/jpeg")


class TestToDataUrl:

    def test_uses_content_type(self, photo, sample_image_bytes):
        expected = "data:image/jpeg;base64," + base64.b64encode(sample_image_bytes).decode()
        assert to_data_url(photo) == expected

    def test_unknown_content_type(self):
        url = to_data_url(ImageFile(filename="x", content=b"abc"))
        assert url == "data:application/octet-stream;base64,YWJj"


class TestScan:

    @pytest.mark.asyncio
    async def test_success_shows_top_suggestion(self, photo):
        functions = MagicMock()
        functions.identify_plant = AsyncMock(return_value=IdentificationResult(
            common_names=["Holy basil"],
            scientific_name="Ocimum tenuiflorum",
            probability=0.873,
            family="Lamiaceae",
            genus="Ocimum",
        ))
        scanner = _scanner(functions)

        result = await scanner.scan(photo)

        assert result.scientific_name == "Ocimum tenuiflorum"
        assert result.confidence_text == "87.3%"
        assert scanner.dialog_open is True
        assert scanner.is_scanning is False
        assert scanner.image_preview.startswith("data:image/jpeg;base64,")

        toasts = scanner.notifier.drain()
        assert [(t.title, t.description, t.variant) for t in toasts] == [
            ("Plant Identified!", "Found: Ocimum tenuiflorum", "default"),
        ]

        data_url = functions.identify_plant.await_args.args[0]
        assert data_url == scanner.image_preview
        assert functions.identify_plant.await_args.kwargs["access_token"] == "user-jwt"

    @pytest.mark.asyncio
    async def test_no_match(self, photo):
        functions = MagicMock()
        functions.identify_plant = AsyncMock(return_value=None)
        scanner = _scanner(functions)

        assert await scanner.scan(photo) is None
        assert scanner.result is None
        assert scanner.is_scanning is False

        toast = scanner.notifier.drain()[0]
        assert toast.title == "No Match Found"
        assert toast.description == "Could not identify this plant. Try a clearer image."
        assert toast.variant == "destructive"

    @pytest.mark.asyncio
    async def test_failure_clears_loading(self, photo):
        functions = MagicMock()
        functions.identify_plant = AsyncMock(
            side_effect=RemoteFunctionError(function_name="identify-plant", status_code=500)
        )
        scanner = _scanner(functions)

        assert await scanner.scan(photo) is None
        assert scanner.is_scanning is False

        toast = scanner.notifier.drain()[0]
        assert toast.title == "Identification Failed"
        assert toast.description == "Failed to identify plant. Please try again."

    @pytest.mark.asyncio
    async def test_malformed_answer_becomes_toast(self, photo):
        functions = FunctionsClient(
            base_url="https://project.supabase.test",
            anon_key="anon",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"suggestions": ["Mentha"]})
            ),
        )
        scanner = _scanner(functions)

        assert await scanner.scan(photo) is None
        assert scanner.is_scanning is False
        assert scanner.result is None

        toast = scanner.notifier.drain()[0]
        assert toast.title == "Identification Failed"
        assert toast.variant == "destructive"

    @pytest.mark.asyncio
    async def test_new_scan_drops_previous_result(self, photo):
        functions = MagicMock()
        functions.identify_plant = AsyncMock(side_effect=[
            IdentificationResult(scientific_name="Mentha", probability=0.5),
            None,
        ])
        scanner = _scanner(functions)

        await scanner.scan(photo)
        await scanner.scan(photo)
        assert scanner.result is None

    @pytest.mark.asyncio
    async def test_no_file_is_a_no_op(self):
        functions = MagicMock()
        functions.identify_plant = AsyncMock()
        scanner = _scanner(functions)

        assert await scanner.scan(None) is None
        assert await scanner.scan(ImageFile(filename="", content=b"")) is None

        functions.identify_plant.assert_not_awaited()
        assert scanner.dialog_open is False
        assert scanner.notifier.pending == []


class TestDialogActions:

    @pytest.mark.asyncio
    async def test_clear_and_close(self, photo):
        functions = MagicMock()
        functions.identify_plant = AsyncMock(
            return_value=IdentificationResult(scientific_name="Mentha", probability=0.9)
        )
        scanner = _scanner(functions)
        await scanner.scan(photo)

        scanner.clear()
        assert scanner.image_preview is None
        assert scanner.result is None
        assert scanner.dialog_open is True

        scanner.close()
        assert scanner.dialog_open is False

    def test_change_search_forwards_text(self):
        on_change = MagicMock()
        scanner = _scanner(MagicMock(), on_search_change=on_change)
        scanner.change_search("mint")
        on_change.assert_called_once_with("mint")


class TestConfidenceText:

    def test_missing_probability(self):
        assert IdentificationResult(scientific_name="x").confidence_text is None

    def test_rounding(self):
        assert IdentificationResult(probability=0.99999).confidence_text == "100.0%"
