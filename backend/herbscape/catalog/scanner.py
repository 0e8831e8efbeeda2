"""
HerbScape Backend — Search Box with Plant Scanner
===================================================

What:  The search input plus the photo scanner dialog.
How:   Text changes are forwarded to the page (which re-filters); a photo is
       turned into a base64 data URL, shown as preview, and sent to the
       identify-plant function. The top suggestion, or a "no match" notice,
       is rendered in the dialog.
Who:   Owned by CatalogPage; driven by POST /scan and POST /api/identify.

Scan flow:
    ┌────────┐   ┌───────────┐   ┌──────────────┐   ┌────────────────────┐
    │ photo  │──▶│ data URL  │──▶│ identify-    │──▶│ result card / toast│
    │ upload │   │ + preview │   │ plant (wait) │   │ (loading cleared)  │
    └────────┘   └───────────┘   └──────────────┘   └────────────────────┘

No validation beyond presence of a file; size and type are whatever the
browser's picker (accept="image/*") let through.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from herbscape.catalog.notifications import Notifier
from herbscape.exceptions import HerbScapeError
from herbscape.schemas.herb import IdentificationResult
from herbscape.services.functions_client import FunctionsClient, functions_client

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ImageFile:
    """A photo as received from the file picker."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


def to_data_url(image: ImageFile) -> str:
    """Encode a photo the way FileReader.readAsDataURL does."""
    content_type = image.content_type or DEFAULT_CONTENT_TYPE
    payload = base64.b64encode(image.content).decode("ascii")
    return f"data:{content_type};base64,{payload}"


class SearchWithScanner:
    """
    Search box and scanner dialog state.

    Attributes:
        dialog_open:   scanner dialog visibility
        image_preview: data URL of the last photo (None after clear())
        is_scanning:   True while identify-plant is in flight
        result:        top suggestion of the last successful scan
    """

    def __init__(
        self,
        notifier: Notifier,
        on_search_change: Callable[[str], None],
        functions: Optional[FunctionsClient] = None,
        access_token: Callable[[], Optional[str]] = lambda: None,
    ):
        self.notifier = notifier
        self.functions = functions or functions_client
        self._on_search_change = on_search_change
        self._access_token = access_token

        self.dialog_open = False
        self.image_preview: Optional[str] = None
        self.is_scanning = False
        self.result: Optional[IdentificationResult] = None

    def change_search(self, value: str) -> None:
        self._on_search_change(value)

    async def scan(self, image: Optional[ImageFile]) -> Optional[IdentificationResult]:
        """
        Identify the plant in `image`.

        Returns:
            The displayed result, or None (no file, no match, or failure).
        """
        if image is None or not image.filename:
            return None

        self.dialog_open = True
        data_url = to_data_url(image)
        self.image_preview = data_url
        self.is_scanning = True
        self.result = None

        logger.info(
            "Scanning photo %s (%d bytes, %s)",
            image.filename,
            len(image.content),
            image.content_type or DEFAULT_CONTENT_TYPE,
        )

        try:
            top = await self.functions.identify_plant(data_url, access_token=self._access_token())
            if top is not None:
                self.result = top
                self.notifier.toast("Plant Identified!", f"Found: {top.scientific_name}")
            else:
                self.notifier.error(
                    "No Match Found",
                    "Could not identify this plant. Try a clearer image.",
                )
        except HerbScapeError as e:
            logger.warning("Plant identification error: %s | Context: %s", e.message, e.context)
            self.notifier.error(
                "Identification Failed",
                "Failed to identify plant. Please try again.",
            )
        finally:
            self.is_scanning = False

        return self.result

    def clear(self) -> None:
        self.image_preview = None
        self.result = None

    def close(self) -> None:
        self.dialog_open = False
