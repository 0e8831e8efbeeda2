"""
HerbScape Backend — Supabase Edge Functions Client
====================================================

What:  Invokes the hosted backend functions used by the catalog:
       - identify-plant:  base64 photo → ranked plant suggestions
       - translate-plant: herb record + target locale → translated herb record
How:   One POST per invocation to {SUPABASE_URL}/functions/v1/<name> with the
       project's anon key, the same request supabase-js `functions.invoke` makes.
Who:   SearchWithScanner (identification) and CatalogPage (translation loop).

Failure policy:
    No retry, no backoff, no timeout. Transport errors, non-2xx answers and
    undecodable bodies raise RemoteFunctionError; the calling component turns
    it into a toast.

Response shapes (identify-plant, trimmed):
    {
        "suggestions": [
            {
                "plant_name": "Mentha spicata",
                "probability": 0.8732,
                "plant_details": {
                    "common_names": ["Spearmint"],
                    "taxonomy": {"family": "Lamiaceae", "genus": "Mentha"},
                    "wiki_description": {"value": "Spearmint is a species of mint..."}
                }
            }
        ]
    }
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from herbscape.config import settings
from herbscape.exceptions import RemoteFunctionError
from herbscape.schemas.herb import HerbRecord, IdentificationResult

logger = logging.getLogger(__name__)


class FunctionsClient:
    """
    Thin async client for Supabase edge functions.

    Args:
        base_url:  Supabase project URL (defaults to settings.supabase_url)
        anon_key:  Public anon key (defaults to settings.supabase_anon_key)
        transport: Optional httpx transport; tests pass an httpx.MockTransport
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.supabase_anon_key
        self._transport = transport

    def _headers(self, access_token: Optional[str]) -> Dict[str, str]:
        # Signed-in users call functions with their own JWT, anonymous ones with the anon key
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "Content-Type": "application/json",
        }

    async def invoke(
        self,
        name: str,
        body: Dict[str, Any],
        access_token: Optional[str] = None,
    ) -> Any:
        """
        Invoke one edge function and return its decoded answer.

        Returns:
            Decoded JSON for JSON answers, text for anything else,
            None for an empty body.

        Raises:
            RemoteFunctionError: transport failure, non-2xx status or bad JSON
        """
        call_id = str(uuid.uuid4())[:8]
        url = f"{self.base_url}/functions/v1/{name}"
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(url, json=body, headers=self._headers(access_token))
        except httpx.HTTPError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "[%s] Function %s unreachable after %.0fms: %s",
                call_id,
                name,
                duration_ms,
                str(e),
            )
            raise RemoteFunctionError(
                function_name=name,
                message=f"Could not reach the {name} service.",
                context={"call_id": call_id, "error_type": type(e).__name__},
            )

        duration_ms = (time.time() - start_time) * 1000

        if response.is_error:
            logger.warning(
                "[%s] Function %s answered %d in %.0fms",
                call_id,
                name,
                response.status_code,
                duration_ms,
            )
            raise RemoteFunctionError(
                function_name=name,
                message=f"The {name} service returned an error.",
                status_code=response.status_code,
                context={"call_id": call_id},
            )

        logger.info("[%s] Function %s completed in %.0fms", call_id, name, duration_ms)

        if not response.content:
            return None

        if "application/json" not in response.headers.get("content-type", ""):
            return response.text

        try:
            return response.json()
        except ValueError:
            raise RemoteFunctionError(
                function_name=name,
                message=f"The {name} service returned an unreadable answer.",
                status_code=response.status_code,
                context={"call_id": call_id},
            )

    async def identify_plant(
        self,
        image_data_url: str,
        access_token: Optional[str] = None,
    ) -> Optional[IdentificationResult]:
        """
        Identify a plant from one photo.

        Args:
            image_data_url: `data:<mime>;base64,<payload>` string of the photo

        Returns:
            The top suggestion, or None when the service found no match.
        """
        name = settings.identify_function
        data = await self.invoke(
            name,
            {"images": [image_data_url]},
            access_token=access_token,
        )

        suggestions = data.get("suggestions") if isinstance(data, dict) else None
        if not suggestions:
            return None
        if not isinstance(suggestions, list) or not isinstance(suggestions[0], dict):
            raise RemoteFunctionError(
                function_name=name,
                message="The identification service returned an unexpected answer.",
            )

        top = suggestions[0]
        try:
            details = top.get("plant_details") or {}
            taxonomy = details.get("taxonomy") or {}
            wiki = details.get("wiki_description") or {}

            return IdentificationResult(
                common_names=details.get("common_names") or [],
                scientific_name=top.get("plant_name"),
                probability=top.get("probability"),
                family=taxonomy.get("family"),
                genus=taxonomy.get("genus"),
                description=wiki.get("value"),
            )
        except (AttributeError, KeyError, TypeError, SchemaValidationError) as e:
            raise RemoteFunctionError(
                function_name=name,
                message="The identification service returned an invalid suggestion.",
                context={"error": type(e).__name__},
            )

    async def translate_herb(
        self,
        herb: HerbRecord,
        locale: str,
        access_token: Optional[str] = None,
    ) -> Optional[HerbRecord]:
        """
        Translate one herb record into `locale`.

        Returns:
            The translated record (keyed by the original id), or None when the
            function answered with an empty body.
        """
        name = settings.translate_function
        data = await self.invoke(
            name,
            {"herb": herb.model_dump(), "targetLanguage": locale},
            access_token=access_token,
        )
        if not data:
            return None
        if not isinstance(data, dict):
            raise RemoteFunctionError(
                function_name=name,
                message="The translation service returned an unexpected answer.",
            )

        # Fields the function leaves out keep their original value
        try:
            return HerbRecord.model_validate({**herb.model_dump(), **data, "id": herb.id})
        except SchemaValidationError as e:
            raise RemoteFunctionError(
                function_name=name,
                message="The translation service returned an invalid herb record.",
                context={"errors": e.error_count()},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
functions_client = FunctionsClient()
