"""
HerbScape Backend — Shared Route Dependencies
===============================================

What:  Resolves the calling browser client to its CatalogPage.
How:   Reads the `herbscape_client` cookie (or mints an id), fetches the page
       from the registry and mounts it on first use with the session token
       from the `sb-access-token` cookie.
Who:   Every page, API and auth route.
"""

import logging
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from herbscape.catalog.page import CatalogPage
from herbscape.catalog.registry import CLIENT_COOKIE, page_registry
from herbscape.config import settings
from herbscape.database import get_db_session
from herbscape.exceptions import NotFoundError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "sb-access-token"

# One year; the page state itself is bounded by the registry, not the cookie
CLIENT_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def set_client_cookie(response: Response, page: CatalogPage) -> None:
    response.set_cookie(
        CLIENT_COOKIE,
        page.client_id,
        max_age=CLIENT_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )


def set_token_cookie(response: Response, access_token: Optional[str]) -> None:
    if access_token:
        response.set_cookie(ACCESS_TOKEN_COOKIE, access_token, httponly=True, samesite="lax")
    else:
        response.delete_cookie(ACCESS_TOKEN_COOKIE)


async def get_page(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> CatalogPage:
    """
    The caller's CatalogPage, mounted.

    The client cookie is set on the dependency response, which FastAPI merges
    into model responses; routes returning a Response object set it themselves.
    """
    client_id = request.cookies.get(CLIENT_COOKIE) or page_registry.new_client_id()
    page = page_registry.get_or_create(client_id)
    await page.mount(db, request.cookies.get(ACCESS_TOKEN_COOKIE))
    set_client_cookie(response, page)
    return page


def require_full_catalog() -> None:
    """Remedy and auth endpoints exist only in the full catalog."""
    if not settings.is_full_variant:
        raise NotFoundError(resource="endpoint", context={"catalog_variant": settings.catalog_variant})
