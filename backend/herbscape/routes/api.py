"""
HerbScape Backend — JSON API Routes
=====================================

What:  JSON mirrors of the catalog page actions for script clients.
How:   Same CatalogPage per client cookie as the HTML routes; responses carry
       the resulting state plus the toasts the action produced.
Who:   Front-ends that render the catalog themselves.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from herbscape.catalog.page import CatalogPage
from herbscape.routes.deps import get_page, require_full_catalog
from herbscape.routes.pages import read_upload
from herbscape.schemas.herb import (
    CatalogResponse,
    ErrorResponse,
    RemedyRequest,
    RemedyResponse,
    ScanResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog API"])


@router.get(
    "/herbs",
    response_model=CatalogResponse,
    summary="Filtered herb catalog",
    description=(
        "Applies the optional search text, category and language to the "
        "caller's catalog and returns the herbs the grid would show."
    ),
)
async def list_herbs(
    q: Optional[str] = Query(default=None, description="Search text (name or description)"),
    category: Optional[str] = Query(default=None, description="Category, or 'all'"),
    lang: Optional[str] = Query(default=None, description="UI language code"),
    page: CatalogPage = Depends(get_page),
) -> CatalogResponse:
    if q is not None:
        page.set_query(q)
    if category is not None:
        page.set_category(category)
    if lang:
        await page.set_locale(lang)

    return CatalogResponse(
        herbs=page.cards,
        categories=page.categories,
        query=page.query,
        category=page.category,
        locale=page.locale,
        is_loading=page.is_loading,
        is_translating=page.is_translating,
        user=page.user,
        toasts=page.drain_toasts(),
    )


@router.post(
    "/identify",
    response_model=ScanResponse,
    summary="Identify a plant photo",
    description="Sends the photo to the identify-plant function and returns the top suggestion.",
)
async def identify(
    file: Optional[UploadFile] = File(default=None),
    page: CatalogPage = Depends(get_page),
) -> ScanResponse:
    scanner = page.scanner
    result = await scanner.scan(await read_upload(file))
    return ScanResponse(
        dialog_open=scanner.dialog_open,
        is_scanning=scanner.is_scanning,
        image_preview=scanner.image_preview,
        result=result,
        confidence_text=result.confidence_text if result else None,
        toasts=page.drain_toasts(),
    )


@router.post(
    "/remedies",
    response_model=RemedyResponse,
    dependencies=[Depends(require_full_catalog)],
    responses={404: {"description": "Basic catalog", "model": ErrorResponse}},
    summary="Ask the remedies assistant",
)
async def ask_remedy(
    body: RemedyRequest,
    page: CatalogPage = Depends(get_page),
) -> RemedyResponse:
    widget = page.remedy_widget
    response = await widget.submit(body.message)
    return RemedyResponse(
        response=response,
        is_loading=widget.is_loading,
        toasts=page.drain_toasts(),
    )
