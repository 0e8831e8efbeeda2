"""
HerbScape Backend — Catalog Page Routes
=========================================

What:  Server-rendered catalog page and the form posts that drive it.
How:   Each route applies one user action to the client's CatalogPage and
       re-renders index.html; queued toasts are drained into that render.
Who:   Browsers (plain HTML forms, no client-side script required).

Routes:
    GET  /            search (q), category filter (category), language (lang)
    POST /scan        photo upload for the plant scanner
    POST /scan/clear  drop preview and result
    POST /scan/close  close the scanner dialog
    POST /remedies    ask the remedies webhook (full catalog only)
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from herbscape import __version__
from herbscape.catalog.page import CatalogPage
from herbscape.catalog.remedy_widget import PLACEHOLDER_RESPONSE
from herbscape.catalog.scanner import ImageFile
from herbscape.config import settings
from herbscape.i18n import LANGUAGE_NAMES, language_name, translate
from herbscape.routes.deps import get_page, require_full_catalog, set_client_cookie

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["language_name"] = language_name
templates.env.globals["language_names"] = LANGUAGE_NAMES
templates.env.globals["placeholder_response"] = PLACEHOLDER_RESPONSE
templates.env.globals["version"] = __version__


def render_page(request: Request, page: CatalogPage, status_code: int = 200) -> HTMLResponse:
    """Render the full catalog for `page`, draining its toasts."""

    def t(key: str) -> str:
        return translate(key, page.locale)

    response = templates.TemplateResponse(
        request,
        "index.html",
        {
            "page": page,
            "toasts": page.drain_toasts(),
            "settings": settings,
            "t": t,
        },
        status_code=status_code,
    )
    set_client_cookie(response, page)
    return response


async def read_upload(file: Optional[UploadFile]) -> Optional[ImageFile]:
    """Turn a multipart upload into an ImageFile; None when no file was picked."""
    if file is None or not file.filename:
        return None
    content = await file.read()
    return ImageFile(filename=file.filename, content=content, content_type=file.content_type)


@router.get("/", response_class=HTMLResponse, summary="Herb catalog page")
async def catalog(
    request: Request,
    q: Optional[str] = Query(default=None, description="Search text (name or description)"),
    category: Optional[str] = Query(default=None, description="Category, or 'all'"),
    lang: Optional[str] = Query(default=None, description="UI language code"),
    page: CatalogPage = Depends(get_page),
) -> HTMLResponse:
    if q is not None:
        page.set_query(q)
    if category is not None:
        page.set_category(category)
    if lang:
        await page.set_locale(lang)
    return render_page(request, page)


@router.post("/scan", response_class=HTMLResponse, summary="Identify a plant photo")
async def scan(
    request: Request,
    file: Optional[UploadFile] = File(default=None),
    page: CatalogPage = Depends(get_page),
) -> HTMLResponse:
    await page.scanner.scan(await read_upload(file))
    return render_page(request, page)


@router.post("/scan/clear", response_class=HTMLResponse, summary="Clear the scanner")
async def clear_scan(request: Request, page: CatalogPage = Depends(get_page)) -> HTMLResponse:
    page.scanner.clear()
    return render_page(request, page)


@router.post("/scan/close", response_class=HTMLResponse, summary="Close the scanner dialog")
async def close_scan(request: Request, page: CatalogPage = Depends(get_page)) -> HTMLResponse:
    page.scanner.close()
    return render_page(request, page)


@router.post(
    "/remedies",
    response_class=HTMLResponse,
    dependencies=[Depends(require_full_catalog)],
    summary="Ask the remedies assistant",
)
async def remedies(
    request: Request,
    message: str = Form(default=""),
    page: CatalogPage = Depends(get_page),
) -> HTMLResponse:
    await page.remedy_widget.submit(message)
    return render_page(request, page)
