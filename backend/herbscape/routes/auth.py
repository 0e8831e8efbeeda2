"""
HerbScape Backend — Auth Routes
=================================

What:  Sign-in (adopting a Supabase access token) and sign-out for the caller.
How:   The token obtained on the external sign-in page is posted here, checked
       against the auth provider, and kept in the `sb-access-token` cookie.
Who:   The sign-in page (form post) and script clients (JSON).

Served in the full catalog only; the basic catalog answers 404.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, Response
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from herbscape.catalog.page import CatalogPage
from herbscape.database import get_db_session
from herbscape.exceptions import ValidationError
from herbscape.routes.deps import get_page, require_full_catalog, set_token_cookie
from herbscape.routes.pages import render_page
from herbscape.schemas.herb import AccessTokenRequest, ErrorResponse, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Auth"],
    dependencies=[Depends(require_full_catalog)],
    responses={404: {"description": "Basic catalog", "model": ErrorResponse}},
)


# ── HTML ──────────────────────────────────────────────────────────────────


@router.post("/auth/session", response_class=HTMLResponse, summary="Sign in (form)")
async def sign_in_form(
    request: Request,
    access_token: str = Form(...),
    db: AsyncSession = Depends(get_db_session),
    page: CatalogPage = Depends(get_page),
) -> HTMLResponse:
    if not access_token.strip():
        raise ValidationError("An access token is required.", field="access_token")
    user = await page.sign_in(db, access_token)
    response = render_page(request, page)
    if user is not None:
        set_token_cookie(response, access_token)
    return response


@router.post("/auth/sign-out", response_class=HTMLResponse, summary="Sign out (form)")
async def sign_out_form(request: Request, page: CatalogPage = Depends(get_page)) -> HTMLResponse:
    await page.sign_out()
    response = render_page(request, page)
    set_token_cookie(response, None)
    return response


# ── JSON ──────────────────────────────────────────────────────────────────


@router.get("/api/auth/session", response_model=SessionResponse, summary="Current session")
async def get_session(page: CatalogPage = Depends(get_page)) -> SessionResponse:
    return SessionResponse(user=page.user, toasts=page.drain_toasts())


@router.post(
    "/api/auth/session",
    response_model=SessionResponse,
    responses={401: {"description": "Token rejected", "model": SessionResponse}},
    summary="Sign in with an access token",
)
async def sign_in(
    body: AccessTokenRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
    page: CatalogPage = Depends(get_page),
) -> SessionResponse:
    user = await page.sign_in(db, body.access_token)
    if user is None:
        response.status_code = 401
    else:
        set_token_cookie(response, body.access_token)
    return SessionResponse(user=user, toasts=page.drain_toasts())


@router.post("/api/auth/sign-out", response_model=SessionResponse, summary="Sign out")
async def sign_out(response: Response, page: CatalogPage = Depends(get_page)) -> SessionResponse:
    await page.sign_out()
    set_token_cookie(response, None)
    return SessionResponse(user=None, toasts=page.drain_toasts())
