"""
HerbScape Backend — Catalog Page Controller
=============================================

What:  Top-level state of one client's catalog page and the wiring between
       search, scanner, grid, remedy widget, auth and translation.
How:   Setters update state and re-run the filter; async operations call the
       data access layer and turn every failure into a toast.
Who:   Created by PageRegistry, driven by the page and API routes.

State owned here:
    herbs           rows loaded at mount (never refreshed afterwards)
    filtered_herbs  what the grid shows
    query/category  search box text and selected category
    locale          UI language; non-default locales switch the grid to
                    translated records where available
    translated      herb id → translated record for the current locale
    user            current session (None when anonymous)

Re-filter triggers:
    query, category, herb list, locale, translation cache.

Translation loop:
    One translate-plant call per herb, awaited one after the other, on each
    switch to a non-default locale (and after mount when the page starts in
    one). The loop runs as a task; callers wait for it at most
    settings.translation_wait_seconds and render the untranslated records
    otherwise. A newer switch cancels the running pass. The cache lives as
    long as the page.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from herbscape.catalog.filtering import ALL_CATEGORIES, category_options, filter_herbs
from herbscape.catalog.notifications import Notifier
from herbscape.catalog.remedy_widget import RemedyWidget
from herbscape.catalog.scanner import SearchWithScanner
from herbscape.config import settings
from herbscape.exceptions import AuthenticationError, HerbScapeError
from herbscape.i18n import language_name
from herbscape.schemas.herb import HerbRecord, SessionUser, Toast
from herbscape.services.auth_service import AuthService, ClientAuth, Subscription
from herbscape.services.functions_client import FunctionsClient, functions_client
from herbscape.services.herb_service import HerbService, herb_service
from herbscape.services.remedy_service import RemedyService

logger = logging.getLogger(__name__)


class CatalogPage:
    """
    Page controller for one browser client.

    The full variant carries auth, the remedy widget and herb translation;
    the basic variant carries neither (see settings.catalog_variant).
    """

    def __init__(
        self,
        client_id: str,
        variant: Optional[str] = None,
        herbs: Optional[HerbService] = None,
        functions: Optional[FunctionsClient] = None,
        auth: Optional[AuthService] = None,
        remedies: Optional[RemedyService] = None,
    ):
        self.client_id = client_id
        self.variant = variant or settings.catalog_variant
        self.herb_service = herbs or herb_service
        self.functions = functions or functions_client
        self.notifier = Notifier()

        self.herbs: List[HerbRecord] = []
        self.filtered_herbs: List[HerbRecord] = []
        self.query = ""
        self.category = ALL_CATEGORIES
        self.locale = settings.default_locale
        self.translated: Dict[str, HerbRecord] = {}
        self.is_loading = True
        self.is_mounted = False
        self._mount_lock = asyncio.Lock()
        self._translation_task: Optional[asyncio.Task] = None
        self.user: Optional[SessionUser] = None

        self.auth = ClientAuth(auth)
        self._subscription: Optional[Subscription] = None

        self.scanner = SearchWithScanner(
            self.notifier,
            on_search_change=self.set_query,
            functions=self.functions,
            access_token=lambda: self.auth.access_token,
        )
        self.remedy_widget: Optional[RemedyWidget] = (
            RemedyWidget(self.notifier, remedies) if self.is_full else None
        )

        self.last_seen = time.monotonic()

    # ── Derived state ─────────────────────────────────────────────────────

    @property
    def is_full(self) -> bool:
        return self.variant == "full"

    @property
    def is_admin(self) -> bool:
        return bool(self.user and self.user.is_admin)

    @property
    def categories(self) -> List[str]:
        return category_options(self.herbs)

    @property
    def cards(self) -> List[HerbRecord]:
        """Records rendered by the catalog grid."""
        return self.filtered_herbs

    @property
    def _translation_active(self) -> bool:
        return self.is_full and self.locale != settings.default_locale

    def _visible_herbs(self) -> List[HerbRecord]:
        if not self._translation_active:
            return self.herbs
        return [self.translated.get(herb.id, herb) for herb in self.herbs]

    def _refilter(self) -> None:
        self.filtered_herbs = filter_herbs(self._visible_herbs(), self.query, self.category)

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def drain_toasts(self) -> List[Toast]:
        return self.notifier.drain()

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def mount(self, db: AsyncSession, access_token: Optional[str] = None) -> None:
        """
        First render: load herbs, subscribe to auth changes, restore the session.

        Idempotent; concurrent first calls wait for the one doing the load.
        """
        async with self._mount_lock:
            if self.is_mounted:
                return

            if self.is_full and self._subscription is None:
                self._subscription = self.auth.on_auth_state_change(self._on_auth_state_change)

            await self.fetch_herbs(db)

            if self.is_full:
                await self.auth.get_session(db, access_token)
            self.is_mounted = True

    def dispose(self) -> None:
        """Drop the auth subscription and any running translation (page evicted)."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._cancel_translation()

    async def fetch_herbs(self, db: AsyncSession) -> None:
        self.is_loading = True
        herbs: List[HerbRecord] = []
        try:
            herbs = await self.herb_service.fetch_all(db)
        except HerbScapeError as e:
            logger.warning("[%s] Herb fetch failed: %s", self.client_id, e.message)
            self.notifier.error("Error fetching herbs", "Please try again")
        finally:
            self.is_loading = False
        await self._set_herbs(herbs)

    async def _set_herbs(self, herbs: List[HerbRecord]) -> None:
        self.herbs = herbs
        self._refilter()
        if self._translation_active and self.herbs:
            await self._start_translation()

    # ── Search & filter ───────────────────────────────────────────────────

    def set_query(self, query: Optional[str]) -> None:
        self.query = query or ""
        self._refilter()

    def set_category(self, category: Optional[str]) -> None:
        self.category = (category or ALL_CATEGORIES).lower()
        self._refilter()

    # ── Locale & translation ──────────────────────────────────────────────

    async def set_locale(self, locale: Optional[str]) -> None:
        if not locale or locale == self.locale:
            return
        if locale not in settings.supported_locales_list:
            self.notifier.error(
                "Language not supported",
                f"'{locale}' is not one of: "
                + ", ".join(language_name(loc) for loc in settings.supported_locales_list),
            )
            return

        self.locale = locale
        self._cancel_translation()
        self._refilter()
        logger.info("[%s] Locale switched to %s", self.client_id, locale)

        if self._translation_active and self.herbs:
            await self._start_translation()

    @property
    def is_translating(self) -> bool:
        return self._translation_task is not None and not self._translation_task.done()

    def _cancel_translation(self) -> None:
        if self.is_translating:
            self._translation_task.cancel()
        self._translation_task = None

    async def _start_translation(self) -> None:
        """Run translate_herbs as a task and wait for it up to the configured bound."""
        self._cancel_translation()
        task = asyncio.create_task(self.translate_herbs())
        self._translation_task = task
        await self.wait_for_translation()

    async def wait_for_translation(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the running translation pass without cancelling it.

        Returns:
            True when no pass is running any more.
        """
        task = self._translation_task
        if task is None:
            return True
        if timeout is None:
            timeout = settings.translation_wait_seconds
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if not done:
            logger.info(
                "[%s] Translation to %s still running; rendering originals",
                self.client_id,
                self.locale,
            )
            return False
        if task.cancelled():
            return True
        error = task.exception()
        if error is not None:
            raise error
        return True

    async def translate_herbs(self) -> None:
        """
        Translate every loaded herb into the current locale, one call at a time.

        Per-herb failures are logged and skipped; one toast reports them.
        The cache is replaced only if the locale did not change meanwhile.
        """
        target = self.locale
        herbs = list(self.herbs)
        translated: Dict[str, HerbRecord] = {}
        failures = 0

        for herb in herbs:
            try:
                result = await self.functions.translate_herb(
                    herb, target, access_token=self.auth.access_token
                )
            except HerbScapeError as e:
                failures += 1
                logger.warning(
                    "[%s] Translation failed for herb %s: %s",
                    self.client_id,
                    herb.name,
                    e.message,
                )
                continue
            if result is not None:
                translated[herb.id] = result

        if self.locale != target:
            logger.info("[%s] Dropping %s translations (locale changed)", self.client_id, target)
            return

        self.translated = translated
        self._refilter()

        if failures:
            self.notifier.error(
                "Translation incomplete",
                f"{failures} of {len(herbs)} herbs are shown untranslated.",
            )

    # ── Auth ──────────────────────────────────────────────────────────────

    async def _on_auth_state_change(self, event: str, user: Optional[SessionUser]) -> None:
        self.user = user

    async def sign_in(self, db: AsyncSession, access_token: str) -> Optional[SessionUser]:
        try:
            user = await self.auth.sign_in_with_token(db, access_token)
        except AuthenticationError as e:
            self.notifier.error("Sign in failed", e.message)
            return None
        self.notifier.toast("Signed in successfully", user.email)
        return user

    async def sign_out(self) -> None:
        await self.auth.sign_out()
        self.notifier.toast("Signed out successfully")
