"""Authenticated-session lifecycle for the asken scraper."""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from asken_sync.domain.errors import (
    AuthenticationFailed,
    CredentialsMissing,
    SessionRecoveryFailed,
)
from asken_sync.domain.models import ScrapeTarget
from asken_sync.domain.sessions import Credentials, SessionState
from asken_sync.domain.site import (
    EMAIL_SELECTOR,
    PASSWORD_SELECTOR,
    SUBMIT_SELECTOR,
    AskenSite,
    is_login_url,
)

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext

_logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Durable storage for the confirmed browser session."""

    def modified_at(self) -> datetime | None:
        """Return when the session was last written, or None if absent."""

    def load(self) -> SessionState | None:
        """Return the persisted session, if present."""

    def save(self, state: SessionState) -> None:
        """Persist a confirmed session, replacing any previous one."""

    def discard(self) -> None:
        """Remove the persisted session."""


class BrowserLauncher(Protocol):
    """Opens isolated browser contexts, optionally seeded with a session."""

    def open_context(
        self, state: SessionState | None = None
    ) -> "AbstractAsyncContextManager[BrowserContext]":
        """Return an async context manager yielding a browser context."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionManager:
    """Keeps a session the remote service accepts, re-logging in once if not.

    Unknown -> Assumed-Valid (fresh file) -> probe -> Confirmed-Valid, or
    Invalid -> re-login -> probe -> Confirmed-Valid | SessionRecoveryFailed.
    A login that just ran its own confirmation probe is not probed again.
    """

    store: SessionStore
    launcher: BrowserLauncher
    site: AskenSite
    credentials: Credentials | None = None
    max_age: timedelta = timedelta(hours=24)
    navigation_timeout_ms: int = 30000
    login_timeout_ms: int = 30000
    clock: Callable[[], datetime] = field(default=_utcnow)

    def is_likely_fresh(self) -> bool:
        """Cheap local check on the persisted session's age."""
        modified = self.store.modified_at()
        if modified is None:
            return False
        return self.clock() - modified < self.max_age

    async def login(
        self, credentials: Credentials | None = None, warmup_day: date | None = None
    ) -> SessionState:
        """Log in, confirm the session with a warm-up page, then persist it."""
        resolved = credentials or self.credentials
        if resolved is None:
            raise CredentialsMissing
        day = warmup_day or self.clock().date()
        async with self.launcher.open_context() as context:
            page = await context.new_page()
            try:
                await page.goto(self.site.login_url, wait_until="domcontentloaded")
                await page.fill(EMAIL_SELECTOR, resolved.email)
                await page.fill(PASSWORD_SELECTOR, resolved.password)
                await page.click(SUBMIT_SELECTOR)
                try:
                    await page.wait_for_url(
                        lambda url: not is_login_url(str(url)),
                        timeout=self.login_timeout_ms,
                    )
                except PlaywrightTimeoutError as exc:
                    raise AuthenticationFailed(
                        "Login did not leave the login page; check credentials"
                    ) from exc

                # Visiting a session-scoped page settles the session cookies.
                await page.goto(
                    self.site.comment_url(day),
                    wait_until="networkidle",
                    timeout=self.navigation_timeout_ms,
                )
                if is_login_url(page.url):
                    raise AuthenticationFailed(
                        f"Login was not accepted (redirected to {page.url})"
                    )
                storage = await context.storage_state()
            finally:
                await page.close()

        state = SessionState(storage=storage).confirm()
        self.store.save(state)
        _logger.info("Saved confirmed asken session")
        return state

    async def probe(self, state: SessionState, target: ScrapeTarget) -> bool:
        """Return whether the service still accepts ``state``."""
        try:
            async with self.launcher.open_context(state) as context:
                page = await context.new_page()
                try:
                    await page.goto(
                        self.site.comment_url(target.day),
                        wait_until="domcontentloaded",
                        timeout=self.navigation_timeout_ms,
                    )
                    return not is_login_url(page.url)
                finally:
                    await page.close()
        except PlaywrightError as exc:
            _logger.warning("Session probe failed for %s: %s", target.day, exc)
            return False

    async def ensure_valid(self, target: ScrapeTarget) -> SessionState:
        """Return a session the service currently accepts for ``target``."""
        if not self.is_likely_fresh():
            _logger.info("Session missing or stale, logging in")
            return await self.login(warmup_day=target.day)

        state = self.store.load()
        if state is not None and await self.probe(state, target):
            return state

        _logger.warning("Persisted session was rejected, logging in again")
        self.store.discard()
        try:
            await self.login(warmup_day=target.day)
        except (AuthenticationFailed, PlaywrightError) as exc:
            raise SessionRecoveryFailed(f"Re-login failed: {exc}") from exc

        state = self.store.load()
        if state is None or not await self.probe(state, target):
            raise SessionRecoveryFailed(
                f"Session rejected again after re-login ({target.day.isoformat()})"
            )
        return state
