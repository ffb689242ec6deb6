"""Playwright-backed browser launcher."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from playwright.async_api import BrowserContext, async_playwright

from asken_sync.domain.sessions import SessionState
from asken_sync.services.sessions import BrowserLauncher


@dataclass
class PlaywrightLauncher(BrowserLauncher):
    """Launches Chromium and yields one context per call."""

    headless: bool = True
    navigation_timeout_ms: int = 30000

    @asynccontextmanager
    async def open_context(
        self, state: SessionState | None = None
    ) -> AsyncIterator[BrowserContext]:
        """Launch a browser, seed it with ``state`` and close both on exit."""
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=self.headless)
            try:
                context = await browser.new_context(
                    storage_state=state.storage if state is not None else None
                )
                context.set_default_navigation_timeout(self.navigation_timeout_ms)
                try:
                    yield context
                finally:
                    await context.close()
            finally:
                await browser.close()
