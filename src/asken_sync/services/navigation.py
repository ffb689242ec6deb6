"""Page navigation helpers shared by the scrapers."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from asken_sync.domain.errors import NavigationTimeout, SessionExpired
from asken_sync.domain.site import is_login_url

if TYPE_CHECKING:
    from playwright.async_api import Page

_logger = logging.getLogger(__name__)


async def navigate(page: "Page", url: str, timeout_ms: int) -> None:
    """Open ``url``, translating Playwright timeouts to NavigationTimeout."""
    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise NavigationTimeout(
            f"Timed out after {timeout_ms}ms opening {url}"
        ) from exc


async def wait_for_optional(page: "Page", selector: str, timeout_ms: int) -> bool:
    """Wait for ``selector`` to render; a timeout is not an error."""
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
    except PlaywrightTimeoutError:
        return False
    return True


def ensure_not_login(page: "Page", what: str) -> None:
    """Raise SessionExpired when the page was redirected to login."""
    if is_login_url(page.url):
        raise SessionExpired(f"Redirected to login while opening {what}")


@dataclass
class DiagnosticsWriter:
    """Dumps a screenshot and the HTML of a failed page.

    Both files are overwritten on every failure.
    """

    screenshot_path: Path
    html_path: Path

    async def capture(self, page: "Page") -> None:
        self.screenshot_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await page.screenshot(path=str(self.screenshot_path), full_page=True)
            self.html_path.write_text(await page.content(), encoding="utf-8")
        except Exception:
            _logger.exception("Failed to capture diagnostics")
            return
        _logger.info(
            "Diagnostics saved: %s, %s", self.screenshot_path, self.html_path
        )
