"""Day-overview scraper: every food row logged for a date."""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from asken_sync.domain.models import MealType, ScrapedItem
from asken_sync.domain.site import MEAL_BLOCKS, AskenSite
from asken_sync.services.navigation import (
    DiagnosticsWriter,
    ensure_not_login,
    navigate,
    wait_for_optional,
)

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext

_logger = logging.getLogger(__name__)

_KCAL = re.compile(r"([0-9][0-9,]*)\s*kcal", re.IGNORECASE)
_MIN_CELLS = 3


def parse_day_overview(
    html: str, blocks: tuple[tuple[str, MealType], ...] = MEAL_BLOCKS
) -> list[ScrapedItem]:
    """Extract food rows from the rendered report, block by block.

    Rows with fewer than three non-empty cells, or without a kcal value
    in the third cell, are skipped.
    """
    soup = BeautifulSoup(html, "html.parser")
    items: list[ScrapedItem] = []
    for block_id, meal_type in blocks:
        container = soup.find(id=block_id)
        if container is None:
            continue
        for row in container.select("table tr"):
            cells = [td.get_text().strip() for td in row.find_all("td")]
            cells = [cell for cell in cells if cell]
            if len(cells) < _MIN_CELLS:
                continue
            name, amount, kcal_text = cells[:_MIN_CELLS]
            match = _KCAL.search(kcal_text)
            if not match:
                continue
            items.append(
                ScrapedItem(
                    meal_type=meal_type,
                    name=name,
                    amount=amount,
                    calories=int(match.group(1).replace(",", "")),
                )
            )
    return items


@dataclass
class DayOverviewScraper:
    """Reads the per-date report page under a valid session."""

    site: AskenSite
    diagnostics: DiagnosticsWriter | None = None
    navigation_timeout_ms: int = 30000
    render_timeout_ms: int = 10000

    async def scrape(self, context: "BrowserContext", day: date) -> list[ScrapedItem]:
        """Return all food rows for ``day`` in block-then-row order."""
        render_selector = ", ".join(f"#{block_id}" for block_id, _ in MEAL_BLOCKS[:3])
        page = await context.new_page()
        try:
            await navigate(page, self.site.comment_url(day), self.navigation_timeout_ms)
            # Missing blocks are not fatal; only a login redirect is.
            await wait_for_optional(page, render_selector, self.render_timeout_ms)
            ensure_not_login(page, f"day overview {day.isoformat()}")
            items = parse_day_overview(await page.content())
        except Exception:
            _logger.error("Scrape error (%s)", day.isoformat())
            if self.diagnostics is not None:
                await self.diagnostics.capture(page)
            raise
        finally:
            await page.close()
        _logger.info("Scraped %s items for %s", len(items), day.isoformat())
        return items
