"""Advice-page scraper: per-meal nutrient breakdown."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from asken_sync.domain.models import ADVICE_MEAL_TYPES, NutrientRecord, ScrapeTarget
from asken_sync.domain.site import AskenSite
from asken_sync.services.extractor import NutrientExtractor, choose_best
from asken_sync.services.navigation import ensure_not_login, navigate, wait_for_optional

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext

_logger = logging.getLogger(__name__)


def extract_advice_nutrients(
    html: str, extractor: NutrientExtractor | None = None
) -> NutrientRecord:
    """Return the best nutrient table on an advice page.

    Every table is extracted and the most populated one wins. When no
    table yields anything, the whole page text is used instead.
    """
    resolved = extractor or NutrientExtractor()
    soup = BeautifulSoup(html, "html.parser")
    texts = (table.get_text(" ", strip=True) for table in soup.find_all("table"))
    table_texts = [text for text in texts if text]
    best = choose_best(resolved.extract(text) for text in table_texts)
    if best:
        return best
    body = soup.body or soup
    return resolved.extract(body.get_text(" ", strip=True))


@dataclass
class AdviceScraper:
    """Reads the advice page of one meal slot."""

    site: AskenSite
    extractor: NutrientExtractor = field(default_factory=NutrientExtractor)
    navigation_timeout_ms: int = 30000
    render_timeout_ms: int = 10000

    async def scrape(
        self, context: "BrowserContext", target: ScrapeTarget
    ) -> NutrientRecord:
        """Return the nutrient breakdown of the target's meal slot."""
        day, meal_type = target.day, target.meal_type
        if meal_type not in ADVICE_MEAL_TYPES:
            raise ValueError(f"No advice page for {meal_type.value}")
        url = self.site.advice_url(day, meal_type)
        page = await context.new_page()
        try:
            await navigate(page, url, self.navigation_timeout_ms)
            await wait_for_optional(page, "table", self.render_timeout_ms)
            ensure_not_login(page, f"advice page {meal_type.value} {url}")
            html = await page.content()
        finally:
            await page.close()

        nutrients = extract_advice_nutrients(html, self.extractor)
        if not nutrients:
            _logger.warning(
                "No nutrients recognised for %s %s", day.isoformat(), meal_type.value
            )
        return nutrients
