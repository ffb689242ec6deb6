"""Best-effort step and exercise-calorie scraper."""

import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from asken_sync.domain.models import ExerciseData
from asken_sync.domain.site import AskenSite
from asken_sync.services.navigation import ensure_not_login, navigate, wait_for_optional

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext

STEPS_SELECTOR = "text=歩"

_STEPS = re.compile(r"([0-9][0-9,]*)\s*歩")
_BURNED = re.compile(r"消費[^0-9]{0,20}([0-9][0-9,]*)\s*kcal", re.IGNORECASE)


def parse_exercise(html: str) -> ExerciseData | None:
    """Read steps and burned calories from the karute report text."""
    soup = BeautifulSoup(html, "html.parser")
    body = soup.body or soup
    text = body.get_text("\n", strip=True)
    steps_match = _STEPS.search(text)
    if steps_match is None:
        return None
    burned_match = _BURNED.search(text)
    return ExerciseData(
        steps=int(steps_match.group(1).replace(",", "")),
        calories=int(burned_match.group(1).replace(",", "")) if burned_match else 0,
    )


@dataclass
class ExerciseScraper:
    """Reads the karute report page of a date."""

    site: AskenSite
    navigation_timeout_ms: int = 30000
    render_timeout_ms: int = 10000

    async def scrape(self, context: "BrowserContext", day: date) -> ExerciseData | None:
        page = await context.new_page()
        try:
            await navigate(
                page, self.site.karute_report_url(day), self.navigation_timeout_ms
            )
            ensure_not_login(page, f"karute report {day.isoformat()}")
            # The report renders client side; steps appear once it has filled in.
            await wait_for_optional(page, STEPS_SELECTOR, self.render_timeout_ms)
            html = await page.content()
        finally:
            await page.close()
        return parse_exercise(html)
