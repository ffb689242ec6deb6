"""Top-level driver assembling one date's DayResult."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from asken_sync.domain.models import (
    ADVICE_MEAL_TYPES,
    DayResult,
    ExerciseData,
    MealType,
    NutrientRecord,
    ScrapeTarget,
)
from asken_sync.services.advice import AdviceScraper
from asken_sync.services.day_overview import DayOverviewScraper
from asken_sync.services.exercise import ExerciseScraper
from asken_sync.services.normalizer import normalize_nutrients
from asken_sync.services.sessions import BrowserLauncher, SessionManager

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext

_logger = logging.getLogger(__name__)


@dataclass
class ScrapeOrchestrator:
    """Runs the overview and advice scrapers sequentially in one session.

    Session and overview failures are fatal for the date. A failing
    advice page degrades to an empty record for that meal only.
    """

    session_manager: SessionManager
    launcher: BrowserLauncher
    overview_scraper: DayOverviewScraper
    advice_scraper: AdviceScraper
    exercise_scraper: ExerciseScraper | None = None

    async def scrape_day(self, day: date) -> DayResult:
        """Scrape ``day`` and return the assembled result."""
        state = await self.session_manager.ensure_valid(ScrapeTarget(day=day))
        async with self.launcher.open_context(state) as context:
            items = await self.overview_scraper.scrape(context, day)
            nutrients: dict[MealType, NutrientRecord] = {}
            for meal_type in ADVICE_MEAL_TYPES:
                nutrients[meal_type] = normalize_nutrients(
                    await self._scrape_advice(context, day, meal_type)
                )
            exercise = await self._scrape_exercise(context, day)
        return DayResult(day=day, items=items, nutrients=nutrients, exercise=exercise)

    async def _scrape_advice(
        self, context: "BrowserContext", day: date, meal_type: MealType
    ) -> NutrientRecord:
        try:
            return await self.advice_scraper.scrape(
                context, ScrapeTarget(day=day, meal_type=meal_type)
            )
        except Exception as exc:
            _logger.warning(
                "Failed to get advice for %s %s: %s",
                day.isoformat(),
                meal_type.value,
                exc,
            )
            return {}

    async def _scrape_exercise(
        self, context: "BrowserContext", day: date
    ) -> ExerciseData | None:
        if self.exercise_scraper is None:
            return None
        try:
            return await self.exercise_scraper.scrape(context, day)
        except Exception as exc:
            _logger.warning("Failed to get exercise for %s: %s", day.isoformat(), exc)
            return None
