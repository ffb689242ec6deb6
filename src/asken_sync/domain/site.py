"""URL layout and page selectors of the asken web service."""

from dataclasses import dataclass
from datetime import date

from asken_sync.domain.models import MealType

# Positions in asken's per-day content list. Not derivable from the date.
ADVICE_SLOTS: dict[MealType, int] = {
    MealType.BREAKFAST: 3,
    MealType.LUNCH: 4,
    MealType.DINNER: 5,
}

# Overview blocks in scrape order. Both snack blocks merge into one meal type.
MEAL_BLOCKS: tuple[tuple[str, MealType], ...] = (
    ("karute_report_breakfast", MealType.BREAKFAST),
    ("karute_report_lunch", MealType.LUNCH),
    ("karute_report_dinner", MealType.DINNER),
    ("karute_report_sweets", MealType.SNACK),
    ("karute_report_snack", MealType.SNACK),
)

EMAIL_SELECTOR = (
    'input[name="login_id"], input[type="email"], #login_id, #email, '
    "#CustomerMemberEmail"
)
PASSWORD_SELECTOR = (
    'input[name="password"], input[type="password"], #password, '
    "#CustomerMemberPasswdPlain"
)
SUBMIT_SELECTOR = (
    'button[type="submit"], input[type="submit"], .btn-login, '
    '[data-testid="login-button"], #SubmitSubmit'
)


@dataclass(frozen=True)
class AskenSite:
    """Builds URLs for the pages the pipeline visits."""

    base_url: str = "https://www.asken.jp"

    @property
    def login_url(self) -> str:
        return f"{self.base_url}/login"

    def comment_url(self, day: date) -> str:
        """Per-date report page, also used as the session probe."""
        return f"{self.base_url}/wsp/comment/{day.isoformat()}"

    def advice_url(self, day: date, meal_type: MealType) -> str:
        slot = ADVICE_SLOTS.get(meal_type)
        if slot is None:
            raise ValueError(f"No advice page for {meal_type.value}")
        return f"{self.base_url}/wsp/advice/{day.isoformat()}/{slot}"

    def karute_report_url(self, day: date) -> str:
        return f"{self.base_url}/my_record/karute_report/{day.strftime('%Y%m%d')}"


def is_login_url(url: str) -> bool:
    """Return True when a navigation ended on the login page."""
    return "/login" in url
