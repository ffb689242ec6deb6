"""Shared test fixtures."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from asken_sync.adapters.file_session_store import FileSessionStore
from asken_sync.config import Settings
from asken_sync.containers import AppContainer
from asken_sync.domain.batch import SyncLogEntry
from asken_sync.domain.models import DayResult, MealType, ScrapeTarget
from asken_sync.domain.sessions import Credentials, SessionState
from asken_sync.domain.site import AskenSite
from asken_sync.services.advice import AdviceScraper
from asken_sync.services.batch import BatchService, DateRunner
from asken_sync.services.day_overview import DayOverviewScraper
from asken_sync.services.exercise import ExerciseScraper
from asken_sync.services.navigation import DiagnosticsWriter
from asken_sync.services.orchestrator import ScrapeOrchestrator
from asken_sync.services.sessions import BrowserLauncher, SessionManager
from asken_sync.services.sinks import DayResultSink, FileDayResultSink
from asken_sync.services.sync_log import SyncLogRepository

BASE_URL = "https://asken.test"
EMAIL = "user@example.com"
PASSWORD = "secret"
TARGET_DAY = date(2026, 2, 13)

OVERVIEW_HTML = """
<html><body>
<div id="karute_report_breakfast">
  <table>
    <tr><th>食品</th><th>量</th><th>カロリー</th></tr>
    <tr><td>パン</td><td>2枚</td><td>300 kcal</td></tr>
  </table>
</div>
</body></html>
"""

BREAKFAST_ADVICE_HTML = """
<html><body>
<table><tr><td>エネルギー 300kcal たんぱく質 10g</td></tr></table>
</body></html>
"""


@dataclass
class FakeSite:
    """Scripted stand-in for the asken web service.

    Pages needing a session redirect to login unless the context's session
    token is currently accepted.
    """

    site: AskenSite = field(default_factory=lambda: AskenSite(base_url=BASE_URL))
    credentials: Credentials = field(
        default_factory=lambda: Credentials(email=EMAIL, password=PASSWORD)
    )
    pages: dict[str, str] = field(default_factory=dict)
    accepted_tokens: set[str] = field(default_factory=set)
    reject_new_sessions: bool = False
    timeouts: set[str] = field(default_factory=set)
    broken: set[str] = field(default_factory=set)
    logins: int = 0
    navigations: list[str] = field(default_factory=list)
    waited_selectors: list[str] = field(default_factory=list)
    opened_contexts: list[str | None] = field(default_factory=list)

    def issue_token(self) -> str:
        self.logins += 1
        token = f"token-{self.logins}"
        if not self.reject_new_sessions:
            self.accepted_tokens.add(token)
        return token


def storage_for(token: str | None) -> dict[str, object]:
    cookies = [] if token is None else [{"name": "session", "value": token}]
    return {"cookies": cookies, "origins": []}


@dataclass
class FakePage:
    """Implements the subset of the Playwright page API the scrapers use."""

    fake_site: FakeSite
    context: "FakeContext"
    url: str = "about:blank"
    fields: dict[str, str] = field(default_factory=dict)
    closed: bool = False

    async def goto(
        self, url: str, wait_until: str | None = None, timeout: int | None = None
    ) -> None:
        self.fake_site.navigations.append(url)
        if url in self.fake_site.timeouts:
            raise PlaywrightTimeoutError(f"Timeout exceeded navigating to {url}")
        if url in self.fake_site.broken:
            raise PlaywrightError(f"net::ERR_CONNECTION_RESET at {url}")
        if url == self.fake_site.site.login_url:
            self.url = url
        elif self.context.token in self.fake_site.accepted_tokens:
            self.url = url
        else:
            self.url = f"{self.fake_site.site.login_url}?next={url}"

    async def fill(self, selector: str, value: str) -> None:
        key = "email" if "email" in selector.lower() else "password"
        self.fields[key] = value

    async def click(self, selector: str) -> None:
        expected = self.fake_site.credentials
        if (
            self.fields.get("email") == expected.email
            and self.fields.get("password") == expected.password
        ):
            self.context.token = self.fake_site.issue_token()
            self.url = f"{self.fake_site.site.base_url}/mypage"

    async def wait_for_url(self, predicate, timeout: int | None = None) -> None:  # type: ignore[no-untyped-def]
        if not predicate(self.url):
            raise PlaywrightTimeoutError("Timeout waiting for navigation")

    async def wait_for_selector(
        self, selector: str, timeout: int | None = None
    ) -> None:
        self.fake_site.waited_selectors.append(selector)
        html = await self.content()
        for part in selector.split(","):
            candidate = part.strip()
            if candidate.startswith("text=") and candidate[5:] in html:
                return
            if candidate.startswith("#") and f'id="{candidate[1:]}"' in html:
                return
            if candidate == "table" and "<table" in html:
                return
        raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    async def content(self) -> str:
        return self.fake_site.pages.get(self.url, "<html><body></body></html>")

    async def screenshot(self, path: str, full_page: bool = False) -> None:
        Path(path).write_bytes(b"fake-png")

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeContext:
    fake_site: FakeSite
    token: str | None = None
    pages: list[FakePage] = field(default_factory=list)

    async def new_page(self) -> FakePage:
        page = FakePage(fake_site=self.fake_site, context=self)
        self.pages.append(page)
        return page

    async def storage_state(self) -> dict[str, object]:
        return storage_for(self.token)


@dataclass
class FakeLauncher(BrowserLauncher):
    """Yields fake contexts seeded from a session's cookie."""

    fake_site: FakeSite

    @asynccontextmanager
    async def open_context(
        self, state: SessionState | None = None
    ) -> AsyncIterator[FakeContext]:
        token = None
        if state is not None:
            cookies = state.storage.get("cookies") or []
            token = cookies[0]["value"] if cookies else None
        self.fake_site.opened_contexts.append(token)
        yield FakeContext(fake_site=self.fake_site, token=token)


@dataclass
class CountingSessionManager(SessionManager):
    """Session manager recording each lifecycle step.

    ``scripted_probes`` overrides probe outcomes in order when non-empty.
    """

    calls: list[str] = field(default_factory=list)
    scripted_probes: list[bool] = field(default_factory=list)

    def is_likely_fresh(self) -> bool:
        self.calls.append("fresh")
        return super().is_likely_fresh()

    async def login(
        self, credentials: Credentials | None = None, warmup_day: date | None = None
    ) -> SessionState:
        self.calls.append("login")
        return await super().login(credentials, warmup_day)

    async def probe(self, state: SessionState, target: ScrapeTarget) -> bool:
        self.calls.append("probe")
        if self.scripted_probes:
            return self.scripted_probes.pop(0)
        return await super().probe(state, target)


@dataclass
class InMemoryDaySink(DayResultSink):
    """Collects saved results keyed by date."""

    results: dict[date, DayResult] = field(default_factory=dict)

    def save(self, result: DayResult) -> None:
        self.results[result.day] = result


@dataclass
class InMemorySyncLogRepository(SyncLogRepository):
    entries: list[SyncLogEntry] = field(default_factory=list)

    def record(self, entry: SyncLogEntry) -> None:
        self.entries.append(entry)

    def latest(self) -> SyncLogEntry | None:
        return self.entries[-1] if self.entries else None


@dataclass
class FakeDateRunner(DateRunner):
    """Returns canned results; dates in ``failing`` raise ``error``."""

    failing: set[date] = field(default_factory=set)
    error: Exception = field(default_factory=lambda: RuntimeError("boom"))
    delay_seconds: float = 0.01
    active: int = 0
    max_active: int = 0
    started: list[date] = field(default_factory=list)

    async def run(self, day: date) -> DayResult:
        self.started.append(day)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay_seconds)
            if day in self.failing:
                raise self.error
            return DayResult(day=day, nutrients={MealType.BREAKFAST: {}})
        finally:
            self.active -= 1


def save_session(store: FileSessionStore, token: str) -> None:
    store.save(SessionState(storage=storage_for(token)).confirm())


@pytest.fixture
def fake_site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def session_store(tmp_path: Path) -> FileSessionStore:
    return FileSessionStore(tmp_path / "asken-state.json")


@pytest.fixture
def session_manager(
    fake_site: FakeSite, session_store: FileSessionStore
) -> CountingSessionManager:
    return CountingSessionManager(
        store=session_store,
        launcher=FakeLauncher(fake_site),
        site=fake_site.site,
        credentials=fake_site.credentials,
        max_age=timedelta(hours=24),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        asken_email=EMAIL,
        asken_password=PASSWORD,
        base_url=BASE_URL,
        secrets_dir=tmp_path,
        supabase_url=None,
        supabase_service_key=None,
        sync_secret="sync-secret",
    )


@pytest.fixture
def orchestrator(
    fake_site: FakeSite,
    session_manager: CountingSessionManager,
    settings: Settings,
) -> ScrapeOrchestrator:
    return ScrapeOrchestrator(
        session_manager=session_manager,
        launcher=FakeLauncher(fake_site),
        overview_scraper=DayOverviewScraper(
            site=fake_site.site,
            diagnostics=DiagnosticsWriter(
                screenshot_path=settings.error_screenshot_path,
                html_path=settings.error_html_path,
            ),
        ),
        advice_scraper=AdviceScraper(site=fake_site.site),
        exercise_scraper=ExerciseScraper(site=fake_site.site),
    )


@pytest.fixture
def date_runner() -> FakeDateRunner:
    return FakeDateRunner()


@pytest.fixture
def container(
    settings: Settings,
    session_manager: CountingSessionManager,
    orchestrator: ScrapeOrchestrator,
    date_runner: FakeDateRunner,
) -> AppContainer:
    sink = InMemoryDaySink()
    sync_log = InMemorySyncLogRepository()
    return AppContainer(
        settings=settings,
        session_manager=session_manager,
        orchestrator=orchestrator,
        file_sink=FileDayResultSink(settings.output_path),
        day_sink=sink,
        sync_log=sync_log,
        batch_service=BatchService(
            runner=date_runner, sink=sink, sync_log=sync_log, width=2
        ),
    )
