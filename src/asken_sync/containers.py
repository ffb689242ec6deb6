"""Dependency container wiring for the application."""

from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from asken_sync.adapters.file_session_store import FileSessionStore
from asken_sync.adapters.playwright_browser import PlaywrightLauncher
from asken_sync.adapters.subprocess_runner import SubprocessDateRunner
from asken_sync.adapters.supabase_daily_data_repository import (
    SupabaseDailyDataRepository,
)
from asken_sync.adapters.supabase_sync_log_repository import (
    SupabaseSyncLogRepository,
)
from asken_sync.config import Settings
from asken_sync.domain.sessions import Credentials
from asken_sync.domain.site import AskenSite
from asken_sync.services.advice import AdviceScraper
from asken_sync.services.batch import BatchService
from asken_sync.services.day_overview import DayOverviewScraper
from asken_sync.services.exercise import ExerciseScraper
from asken_sync.services.navigation import DiagnosticsWriter
from asken_sync.services.orchestrator import ScrapeOrchestrator
from asken_sync.services.sessions import SessionManager
from asken_sync.services.sinks import DayResultSink, FileDayResultSink
from asken_sync.services.sync_log import InMemorySyncLog, SyncLogRepository


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_manager: SessionManager
    orchestrator: ScrapeOrchestrator
    file_sink: FileDayResultSink
    day_sink: DayResultSink
    sync_log: SyncLogRepository
    batch_service: BatchService


def credentials_from(settings: Settings) -> Credentials | None:
    """Return login credentials when both are configured."""
    if settings.asken_email and settings.asken_password:
        return Credentials(email=settings.asken_email, password=settings.asken_password)
    return None


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    site = AskenSite(base_url=resolved_settings.base_url)
    launcher = PlaywrightLauncher(
        headless=resolved_settings.headless,
        navigation_timeout_ms=resolved_settings.navigation_timeout_ms,
    )
    session_manager = SessionManager(
        store=FileSessionStore(resolved_settings.state_path),
        launcher=launcher,
        site=site,
        credentials=credentials_from(resolved_settings),
        max_age=timedelta(hours=resolved_settings.session_max_age_hours),
        navigation_timeout_ms=resolved_settings.navigation_timeout_ms,
        login_timeout_ms=resolved_settings.login_timeout_ms,
    )
    orchestrator = ScrapeOrchestrator(
        session_manager=session_manager,
        launcher=launcher,
        overview_scraper=DayOverviewScraper(
            site=site,
            diagnostics=DiagnosticsWriter(
                screenshot_path=resolved_settings.error_screenshot_path,
                html_path=resolved_settings.error_html_path,
            ),
            navigation_timeout_ms=resolved_settings.navigation_timeout_ms,
            render_timeout_ms=resolved_settings.render_timeout_ms,
        ),
        advice_scraper=AdviceScraper(
            site=site,
            navigation_timeout_ms=resolved_settings.navigation_timeout_ms,
            render_timeout_ms=resolved_settings.render_timeout_ms,
        ),
        exercise_scraper=(
            ExerciseScraper(
                site=site,
                navigation_timeout_ms=resolved_settings.navigation_timeout_ms,
                render_timeout_ms=resolved_settings.render_timeout_ms,
            )
            if resolved_settings.scrape_exercise
            else None
        ),
    )
    file_sink = FileDayResultSink(resolved_settings.output_path)

    day_sink: DayResultSink = file_sink
    sync_log: SyncLogRepository = InMemorySyncLog()
    if resolved_settings.supabase_enabled:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        day_sink = SupabaseDailyDataRepository(supabase_client)
        sync_log = SupabaseSyncLogRepository(supabase_client)

    batch_service = BatchService(
        runner=SubprocessDateRunner(
            timeout_seconds=resolved_settings.batch_process_timeout_seconds
        ),
        sink=day_sink,
        sync_log=sync_log,
        width=resolved_settings.batch_width,
    )

    return AppContainer(
        settings=resolved_settings,
        session_manager=session_manager,
        orchestrator=orchestrator,
        file_sink=file_sink,
        day_sink=day_sink,
        sync_log=sync_log,
        batch_service=batch_service,
    )
