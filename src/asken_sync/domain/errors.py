"""Error taxonomy for the scraping pipeline."""


class AskenSyncError(RuntimeError):
    """Base error for scraping pipeline failures."""


class AuthenticationFailed(AskenSyncError):
    """The login flow rejected the credentials or never left the login page."""


class SessionExpired(AskenSyncError):
    """A data page redirected to login while scraping."""


class SessionRecoveryFailed(AskenSyncError):
    """One re-login and one re-probe both failed."""


class CredentialsMissing(SessionRecoveryFailed):
    """Automated login is impossible because credentials are not configured."""

    def __init__(self) -> None:
        super().__init__(
            "ASKEN_EMAIL and ASKEN_PASSWORD are not set. "
            "Add them to .env or log in interactively with asken-sync-login."
        )


class NavigationTimeout(AskenSyncError):
    """A page did not respond within its navigation bound."""


class DateRunFailed(AskenSyncError):
    """A batch worker process failed to produce a day result."""


class UnconfirmedSessionError(ValueError):
    """Raised when persisting a session that was never confirmed valid."""
