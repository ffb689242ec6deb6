"""Domain models for authenticated browser sessions."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Credentials:
    """Account identifier and secret used for automated login."""

    email: str
    password: str


@dataclass(frozen=True)
class SessionState:
    """Opaque browser storage snapshot (cookies and per-origin storage).

    Only a confirmed state, one whose warm-up navigation stayed off the
    login page, may be persisted.
    """

    storage: dict[str, object]
    confirmed: bool = False

    def confirm(self) -> "SessionState":
        return replace(self, confirmed=True)
