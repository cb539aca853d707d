from enum import Enum
from typing import Any


class EventType(Enum):
    """GitHub event types the version check reacts to."""

    PULL_REQUEST = "pull_request"
    CHECK_SUITE = "check_suite"
    CHECK_RUN = "check_run"


class WebhookEvent:
    """
    A representation of an incoming webhook event, after the signature has been
    verified and the body decoded, but before it has been classified.
    """

    def __init__(self, event_name: str, payload: dict[str, Any]):
        self.event_name = event_name
        self.payload = payload
        self.repository = _as_dict(payload.get("repository"))
        self.installation_id = _as_dict(payload.get("installation")).get("id")

    @property
    def event_type(self) -> EventType | None:
        """The supported event type, or None for anything we do not handle."""
        try:
            return EventType(self.event_name)
        except ValueError:
            return None

    @property
    def action(self) -> str | None:
        action = self.payload.get("action")
        return action if isinstance(action, str) else None

    @property
    def repo_full_name(self) -> str:
        """The full name of the repository (e.g., 'owner/repo')."""
        full_name = self.repository.get("full_name")
        if isinstance(full_name, str) and full_name:
            return full_name
        # Older payloads only carry owner and name
        owner = self.repository.get("owner")
        login = owner.get("login") if isinstance(owner, dict) else owner
        name = self.repository.get("name")
        if isinstance(login, str) and isinstance(name, str) and login and name:
            return f"{login}/{name}"
        return ""


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
