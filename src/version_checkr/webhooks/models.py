"""
Webhook data model.

Three layers, from the wire inwards:

- ``WebhookEnvelope``: the raw delivery (body bytes and headers).
- Payload schemas: pydantic models covering only the fields the version check reads.
- ``ParsedEvent`` and ``RoutingDecision``: closed sets of immutable variants that
  the classifier works on.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from fastapi.datastructures import Headers
from pydantic import BaseModel, Field

# --- Delivery ---


@dataclass(frozen=True)
class WebhookEnvelope:
    """An inbound delivery exactly as received. Header lookups ignore case."""

    body: bytes
    headers: Headers = field(default_factory=Headers)

    @classmethod
    def from_raw(cls, body: bytes, headers: Mapping[str, str] | None) -> "WebhookEnvelope":
        return cls(body=body, headers=Headers(headers=dict(headers or {})))

    def header(self, name: str) -> str | None:
        return self.headers.get(name)


class DeliveryResponse(BaseModel):
    """Status code and plain-text body answered to GitHub."""

    status_code: int = Field(..., description="HTTP status code")
    body: str = Field(..., description="Plain-text response body")


# --- Payload schemas ---


class HeadRef(BaseModel):
    sha: str
    ref: str | None = None


class BaseRef(BaseModel):
    ref: str


class PullRequestPayload(BaseModel):
    """The ``pull_request`` object of a pull_request event."""

    number: int
    head: HeadRef
    base: BaseRef
    body: str | None = None


class LinkedPullRequestPayload(BaseModel):
    """Minimal pull request entry listed on check suites and check runs."""

    number: int
    base: BaseRef


class CheckSuitePayload(BaseModel):
    head_sha: str
    pull_requests: list[LinkedPullRequestPayload] | None = None


class CheckRunPayload(BaseModel):
    check_suite: CheckSuitePayload


class PullRequestWebhook(BaseModel):
    action: str
    pull_request: PullRequestPayload


class CheckSuiteWebhook(BaseModel):
    action: str
    check_suite: CheckSuitePayload


class CheckRunWebhook(BaseModel):
    action: str
    check_run: CheckRunPayload


# --- Parsed events ---


@dataclass(frozen=True)
class PullRequestLink:
    """A pull request a commit belongs to."""

    base_ref: str
    number: int


@dataclass(frozen=True)
class PullRequestEvent:
    action: str
    head_sha: str
    base_ref: str
    number: int
    body_text: str | None = None


@dataclass(frozen=True)
class CheckSuiteEvent:
    action: str
    head_sha: str
    pull_requests: tuple[PullRequestLink, ...] = ()


@dataclass(frozen=True)
class CheckRunEvent:
    action: str
    head_sha: str
    pull_requests: tuple[PullRequestLink, ...] = ()


@dataclass(frozen=True)
class OtherEvent:
    """Any event type or payload shape the version check does not handle."""


ParsedEvent = PullRequestEvent | CheckSuiteEvent | CheckRunEvent | OtherEvent


# --- Routing decisions ---


@dataclass(frozen=True)
class Process:
    """
    Check the version at ``head_sha``.

    ``base_ref`` is None when the commit is not part of any pull request.
    """

    head_sha: str
    base_ref: str | None = None
    number: int | None = None
    body_text: str | None = None

    @property
    def has_pull_request(self) -> bool:
        return self.base_ref is not None


@dataclass(frozen=True)
class NoAction:
    reason: str = ""


@dataclass(frozen=True)
class NoPullRequestContext:
    """Actionable commit that no open pull request points at."""

    head_sha: str


RoutingDecision = Process | NoAction | NoPullRequestContext
