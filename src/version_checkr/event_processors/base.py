from enum import Enum

from pydantic import BaseModel


class ProcessingState(str, Enum):
    """
    Processing state for event processing results.

    - PASS: the head version satisfies the policy, or the check was skipped
    - FAIL: the head version does not satisfy the policy
    - NEUTRAL: nothing to compare, the commit is not part of a pull request
    """

    PASS = "pass"
    FAIL = "fail"
    NEUTRAL = "neutral"


class ProcessingResult(BaseModel):
    """Result of event processing."""

    state: ProcessingState
    summary: str
    check_run_id: int | None = None
    processing_time_ms: int

    @property
    def success(self) -> bool:
        return self.state == ProcessingState.PASS
