"""Data models for pubflow.

These Pydantic models represent the core data structures used throughout
the release pipeline.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PublishStatus(str, Enum):
    """Outcome of the publish step, as seen by later steps and signal handling."""

    UNKNOWN = "UNKNOWN"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class Availability(BaseModel):
    """Whether the package name is free on the index.

    Attributes:
        is_available: The name is unclaimed (a first release).
        is_unknown: The index could not be asked.
    """

    is_available: bool = False
    is_unknown: bool = True


class PushResult(BaseModel):
    """A push that partially succeeded.

    Attributes:
        pushed: What was pushed instead (e.g. "tags").
        reason: Human-readable explanation to show the user.
    """

    pushed: str
    reason: str


class StepOutcome(BaseModel):
    name: str
    status: StepStatus
    reason: str | None = None


class ReleaseContext(BaseModel):
    """State threaded through every step and returned by the pipeline run.

    Attributes:
        original_version: Package version before the pipeline started.
        new_version: Version the bump step writes.
        publish_status: Tri-state result of the publish step.
        otp: One-time password collected while publishing, if any.
        pushed: Soft push failure reported by the push step.
        outcomes: One entry per enabled step, in run order.
    """

    original_version: str
    new_version: str
    publish_status: PublishStatus = PublishStatus.UNKNOWN
    otp: str | None = None
    pushed: PushResult | None = None
    outcomes: list[StepOutcome] = Field(default_factory=list)

    def outcome(self, name: str) -> StepOutcome | None:
        """Return the recorded outcome for a step name, if it ran."""
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None


def _always(ctx: ReleaseContext) -> bool:
    return True


def _never(ctx: ReleaseContext) -> str | None:
    return None


class Step(BaseModel):
    """One named unit of work in the release pipeline.

    Attributes:
        name: Title shown in console output.
        action: Does the work; raising halts the pipeline.
        enabled: When False at run time the step is left out entirely.
        skip: Returns a reason to bypass the action, or None to run it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    action: Callable[[ReleaseContext], None]
    enabled: Callable[[ReleaseContext], bool] = _always
    skip: Callable[[ReleaseContext], str | None] = _never
