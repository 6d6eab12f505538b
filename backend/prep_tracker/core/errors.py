"""Named error conditions raised by services and translated at the HTTP boundary."""
from __future__ import annotations

from fastapi import status


class PrepTrackerError(Exception):
    """Base exception for tracker errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidDateError(PrepTrackerError):
    """Raised when a date input cannot be resolved to a calendar date."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_date"

    def __init__(self, raw_value: str | None):
        self.raw_value = raw_value
        shown = (raw_value or "").strip()
        super().__init__(
            f"I couldn't understand '{shown}'. Try a date like 2025-03-10 or 2025-03-10T09:30:00."
        )


class UnknownRoleTypeError(PrepTrackerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "unknown_role_type"

    def __init__(self, role_type: str):
        self.role_type = role_type
        super().__init__(f"Unknown role type '{role_type}'")


class MissingSprintDetailsError(PrepTrackerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "missing_sprint_details"

    def __init__(self) -> None:
        super().__init__("An interview date and a role type are needed to build a sprint.")


class PastInterviewDateError(PrepTrackerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "past_interview_date"

    def __init__(self, interview_date):
        self.interview_date = interview_date
        super().__init__(
            f"The interview date {interview_date.isoformat()} is today or already past. "
            "Set confirm_past_date to build a one-day sprint anyway."
        )


class InvalidStatusError(PrepTrackerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_status"


class TaskNotFoundError(PrepTrackerError):
    """Raised when a day/block/task index does not exist in the sprint's current shape."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "task_not_found"

    def __init__(self, day_index: int, block_index: int, task_index: int):
        self.day_index = day_index
        self.block_index = block_index
        self.task_index = task_index
        super().__init__(
            f"No task at day {day_index}, block {block_index}, task {task_index} in this sprint"
        )


class NotFoundError(PrepTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ApplicationNotFoundError(NotFoundError):
    code = "application_not_found"

    def __init__(self, detail: str = "Application not found"):
        super().__init__(detail)


class SprintNotFoundError(NotFoundError):
    code = "sprint_not_found"

    def __init__(self, detail: str = "Sprint not found"):
        super().__init__(detail)


class NoActiveSprintsError(NotFoundError):
    code = "no_active_sprints"

    def __init__(self) -> None:
        super().__init__(
            "No active sprints. Create an interview sprint first, for example by moving an "
            "application to interview with a date and role."
        )


class UserNotFoundError(NotFoundError):
    code = "user_not_found"

    def __init__(self) -> None:
        super().__init__("User not found")


class ProposalNotFoundError(NotFoundError):
    code = "proposal_not_found"

    def __init__(self) -> None:
        super().__init__("Regeneration proposal not found")


class ConflictError(PrepTrackerError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class SprintConflictError(ConflictError):
    code = "sprint_conflict"

    def __init__(self, detail: str = "Sprint was updated elsewhere. Refresh and retry."):
        super().__init__(detail)


class DuplicateRoundError(ConflictError):
    code = "duplicate_round"

    def __init__(self, round_number: int):
        self.round_number = round_number
        super().__init__(f"Round number {round_number} already exists for this application.")


class ProposalResolvedError(ConflictError):
    code = "proposal_resolved"


class ReconciliationError(PrepTrackerError):
    """Raised when none of a reconciliation's writes could be persisted."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "reconciliation_failed"
