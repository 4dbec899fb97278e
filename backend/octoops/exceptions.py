"""Application exceptions.

Services raise these; the API layer turns them into ``{"error": message}``
responses with the matching HTTP status.
"""

from typing import Optional


class OctoOpsError(Exception):
    """Base exception for domain errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidRequestError(OctoOpsError):
    """A required field is missing or malformed."""

    status_code = 400


class ConflictError(OctoOpsError):
    """The request collides with existing data (duplicate email, member, ...)."""

    status_code = 400


class InviteExpiredError(OctoOpsError):
    """The invite code exists but is past its expiry."""

    status_code = 400

    def __init__(self, message: str = "Invite code has expired"):
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    """A task status change is not allowed from the task's current status."""

    def __init__(self, action: str, current_status: str):
        self.action = action
        self.current_status = current_status
        super().__init__(f"Cannot {action} a task with status '{current_status}'")


class NotFoundError(OctoOpsError):
    """Referenced record does not exist."""

    status_code = 404


class InternalError(OctoOpsError):
    """Unexpected failure, typically from the store or driver.

    ``detail`` carries the underlying error text and is only exposed outside
    production.
    """

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(message)
