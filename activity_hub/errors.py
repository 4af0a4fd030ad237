"""Error kinds raised by the review workflow, portfolio and store layers.

Each error carries the HTTP status the API layer renders it with, so routers
never translate them by hand (see ``activity_error_handler`` in ``main.py``).
"""
from __future__ import annotations


class ActivityHubError(Exception):
    status_code: int = 400
    kind: str = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ActivityHubError):
    """Malformed or missing input: blank reason, non-positive points, unknown category."""

    status_code = 422
    kind = "validation_error"


class AuthorizationError(ActivityHubError):
    """Requester has no rights over the target activity."""

    status_code = 403
    kind = "authorization_error"


class InvalidStateError(ActivityHubError):
    """Transition attempted from a status that does not permit it."""

    status_code = 409
    kind = "invalid_state"


class ConflictError(ActivityHubError):
    """The activity changed underneath a guarded update; re-read and retry."""

    status_code = 409
    kind = "conflict"


class NotFound(ActivityHubError):
    status_code = 404
    kind = "not_found"
