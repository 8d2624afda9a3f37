"""Domain exceptions raised by the studio service layer."""


class StudioError(Exception):
    """Base class for recoverable, caller-facing studio errors."""
    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudioError):
    """A precondition was not met by the caller (e.g. no client selected)."""
    status_code = 422


class NotFoundError(StudioError):
    """The targeted proposal or client id does not exist."""
    status_code = 404


class InvalidTransitionError(StudioError):
    """The requested status change is not allowed (e.g. re-closing)."""
    status_code = 409
