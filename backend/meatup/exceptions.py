"""Domain exceptions for the Meatup.Club backend.

Services raise these; ``main.py`` maps each one to its HTTP status and a
``{"error": message}`` body. Nothing below the router layer raises
framework exceptions.
"""
from typing import Any


class MeatupError(Exception):
    """Base exception for all Meatup.Club errors."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API error body."""
        return {"error": self.message}


class UnauthorizedError(MeatupError):
    """No verified identity on the request."""

    status_code = 401


class UnknownIdentityError(UnauthorizedError):
    """The verified email does not belong to a provisioned member."""


class ForbiddenError(MeatupError):
    """Identity is known but lacks the required status or role."""

    status_code = 403


class NotFoundError(MeatupError):
    """Referenced entity does not exist."""

    status_code = 404


class VoteNotFoundError(NotFoundError):
    pass


class ValidationError(MeatupError):
    """Missing or malformed input."""

    status_code = 400


class DuplicateSuggestionError(ValidationError):
    pass


class InvalidStatusError(ValidationError):
    pass


class NoUpcomingEventError(ValidationError):
    def __init__(self, message: str = "No upcoming event found. Please create an event first."):
        super().__init__(message)


class ConflictError(MeatupError):
    """A concurrent change made the request impossible to apply."""

    status_code = 409
