from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors; ``status_code`` is the HTTP-equivalent classification."""

    status_code = 500


class UnauthorizedError(DomainError):
    """Credential missing, invalid, expired, or bound to an inactive user."""

    status_code = 401


class InvalidCredentialError(UnauthorizedError):
    """Session token failed signature, expiry or kind checks."""


class IdentityTokenValidationError(UnauthorizedError):
    """Identity provider token could not be verified."""


class NotFoundError(DomainError):
    """Resource absent or not reachable from the caller."""

    status_code = 404


class UserNotFoundError(NotFoundError):
    """No active user with the given id."""


class VehicleNotFoundError(NotFoundError):
    """Vehicle absent or owned by someone else."""


class MileageNotFoundError(NotFoundError):
    """Mileage entry absent under the given vehicle."""


class SpendingNotFoundError(NotFoundError):
    """Spending entry absent under the given vehicle."""


class UserAlreadyExistsError(DomainError):
    """An active user already holds this provider identity."""

    status_code = 409


class ValidationFailedError(DomainError):
    """Malformed create/update input."""

    status_code = 400

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__("Validation failed.")
        self.errors = errors
