"""Typed failures raised by the services and rendered by the API layer."""

from __future__ import annotations

from typing import Any


class FreightError(Exception):
    """Base class for every failure the API knows how to render."""

    status_code = 500
    code = "SERVER_FAULT"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(FreightError):
    status_code = 422
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFound(FreightError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class Conflict(FreightError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Conflict"


class DuplicateEmail(Conflict):
    code = "DUPLICATE_EMAIL"
    default_message = "A user with this email already exists"


class DuplicatePlate(Conflict):
    code = "DUPLICATE_PLATE"
    default_message = "An active vehicle with this plate already exists"


class VehicleInUse(Conflict):
    code = "VEHICLE_IN_USE"
    default_message = "Vehicle is bound to a reserved freight job"


class JobInUse(Conflict):
    code = "JOB_IN_USE"
    default_message = "Freight job is reserved and cannot be deleted"


class UserInUse(Conflict):
    code = "USER_IN_USE"
    default_message = "User still has vehicles or freight jobs"


class NotAvailable(Conflict):
    code = "NOT_AVAILABLE"
    default_message = "Freight job is not available"


class NotReserved(Conflict):
    code = "NOT_RESERVED"
    default_message = "Freight job is not reserved"


class NoCompatibleVehicle(Conflict):
    code = "NO_COMPATIBLE_VEHICLE"
    default_message = "You have no vehicle of the required type"


class Forbidden(FreightError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotOwner(Forbidden):
    code = "NOT_OWNER"
    default_message = "Not your vehicle"


class Unauthorized(FreightError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Not authenticated"


class InvalidToken(Unauthorized):
    code = "INVALID_TOKEN"
    default_message = "Invalid token"


class InvalidCredentials(Unauthorized):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class ServerFault(FreightError):
    pass
