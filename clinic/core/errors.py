"""Error taxonomy for the clinic service.

Every error is an ``HTTPException`` so FastAPI can surface it directly. The
``reason`` attribute is the machine-readable tag returned to clients next to
the human-readable ``detail``.
"""
from typing import Optional

from fastapi import HTTPException, status


class ClinicError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    reason: str = "ClinicError"
    default_detail: str = "Request could not be processed"
    headers: Optional[dict] = None

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=self.headers,
        )


# Authentication
class AuthError(ClinicError):
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "AuthError"
    default_detail = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class TokenExpired(AuthError):
    reason = "Expired"
    default_detail = "Token expired"


class TokenMalformed(AuthError):
    reason = "Malformed"
    default_detail = "Invalid or malformed token"


class RoleMismatch(AuthError):
    reason = "RoleMismatch"
    default_detail = "Token role does not match the required role"


class UnknownSubject(AuthError):
    reason = "UnknownSubject"
    default_detail = "User associated with token does not exist"


class InvalidCredentials(AuthError):
    reason = "InvalidCredentials"
    default_detail = "Invalid credentials"


# Validation
class ValidationFailure(ClinicError):
    reason = "ValidationFailure"


class DoctorNotFound(ValidationFailure):
    reason = "DoctorNotFound"
    default_detail = "Doctor not found"


class PatientNotFound(ValidationFailure):
    reason = "PatientNotFound"
    default_detail = "Patient not found"


class SlotTaken(ValidationFailure):
    status_code = status.HTTP_409_CONFLICT
    reason = "SlotTaken"
    default_detail = "Time slot already booked for this doctor"


class InvalidSlot(ValidationFailure):
    reason = "InvalidSlot"
    default_detail = "Appointment time is not a bookable slot"


class InvalidTransition(ValidationFailure):
    status_code = status.HTTP_409_CONFLICT
    reason = "InvalidTransition"
    default_detail = "Appointment can no longer be changed"


class InvalidFilter(ValidationFailure):
    reason = "InvalidFilter"
    default_detail = "Invalid filter value"


class AppointmentNotFound(ValidationFailure):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "AppointmentNotFound"
    default_detail = "Appointment not found"


class RecordNotFound(ValidationFailure):
    status_code = status.HTTP_404_NOT_FOUND
    reason = "RecordNotFound"
    default_detail = "Record not found"


class DuplicateRecord(ValidationFailure):
    status_code = status.HTTP_409_CONFLICT
    reason = "DuplicateRecord"
    default_detail = "Record already exists"


# Authorization
class AuthorizationError(ClinicError):
    status_code = status.HTTP_403_FORBIDDEN
    reason = "Forbidden"
    default_detail = "Not enough permissions"


class Forbidden(AuthorizationError):
    pass


# Internal
class InternalError(ClinicError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason = "InternalError"
    default_detail = "An unexpected error occurred"


class StorageFailure(InternalError):
    reason = "StorageFailure"
