"""
Domain errors raised by the driver entities and the driver service.

The HTTP layer maps them onto status codes: ValidationError -> 400,
NotFoundError -> 404, ConflictError -> 409.
"""
from __future__ import annotations


class DomainError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    pass


class InvalidDataError(ValidationError):
    def __init__(self, message: str):
        super().__init__(f"Invalid driver data: {message}")


class InvalidHoursOfServiceError(ValidationError):
    def __init__(self, message: str):
        super().__init__(f"Invalid hours of service: {message}")


class InvalidEndorsementTypeError(ValidationError):
    def __init__(self, type_: str):
        self.type = type_
        super().__init__(f"Invalid endorsement type: {type_}")


class InvalidDocumentTypeError(ValidationError):
    def __init__(self, type_: str):
        self.type = type_
        super().__init__(f"Invalid document type: {type_}")


class InvalidUploadError(ValidationError):
    pass


class NotFoundError(DomainError):
    pass


class ConflictError(DomainError):
    pass


class DriverUnavailableError(ConflictError):
    pass


class InvalidStateError(ConflictError):
    pass
