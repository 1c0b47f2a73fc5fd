"""Exceptions raised by the entity services."""
from __future__ import annotations


class ServiceError(Exception):
    def __init__(self, message: str, code: str = "invalid", status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ValidationError(ServiceError):
    """Raised when input data is rejected before any write."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code, 400)


class SnapshotFormatError(ServiceError):
    """Raised when an import snapshot is missing or mistypes a collection."""

    def __init__(self, message: str):
        super().__init__(message, "invalid_snapshot", 400)
