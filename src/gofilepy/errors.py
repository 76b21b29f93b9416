"""Exception hierarchy for GofilePy."""

from __future__ import annotations

from typing import Any, Dict, Optional


class GofileError(RuntimeError):
    """Base exception for all Gofile client errors."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}


class FileOpenError(GofileError):
    """Raised when the file to upload is missing or unreadable."""


class NetworkError(GofileError):
    """Raised when the HTTP request fails before a response is received."""


class DecodeError(GofileError):
    """Raised when a response body is not the JSON document we expect."""


class ValidationError(GofileError):
    """Raised when arguments are rejected before any request is built."""


class TypeMismatchError(ValidationError):
    """Raised when an attribute value does not have the expected type."""

    def __init__(self, attribute: str, expected: str, value: Any):
        super().__init__(
            f"{attribute} must be {expected}, got {type(value).__name__}",
            context={"attribute": attribute, "expected": expected},
        )
        self.attribute = attribute
        self.expected = expected


class UnsupportedAttributeError(ValidationError):
    """Raised when an update names an attribute Gofile does not support."""

    def __init__(self, attribute: str):
        super().__init__(
            f"Unsupported attribute: {attribute}", context={"attribute": attribute}
        )
        self.attribute = attribute
