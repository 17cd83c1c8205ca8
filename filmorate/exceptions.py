"""
Domain exceptions raised by repositories, stores and services.

The HTTP layer maps these onto structured error responses; the CLI
prints them.
"""

from typing import Any


class FilmorateError(Exception):
    """Base class for all domain errors."""


class NotFoundError(FilmorateError):
    """A referenced entity or reference record does not exist."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} is not found")


class ValidationError(FilmorateError):
    """Input that reached the core violates a domain rule."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
