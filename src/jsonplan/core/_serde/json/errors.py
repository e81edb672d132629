"""Errors for the JSON serde module."""

from __future__ import annotations

from typing import Optional, Type


class SerdeError(Exception):
    """Base exception for serialization/deserialization errors.

    All serde-specific exceptions inherit from this class. Provides
    consistent error handling with optional path and type information.
    """

    def __init__(
        self,
        message: str,
        object_type: Optional[Type] = None,
        field_path: Optional[str] = None,
    ):
        """Initialize a serde error.

        Args:
            message: The error message.
            object_type: Optional type information for the error.
            field_path: Optional field path where the error occurred.
        """
        self.message = message
        self.object_type = object_type
        self.field_path = field_path
        if object_type and field_path:
            super().__init__(f"{message} at {field_path} in {object_type.__name__}")
        elif field_path:
            super().__init__(f"{message} at {field_path}")
        else:
            super().__init__(message)


class SerializationError(SerdeError):
    """Errors during serialization to JSON.

    `reference` names the symbolic reference that could not be resolved, if any.
    """

    def __init__(
        self,
        message: str,
        object_type: Optional[Type] = None,
        field_path: Optional[str] = None,
        reference: Optional[str] = None,
    ):
        self.reference = reference
        super().__init__(message, object_type, field_path)


class DeserializationError(SerdeError):
    """Errors during deserialization from JSON.

    `object_type` is the type that was expected at `field_path`; for malformed
    documents `field_path` holds the line and column of the parse failure.
    """

    pass
