"""Protocol for serialization/deserialization of compiled plan values."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Type, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from jsonplan.core._serde.json.serde_context import SerdeContext

T = TypeVar("T")


@runtime_checkable
class SupportsJsonSerde(Protocol):
    """Protocol for context-aware plan serialization."""

    @staticmethod
    def serialize(context: SerdeContext, value: Any) -> str:
        """Serialize a plan value to text.

        Args:
            context: The context used to resolve types, functions and tables.
            value: The value to serialize.

        Returns:
            str: The serialized value
        """
        ...

    @staticmethod
    def deserialize(context: SerdeContext, text: str, expected_type: Type[T]) -> T:
        """Deserialize text back into a plan value.

        Args:
            context: The context used to re-bind symbolic references.
            text: The serialized value.
            expected_type: The type of the value to reconstruct.

        Returns:
            The deserialized value
        """
        ...
