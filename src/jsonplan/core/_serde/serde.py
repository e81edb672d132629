"""Plan value serialization with a pluggable backend."""
from __future__ import annotations

from typing import Any, ClassVar, Optional, Type, TypeVar

from jsonplan.core._serde.json import JsonSerde, SerdeContext, create_serde_context
from jsonplan.core._serde.serde_protocol import SupportsJsonSerde

T = TypeVar("T")

_default_serde_type = JsonSerde


class PlanJsonSerde:
    """Facade for plan serialization that builds a default context when none is given."""

    _serde: ClassVar[SupportsJsonSerde] = _default_serde_type

    @classmethod
    def serialize(cls, value: Any, context: Optional[SerdeContext] = None) -> str:
        """Serialize a plan value to JSON text."""
        return cls._serde.serialize(context or create_serde_context(), value)

    @classmethod
    def deserialize(
        cls,
        text: str,
        expected_type: Type[T],
        context: Optional[SerdeContext] = None,
    ) -> T:
        """Deserialize JSON text into a plan value."""
        return cls._serde.deserialize(context or create_serde_context(), text, expected_type)
