"""JSON serialization of compiled plan values."""

from jsonplan.core._serde.json.errors import (
    DeserializationError,
    SerdeError,
    SerializationError,
)
from jsonplan.core._serde.json.json_serde import JsonSerde
from jsonplan.core._serde.json.serde_context import (
    PlannerEnvironment,
    SerdeContext,
    create_serde_context,
)

__all__ = [
    "DeserializationError",
    "JsonSerde",
    "PlannerEnvironment",
    "SerdeContext",
    "SerdeError",
    "SerializationError",
    "create_serde_context",
]
