"""Compiled plan serialization implementations."""

from jsonplan.core._serde.json import JsonSerde
from jsonplan.core._serde.serde import PlanJsonSerde
from jsonplan.core._serde.serde_protocol import SupportsJsonSerde

__all__ = ["JsonSerde", "PlanJsonSerde", "SupportsJsonSerde"]
