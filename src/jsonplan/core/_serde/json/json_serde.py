"""Main API for JSON plan serialization/deserialization."""

from __future__ import annotations

import json
import logging
from functools import singledispatch
from typing import Any, Callable, Dict, Type, TypeVar

from jsonplan._constants import JSON_INDENT
from jsonplan.core._plan.expressions import Expression
from jsonplan.core._plan.references import ContextResolvedFunction, ContextResolvedTable
from jsonplan.core._plan.specs import ScanSpec, SinkSpec
from jsonplan.core._serde.json.errors import DeserializationError, SerializationError
from jsonplan.core._serde.json.reference_serde import deserialize_schema, serialize_schema
from jsonplan.core._serde.json.serde_context import SerdeContext
from jsonplan.core._serde.json.serde_scope import SerdeScope
from jsonplan.core._serde.json.spec_serde import (
    deserialize_scan_spec,
    deserialize_sink_spec,
    serialize_scan_spec,
    serialize_sink_spec,
)
from jsonplan.core.types.datatypes import DataType
from jsonplan.core.types.schema import Schema

logger = logging.getLogger(__name__)

T = TypeVar("T")

ROOT = "root"


@singledispatch
def _serialize_value(value: Any, scope: SerdeScope) -> Any:
    raise scope.create_serde_error(
        SerializationError,
        f"Serialization not implemented for {type(value)}",
        type(value),
    )


@_serialize_value.register
def _(value: DataType, scope: SerdeScope) -> Any:
    return scope.serialize_data_type(ROOT, value)


@_serialize_value.register
def _(value: Schema, scope: SerdeScope) -> Any:
    return serialize_schema(value, scope)


@_serialize_value.register
def _(value: ContextResolvedTable, scope: SerdeScope) -> Any:
    return scope.serialize_table(ROOT, value)


@_serialize_value.register
def _(value: ContextResolvedFunction, scope: SerdeScope) -> Any:
    return scope.serialize_function(value)


@_serialize_value.register
def _(value: Expression, scope: SerdeScope) -> Any:
    return scope.serialize_expr(ROOT, value)


@_serialize_value.register
def _(value: ScanSpec, scope: SerdeScope) -> Any:
    return serialize_scan_spec(value, scope)


@_serialize_value.register
def _(value: SinkSpec, scope: SerdeScope) -> Any:
    return serialize_sink_spec(value, scope)


# Keyed by the most general supported type; looked up along the MRO of the expected type.
_DESERIALIZERS: Dict[type, Callable[[Any, SerdeScope], Any]] = {
    DataType: lambda node, scope: scope.deserialize_data_type(ROOT, node),
    Schema: deserialize_schema,
    ContextResolvedTable: lambda node, scope: scope.deserialize_table(ROOT, node),
    ContextResolvedFunction: lambda node, scope: scope.deserialize_function(node),
    Expression: lambda node, scope: scope.deserialize_expr(ROOT, node),
    ScanSpec: deserialize_scan_spec,
    SinkSpec: deserialize_sink_spec,
}


class JsonSerde:
    """Serializes compiled plan values to JSON text and back.

    Every registry-backed reference in a value is resolved against the SerdeContext
    passed to each call. Nothing is cached between calls.
    """

    @classmethod
    def to_document(cls, context: SerdeContext, value: Any) -> Any:
        """Serialize a value to a JSON document (dicts, lists and scalars).

        Raises:
            SerializationError: If the value is not supported or a reference cannot
                be resolved against the context.
        """
        scope = SerdeScope(context)
        return _serialize_value(value, scope)

    @classmethod
    def serialize(cls, context: SerdeContext, value: Any) -> str:
        """Serialize a value to JSON text.

        Args:
            context: The context used to resolve references.
            value: The value to serialize.

        Returns:
            The JSON text.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        document = cls.to_document(context, value)
        try:
            text = json.dumps(
                document,
                indent=JSON_INDENT if context.config.pretty_print else None,
                ensure_ascii=False,
                allow_nan=False,
            )
        except ValueError as e:
            raise SerializationError(str(e), type(value)) from e
        logger.debug(f"Serialized {type(value).__name__} to {len(text)} characters of JSON")
        return text

    @classmethod
    def from_document(cls, context: SerdeContext, document: Any, expected_type: Type[T]) -> T:
        """Deserialize a parsed JSON document into a value of `expected_type`.

        Raises:
            DeserializationError: If `expected_type` is not supported, the document is
                not shaped for it, or a reference is absent from the context.
        """
        deserializer = cls._deserializer_for(expected_type)
        scope = SerdeScope(context)
        value = deserializer(document, scope)
        if not isinstance(value, expected_type):
            raise DeserializationError(
                f"Deserialized {type(value).__name__} is not a {expected_type.__name__}",
                expected_type,
            )
        return value

    @classmethod
    def deserialize(cls, context: SerdeContext, text: str, expected_type: Type[T]) -> T:
        """Deserialize JSON text into a value of `expected_type`.

        Args:
            context: The context used to resolve references.
            text: The JSON text.
            expected_type: The type of the value to reconstruct.

        Returns:
            The deserialized value.

        Raises:
            DeserializationError: If the text is not well-formed JSON, is not shaped
                for `expected_type`, or references symbols absent from the context.
        """
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise DeserializationError(
                f"Malformed JSON: {e.msg}",
                expected_type,
                f"line {e.lineno} column {e.colno}",
            ) from e
        logger.debug(f"Deserializing {expected_type.__name__} from {len(text)} characters of JSON")
        return cls.from_document(context, document, expected_type)

    @staticmethod
    def _deserializer_for(expected_type: type) -> Callable[[Any, SerdeScope], Any]:
        for base in getattr(expected_type, "__mro__", ()):
            if base in _DESERIALIZERS:
                return _DESERIALIZERS[base]
        raise DeserializationError(
            f"Deserialization not implemented for {expected_type}",
            expected_type if isinstance(expected_type, type) else None,
        )
