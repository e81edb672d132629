"""Expression serialization/deserialization using singledispatch.

Every expression is a JSON object tagged by `kind`:

    {"kind": "LITERAL", "value": 42, "type": "INTEGER"}
    {"kind": "INPUT_REF", "index": 0, "type": "STRING"}
    {"kind": "CALL", "system_name": "UPPER", "operands": [...], "type": "STRING"}

A NULL literal omits `value`.
"""

from __future__ import annotations

import math
from functools import singledispatch
from typing import Any, Callable, Dict

from jsonplan.core._plan.expressions import (
    CallExpr,
    Expression,
    InputRefExpr,
    LiteralExpr,
)
from jsonplan.core._serde.json.errors import DeserializationError, SerializationError
from jsonplan.core._serde.json.serde_scope import SerdeScope
from jsonplan.core.types.datatypes import (
    ArrayType,
    BooleanType,
    DataType,
    DoubleType,
    EmbeddingType,
    FloatType,
    IntegerType,
    JsonType,
    StringType,
    StructType,
    UserDefinedType,
)

LITERAL = "LITERAL"
INPUT_REF = "INPUT_REF"
CALL = "CALL"
_INDEX_KEY = "index"


# =============================================================================
# Top-level functions
# =============================================================================


@singledispatch
def serialize_expr(expr: Expression, scope: SerdeScope) -> Dict[str, Any]:
    """Serialize an expression to a JSON object.

    Raises:
        SerializationError: If the expression type is not registered or
            serialization fails.
    """
    raise scope.create_serde_error(
        SerializationError,
        f"Serialization not implemented for Expression: {type(expr)}",
        type(expr),
    )


def deserialize_expr(node: Any, scope: SerdeScope) -> Expression:
    """Deserialize an expression, dispatching on its `kind` tag.

    Raises:
        DeserializationError: If the kind is unknown or the node is malformed.
    """
    kind = scope.read_field(node, scope.KIND, str, Expression)
    deserializer = _DESERIALIZERS.get(kind)
    if deserializer is None:
        with scope.path_context(scope.KIND):
            raise scope.create_serde_error(
                DeserializationError,
                f"Unknown expression kind '{kind}', expected one of {sorted(_DESERIALIZERS)}",
                Expression,
            )
    return deserializer(node, scope)


# =============================================================================
# LiteralExpr
# =============================================================================


@serialize_expr.register
def _serialize_literal(expr: LiteralExpr, scope: SerdeScope) -> Dict[str, Any]:
    node: Dict[str, Any] = {scope.KIND: LITERAL}
    if expr.value is not None:
        with scope.path_context(scope.VALUE):
            node[scope.VALUE] = _serialize_literal_value(expr.value, expr.literal_type, scope)
    node[scope.TYPE] = scope.serialize_data_type(scope.TYPE, expr.literal_type)
    return node


def _deserialize_literal(node: Dict[str, Any], scope: SerdeScope) -> LiteralExpr:
    literal_type = scope.deserialize_data_type(
        scope.TYPE, scope.read_field(node, scope.TYPE, str, LiteralExpr)
    )
    value = node.get(scope.VALUE)
    if value is not None:
        with scope.path_context(scope.VALUE):
            value = _deserialize_literal_value(value, literal_type, scope)
    return LiteralExpr(value=value, literal_type=literal_type)


def _serialize_literal_value(value: Any, data_type: DataType, scope: SerdeScope) -> Any:
    if value is None:
        return None
    if isinstance(data_type, UserDefinedType):
        return _serialize_literal_value(value, type(data_type).storage_type, scope)
    if data_type == BooleanType and isinstance(value, bool):
        return value
    if data_type == IntegerType and isinstance(value, int) and not isinstance(value, bool):
        return value
    if data_type in (FloatType, DoubleType) and isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise scope.create_serde_error(
                SerializationError, f"Non-finite number {value} cannot be written to JSON", LiteralExpr
            )
        return value
    if data_type in (StringType, JsonType) and isinstance(value, str):
        return value
    if isinstance(data_type, (ArrayType, EmbeddingType)) and isinstance(value, (list, tuple)):
        element_type = data_type.element_type if isinstance(data_type, ArrayType) else FloatType
        if isinstance(data_type, EmbeddingType) and len(value) != data_type.dimensions:
            raise scope.create_serde_error(
                SerializationError,
                f"Embedding literal has {len(value)} values, expected {data_type.dimensions}",
                LiteralExpr,
            )
        result = []
        for i, element in enumerate(value):
            with scope.path_context(f"[{i}]"):
                result.append(_serialize_literal_value(element, element_type, scope))
        return result
    if isinstance(data_type, StructType) and isinstance(value, dict) and _has_struct_fields(value, data_type):
        result = {}
        for field in data_type.struct_fields:
            with scope.path_context(field.name):
                result[field.name] = _serialize_literal_value(value.get(field.name), field.data_type, scope)
        return result
    raise scope.create_serde_error(
        SerializationError,
        f"Literal value {value!r} does not match its type {data_type}",
        LiteralExpr,
    )


def _deserialize_literal_value(node: Any, data_type: DataType, scope: SerdeScope) -> Any:
    if node is None:
        return None
    if isinstance(data_type, UserDefinedType):
        return _deserialize_literal_value(node, type(data_type).storage_type, scope)
    if data_type == BooleanType and isinstance(node, bool):
        return node
    if data_type == IntegerType and isinstance(node, int) and not isinstance(node, bool):
        return node
    if data_type in (FloatType, DoubleType) and isinstance(node, (int, float)) and not isinstance(node, bool):
        return float(node)
    if data_type in (StringType, JsonType) and isinstance(node, str):
        return node
    if isinstance(data_type, (ArrayType, EmbeddingType)) and isinstance(node, list):
        element_type = data_type.element_type if isinstance(data_type, ArrayType) else FloatType
        if isinstance(data_type, EmbeddingType) and len(node) != data_type.dimensions:
            raise scope.create_serde_error(
                DeserializationError,
                f"Embedding literal has {len(node)} values, expected {data_type.dimensions}",
                LiteralExpr,
            )
        result = []
        for i, element in enumerate(node):
            with scope.path_context(f"[{i}]"):
                result.append(_deserialize_literal_value(element, element_type, scope))
        return result
    if isinstance(data_type, StructType) and isinstance(node, dict) and _has_struct_fields(node, data_type):
        result = {}
        for field in data_type.struct_fields:
            with scope.path_context(field.name):
                result[field.name] = _deserialize_literal_value(node.get(field.name), field.data_type, scope)
        return result
    raise scope.create_serde_error(
        DeserializationError,
        f"Literal value {node!r} does not match its type {data_type}",
        LiteralExpr,
    )


def _has_struct_fields(value: Dict[str, Any], data_type: StructType) -> bool:
    """Struct values carry exactly the fields of their type; absent values are null, not missing."""
    return set(value) == {field.name for field in data_type.struct_fields}

# =============================================================================
# InputRefExpr
# =============================================================================


@serialize_expr.register
def _serialize_input_ref(expr: InputRefExpr, scope: SerdeScope) -> Dict[str, Any]:
    return {
        scope.KIND: INPUT_REF,
        _INDEX_KEY: expr.index,
        scope.TYPE: scope.serialize_data_type(scope.TYPE, expr.input_type),
    }


def _deserialize_input_ref(node: Dict[str, Any], scope: SerdeScope) -> InputRefExpr:
    index = scope.read_field(node, _INDEX_KEY, int, InputRefExpr)
    if index < 0:
        with scope.path_context(_INDEX_KEY):
            raise scope.create_serde_error(
                DeserializationError, f"Input index must not be negative, got {index}", InputRefExpr
            )
    input_type = scope.deserialize_data_type(
        scope.TYPE, scope.read_field(node, scope.TYPE, str, InputRefExpr)
    )
    return InputRefExpr(index=index, input_type=input_type)


# =============================================================================
# CallExpr
# =============================================================================


@serialize_expr.register
def _serialize_call(expr: CallExpr, scope: SerdeScope) -> Dict[str, Any]:
    node: Dict[str, Any] = {scope.KIND: CALL}
    node.update(scope.serialize_function(expr.function))
    node[scope.OPERANDS] = scope.serialize_expr_list(scope.OPERANDS, expr.operands)
    node[scope.TYPE] = scope.serialize_data_type(scope.TYPE, expr.return_type)
    return node


def _deserialize_call(node: Dict[str, Any], scope: SerdeScope) -> CallExpr:
    function = scope.deserialize_function(node)
    operands = scope.read_field(node, scope.OPERANDS, list, CallExpr)
    return CallExpr(
        function=function,
        operands=tuple(scope.deserialize_expr_list(scope.OPERANDS, operands)),
        return_type=scope.deserialize_data_type(
            scope.TYPE, scope.read_field(node, scope.TYPE, str, CallExpr)
        ),
    )


_DESERIALIZERS: Dict[str, Callable[[Dict[str, Any], SerdeScope], Expression]] = {
    LITERAL: _deserialize_literal,
    INPUT_REF: _deserialize_input_ref,
    CALL: _deserialize_call,
}
