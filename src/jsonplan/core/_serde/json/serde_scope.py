"""Per-call serde state: field path tracking and error reporting.

A scope is created for every serialize/deserialize call and wraps the immutable
SerdeContext. All serde functions go through the scope so that errors carry the
path of the field being processed, e.g. `filter.operands.[1].type`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, Union

from jsonplan.core._plan.expressions import Expression
from jsonplan.core._plan.references import ContextResolvedFunction, ContextResolvedTable
from jsonplan.core._serde.json.errors import (
    DeserializationError,
    SerdeError,
    SerializationError,
)
from jsonplan.core._serde.json.serde_context import SerdeContext
from jsonplan.core.error import JsonPlanError
from jsonplan.core.types.datatypes import DataType

JsonTypes = Union[type, Tuple[type, ...]]


class SerdeScope:
    """Field path tracking and field-level serde operations for one serde call."""

    # Common field name constants
    KIND = "kind"
    TYPE = "type"
    VALUE = "value"
    OPERANDS = "operands"
    TABLE = "table"
    FILTER = "filter"

    def __init__(self, context: SerdeContext):
        """Initialize a scope with an empty path tracker."""
        self.context = context
        self._path_tracker = PathTracker()

    @property
    def current_path(self) -> str:
        """Get the current serde path for error reporting."""
        return self._path_tracker.current_path

    @contextmanager
    def path_context(self, field_name: str):
        """Context manager for tracking field paths during serde operations."""
        self._path_tracker.push(field_name)
        try:
            yield
        finally:
            self._path_tracker.pop()

    def create_serde_error(
        self,
        error_class: Type[SerdeError],
        message: str,
        object_type: Optional[Type] = None,
        **kwargs: Any,
    ) -> SerdeError:
        """Create a serde error with the current path automatically included."""
        current_path = self.current_path
        return error_class(message, object_type, current_path if current_path else None, **kwargs)

    @contextmanager
    def translate_errors(
        self,
        error_class: Type[SerdeError],
        object_type: Optional[Type] = None,
        **kwargs: Any,
    ):
        """Re-raise registry, parser and class loading errors as `error_class` at the current path."""
        try:
            yield
        except JsonPlanError as e:
            raise self.create_serde_error(error_class, str(e), object_type, **kwargs) from e

    def _handle_serde_error(self, e: Exception, error_class: Type[SerdeError]) -> None:
        # If it's already an error with a path, re-raise as-is
        if getattr(e, "field_path", None):
            raise e

        current_path = self.current_path
        if isinstance(e, SerdeError):
            if not current_path:
                raise e
            kwargs = {"reference": e.reference} if isinstance(e, SerializationError) else {}
            raise type(e)(e.message, e.object_type, current_path, **kwargs) from e
        if isinstance(e, JsonPlanError):
            # Wrap registry, parser and class loading errors
            raise error_class(str(e), None, current_path or None) from e
        if current_path:
            # Wrap non-serde errors
            wrapped = RuntimeError(f"{str(e)} at {current_path}")
            wrapped.field_path = current_path
            raise wrapped from e
        # No path context, re-raise as-is
        raise e

    # =============================================================================
    # JSON node helpers
    # =============================================================================

    def read_field(
        self,
        node: Any,
        key: str,
        expected: JsonTypes,
        object_type: Type,
        required: bool = True,
    ) -> Any:
        """Read `key` from a JSON object, checking the JSON type of its value.

        Raises:
            DeserializationError: If `node` is not an object, the field is missing
                and required, or the value has the wrong JSON type.
        """
        if not isinstance(node, dict):
            raise self.create_serde_error(
                DeserializationError,
                f"Expected a JSON object but got {_json_type_name(node)}",
                object_type,
            )
        if key not in node or node[key] is None:
            if required:
                with self.path_context(key):
                    raise self.create_serde_error(
                        DeserializationError, "Missing required field", object_type
                    )
            return None
        value = node[key]
        # bool is a subclass of int; integers must not accept booleans
        if not isinstance(value, expected) or (
            isinstance(value, bool) and bool not in _as_tuple(expected)
        ):
            with self.path_context(key):
                raise self.create_serde_error(
                    DeserializationError,
                    f"Expected {' or '.join(t.__name__ for t in _as_tuple(expected))} "
                    f"but got {_json_type_name(value)}",
                    object_type,
                )
        return value

    # =============================================================================
    # Core serde function wrappers to preserve field path tracking
    # =============================================================================

    def serialize_data_type(self, field_name: str, data_type: DataType) -> str:
        from jsonplan.core._serde.json.datatype_serde import serialize_data_type

        with self.path_context(field_name):
            try:
                return serialize_data_type(data_type, self)
            except Exception as e:
                self._handle_serde_error(e, SerializationError)

    def deserialize_data_type(self, field_name: str, node: Any) -> DataType:
        from jsonplan.core._serde.json.datatype_serde import deserialize_data_type

        with self.path_context(field_name):
            try:
                return deserialize_data_type(node, self)
            except Exception as e:
                self._handle_serde_error(e, DeserializationError)

    def serialize_table(self, field_name: str, table: ContextResolvedTable) -> Dict[str, Any]:
        from jsonplan.core._serde.json.reference_serde import serialize_table

        with self.path_context(field_name):
            try:
                return serialize_table(table, self)
            except Exception as e:
                self._handle_serde_error(e, SerializationError)

    def deserialize_table(self, field_name: str, node: Any) -> ContextResolvedTable:
        from jsonplan.core._serde.json.reference_serde import deserialize_table

        with self.path_context(field_name):
            try:
                return deserialize_table(node, self)
            except Exception as e:
                self._handle_serde_error(e, DeserializationError)

    def serialize_function(self, function: ContextResolvedFunction) -> Dict[str, Any]:
        """Serialize a function reference; the result is merged into the enclosing node."""
        from jsonplan.core._serde.json.reference_serde import serialize_function

        try:
            return serialize_function(function, self)
        except Exception as e:
            self._handle_serde_error(e, SerializationError)

    def deserialize_function(self, node: Any) -> ContextResolvedFunction:
        from jsonplan.core._serde.json.reference_serde import deserialize_function

        try:
            return deserialize_function(node, self)
        except Exception as e:
            self._handle_serde_error(e, DeserializationError)

    def serialize_expr(self, field_name: str, expr: Expression) -> Dict[str, Any]:
        from jsonplan.core._serde.json.expression_serde import serialize_expr

        with self.path_context(field_name):
            try:
                return serialize_expr(expr, self)
            except Exception as e:
                self._handle_serde_error(e, SerializationError)

    def deserialize_expr(self, field_name: str, node: Any) -> Expression:
        from jsonplan.core._serde.json.expression_serde import deserialize_expr

        with self.path_context(field_name):
            try:
                return deserialize_expr(node, self)
            except Exception as e:
                self._handle_serde_error(e, DeserializationError)

    def serialize_expr_list(self, field_name: str, exprs: Iterable[Expression]) -> List[Dict[str, Any]]:
        result = []
        with self.path_context(field_name):
            for i, expr in enumerate(exprs):
                result.append(self.serialize_expr(f"[{i}]", expr))
        return result

    def deserialize_expr_list(self, field_name: str, nodes: List[Any]) -> List[Expression]:
        result = []
        with self.path_context(field_name):
            for i, node in enumerate(nodes):
                result.append(self.deserialize_expr(f"[{i}]", node))
        return result


class PathTracker:
    """Path tracker for serde operations."""

    def __init__(self):
        """Initialize a PathTracker."""
        self._path_stack = []

    @property
    def current_path(self) -> str:
        """Get the current field path as a string."""
        return ".".join(self._path_stack) if self._path_stack else ""

    def push(self, field_name: str) -> None:
        self._path_stack.append(field_name)

    def pop(self) -> None:
        if self._path_stack:
            self._path_stack.pop()


def _as_tuple(expected: JsonTypes) -> Tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__
