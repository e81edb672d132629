"""Canonical type factory shared by serde contexts.

The factory owns the mapping between data types and their symbolic descriptors in
the JSON plan format, and interns types so that equal descriptors resolve to the
same object. It also maps logical types to their physical polars representation.

The shared instance returned by `TypeFactory.instance()` is safe for concurrent use:
descriptor rendering is pure and the intern table is guarded by a lock.
"""

from __future__ import annotations

import logging
import threading
from typing import ClassVar, Dict, Optional

import polars as pl

from jsonplan.core._class_loader import ClassLoader
from jsonplan.core.error import InternalError
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
    _PrimitiveType,
)

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES_BY_NAME: Dict[str, DataType] = {
    "STRING": StringType,
    "INTEGER": IntegerType,
    "FLOAT": FloatType,
    "DOUBLE": DoubleType,
    "BOOLEAN": BooleanType,
    "JSON": JsonType,
}


def quote_identifier(name: str) -> str:
    """Quote a name with backticks, doubling any backtick it contains."""
    escaped = name.replace("`", "``")
    return f"`{escaped}`"


def quote_string(value: str) -> str:
    """Quote a string literal with single quotes, doubling any quote it contains."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


class TypeFactory:
    """Resolves data types to and from their symbolic descriptors."""

    _instance: ClassVar[Optional[TypeFactory]] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, class_loader: Optional[ClassLoader] = None):
        self._class_loader = class_loader or ClassLoader()
        self._interned: Dict[str, DataType] = {}
        self._lock = threading.Lock()

    @classmethod
    def instance(cls) -> TypeFactory:
        """Return the process-wide factory used when a context is built without one."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def descriptor(self, data_type: DataType) -> str:
        """Render the symbolic descriptor of a data type.

        Raises:
            InternalError: If the data type is not part of the type system.
        """
        if isinstance(data_type, _PrimitiveType) or data_type == JsonType:
            for name, primitive in PRIMITIVE_TYPES_BY_NAME.items():
                if data_type == primitive:
                    return name
        elif isinstance(data_type, ArrayType):
            return f"ARRAY<{self.descriptor(data_type.element_type)}>"
        elif isinstance(data_type, StructType):
            fields = ", ".join(
                f"{quote_identifier(field.name)} {self.descriptor(field.data_type)}"
                for field in data_type.struct_fields
            )
            return f"STRUCT<{fields}>"
        elif isinstance(data_type, EmbeddingType):
            return f"EMBEDDING({data_type.dimensions}, {quote_string(data_type.embedding_model)})"
        elif isinstance(data_type, UserDefinedType):
            return f"RAW({quote_string(self._class_loader.class_path(type(data_type)))})"
        raise InternalError(f"No descriptor for data type {data_type!r}")

    def canonicalize(self, data_type: DataType) -> DataType:
        """Return the interned instance equal to `data_type`."""
        descriptor = self.descriptor(data_type)
        with self._lock:
            interned = self._interned.setdefault(descriptor, data_type)
        return interned

    def primitive(self, name: str) -> Optional[DataType]:
        """Look up a primitive type by its descriptor name (case-insensitive)."""
        return PRIMITIVE_TYPES_BY_NAME.get(name.upper())

    def to_polars(self, data_type: DataType) -> pl.DataType:
        """Convert a logical data type to the polars type used to store it.

        Raises:
            InternalError: If the data type has no physical representation.
        """
        if data_type == IntegerType:
            return pl.Int64
        elif data_type == FloatType:
            return pl.Float32
        elif data_type == DoubleType:
            return pl.Float64
        elif data_type == StringType or data_type == JsonType:
            return pl.String
        elif data_type == BooleanType:
            return pl.Boolean
        elif isinstance(data_type, ArrayType):
            return pl.List(self.to_polars(data_type.element_type))
        elif isinstance(data_type, StructType):
            return pl.Struct(
                [
                    pl.Field(field.name, self.to_polars(field.data_type))
                    for field in data_type.struct_fields
                ]
            )
        elif isinstance(data_type, EmbeddingType):
            return pl.Array(pl.Float32, data_type.dimensions)
        elif isinstance(data_type, UserDefinedType):
            return self.to_polars(type(data_type).storage_type)
        raise InternalError(f"No physical type for data type {data_type!r}")
