"""Type system and schemas for compiled plans."""

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
    StructField,
    StructType,
    UserDefinedType,
)
from jsonplan.core.types.schema import ColumnField, Schema

__all__ = [
    "ArrayType",
    "BooleanType",
    "ColumnField",
    "DataType",
    "DoubleType",
    "EmbeddingType",
    "FloatType",
    "IntegerType",
    "JsonType",
    "Schema",
    "StringType",
    "StructField",
    "StructType",
    "UserDefinedType",
]
