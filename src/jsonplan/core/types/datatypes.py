"""Core data type definitions for compiled plans.

This module defines the logical type system referenced by serialized plans. It includes:
- Base classes for all data types
- Primitive types (string, integer, float, etc.)
- Composite types (arrays, structs)
- Parameterized logical types (embeddings)
- User-defined extension types, resolved by class path when a plan is restored
"""

from abc import ABC, abstractmethod
from typing import ClassVar, List

from pydantic import ConfigDict
from pydantic.dataclasses import dataclass

# === Base Classes ===


class DataType(ABC):
    """Base class for all data types.

    You won't instantiate this class directly. Instead, use one of the
    concrete types like `StringType`, `ArrayType`, or `StructType`.

    Data types are referenced symbolically in the JSON plan format and are
    re-bound through the type factory of a serde context on restore.
    """

    @abstractmethod
    def __str__(self) -> str:
        """Return a string representation of the data type."""
        pass

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        """Compare this data type with another object for equality."""
        pass

    def __ne__(self, other: object) -> bool:
        """Compare this data type with another object for inequality."""
        return not self == other

    @abstractmethod
    def __hash__(self):
        """Return a hash value for this data type."""
        return super().__hash__()


class _PrimitiveType(DataType):
    """Marker class for all primitive type."""

    pass


class _LogicalType(DataType):
    """Marker class for all logical types."""

    pass


# === Singleton Primitive Types ===


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class _StringType(_PrimitiveType):
    def __str__(self) -> str:
        return "StringType"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _StringType)


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class _IntegerType(_PrimitiveType):
    def __str__(self) -> str:
        return "IntegerType"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _IntegerType)


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class _FloatType(_PrimitiveType):
    def __str__(self) -> str:
        return "FloatType"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _FloatType)


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class _DoubleType(_PrimitiveType):
    def __str__(self) -> str:
        return "DoubleType"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _DoubleType)


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class _BooleanType(_PrimitiveType):
    def __str__(self) -> str:
        return "BooleanType"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _BooleanType)


# === Composite and Parameterized Types ===


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class ArrayType(DataType):
    """A type representing a homogeneous variable-length array (list) of elements.

    Attributes:
        element_type: The data type of each element in the array.

    Example: Create an array of strings
        ```python
        ArrayType(StringType)
        ArrayType(element_type=StringType)
        ```
    """

    element_type: DataType

    def __str__(self) -> str:
        return f"ArrayType(element_type={self.element_type})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ArrayType) and self.element_type == other.element_type


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class StructField:
    """A field in a StructType. Fields are nullable.

    Attributes:
        name: The name of the field.
        data_type: The data type of the field.
    """

    name: str
    data_type: DataType

    def __str__(self) -> str:
        return f"StructField(name={self.name}, data_type={self.data_type})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, StructField)
            and self.name == other.name
            and self.data_type == other.data_type
        )


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class StructType(DataType):
    """A type representing a struct (record) with named fields.

    Attributes:
        struct_fields: List of field definitions.

    Example: Create a struct with name and age fields
        ```python
        StructType([
            StructField("name", StringType),
            StructField("age", IntegerType),
        ])
        ```
    """

    struct_fields: List[StructField]

    def __str__(self) -> str:
        return f"StructType(struct_fields=[{', '.join([str(field) for field in self.struct_fields])}])"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, StructType) and self.struct_fields == other.struct_fields
        )

    def __hash__(self):
        return hash(tuple((field.name, field.data_type) for field in self.struct_fields))


@dataclass(frozen=True)
class EmbeddingType(_LogicalType):
    """A type representing a fixed-length embedding vector.

    Attributes:
        dimensions: The number of dimensions in the embedding vector.
        embedding_model: Name of the model used to generate the embedding.

    Example: Create an embedding type for text-embedding-3-small
        ```python
        EmbeddingType(384, embedding_model="text-embedding-3-small")
        ```
    """

    dimensions: int
    embedding_model: str

    def __str__(self) -> str:
        return (
            f"EmbeddingType(dimensions={self.dimensions}, model={self.embedding_model})"
        )

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, EmbeddingType)
            and self.dimensions == other.dimensions
            and self.embedding_model == other.embedding_model
        )


@dataclass(frozen=True)
class _JsonType(_LogicalType):
    """Represents a string containing JSON data."""

    def __str__(self) -> str:
        return "JsonType"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _JsonType)


# === Extension Types ===


class UserDefinedType(_LogicalType):
    """Base class for extension types defined outside of jsonplan.

    Subclasses are referenced in serialized plans by their class path and are loaded
    back through the class loader of the serde context, so they must be defined at
    module level and be constructible without arguments. Two instances are equal
    when they are of the same class.

    Attributes:
        storage_type: The built-in type used to physically store values of this type.

    Example: Define a currency code type stored as a string
        ```python
        class CurrencyCodeType(UserDefinedType):
            storage_type = StringType
        ```
    """

    storage_type: ClassVar[DataType]

    def __str__(self) -> str:
        return f"UserDefinedType({type(self).__qualname__})"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self):
        return hash(type(self))


# === Instances of Singleton Types ===

StringType = _StringType()
"""Represents a UTF-8 encoded string value."""

IntegerType = _IntegerType()
"""Represents a signed integer value."""

FloatType = _FloatType()
"""Represents a 32-bit floating-point number."""

DoubleType = _DoubleType()
"""Represents a 64-bit floating-point number."""

BooleanType = _BooleanType()
"""Represents a boolean value. (True/False)"""

JsonType = _JsonType()
"""Represents a string containing JSON data."""
