"""Data type serialization/deserialization.

Data types are written as symbolic descriptors (e.g. `ARRAY<STRING>`) rendered by
the type factory of the context, and parsed back through the context parser, so
restored types are the canonical instances of that factory.
"""

from typing import Any, Iterator

from jsonplan.core._serde.json.errors import DeserializationError, SerializationError
from jsonplan.core._serde.json.serde_scope import SerdeScope
from jsonplan.core.error import ClassLoadingError, InternalError, ParseError
from jsonplan.core.types.datatypes import (
    ArrayType,
    DataType,
    StructType,
    UserDefinedType,
)


def serialize_data_type(data_type: DataType, scope: SerdeScope) -> str:
    """Serialize a data type to its descriptor.

    Raises:
        SerializationError: If the value is not a data type of the type system, or
            contains an extension type that cannot be referenced by class path or
            loaded by the class loader of the context.
    """
    if not isinstance(data_type, DataType):
        raise scope.create_serde_error(
            SerializationError,
            f"Serialization not implemented for DataType: {type(data_type)}",
            type(data_type),
        )
    try:
        descriptor = scope.context.type_factory.descriptor(data_type)
    except (InternalError, ClassLoadingError) as e:
        raise scope.create_serde_error(
            SerializationError, str(e), type(data_type), reference=str(data_type)
        ) from e
    # extension types must load again through the class loader of this context
    class_loader = scope.context.class_loader
    for extension_type in _extension_types(data_type):
        class_path = class_loader.class_path(type(extension_type))
        with scope.translate_errors(SerializationError, type(data_type), reference=class_path):
            class_loader.load_class(class_path, UserDefinedType)
    return descriptor


def deserialize_data_type(node: Any, scope: SerdeScope) -> DataType:
    """Deserialize a data type from its descriptor.

    Raises:
        DeserializationError: If the node is not a string or does not parse.
    """
    if not isinstance(node, str):
        raise scope.create_serde_error(
            DeserializationError,
            f"Expected a type descriptor string but got {type(node).__name__}",
            DataType,
        )
    try:
        return scope.context.environment.resolve_type(node)
    except ParseError as e:
        raise scope.create_serde_error(DeserializationError, str(e), DataType) from e


def _extension_types(data_type: DataType) -> Iterator[UserDefinedType]:
    if isinstance(data_type, UserDefinedType):
        yield data_type
    elif isinstance(data_type, ArrayType):
        yield from _extension_types(data_type.element_type)
    elif isinstance(data_type, StructType):
        for field in data_type.struct_fields:
            yield from _extension_types(field.data_type)
