"""jsonplan: JSON serialization of compiled plans, and a harness for testing it."""

from jsonplan.api.config import CatalogPlanCompilation, CatalogPlanRestore, SerdeConfig
from jsonplan.core._catalog import EmptyCatalog, InMemoryCatalog
from jsonplan.core._functions import (
    FunctionCatalog,
    FunctionDefinition,
    FunctionKind,
    OperatorTable,
    UserDefinedFunction,
)
from jsonplan.core._plan import (
    CallExpr,
    ContextResolvedFunction,
    ContextResolvedTable,
    Expression,
    InputRefExpr,
    LiteralExpr,
    ObjectIdentifier,
    ResolvedTable,
    ScanSpec,
    SinkSpec,
)
from jsonplan.core._serde import JsonSerde, PlanJsonSerde
from jsonplan.core._serde.json import (
    DeserializationError,
    SerdeContext,
    SerdeError,
    SerializationError,
    create_serde_context,
)
from jsonplan.core._type_factory import TypeFactory
from jsonplan.core.error import (
    CatalogError,
    ClassLoadingError,
    ConfigurationError,
    JsonPlanError,
    ParseError,
    TableAlreadyExistsError,
    TableNotFoundError,
)
from jsonplan.core.types import (
    ArrayType,
    BooleanType,
    ColumnField,
    DataType,
    DoubleType,
    EmbeddingType,
    FloatType,
    IntegerType,
    JsonType,
    Schema,
    StringType,
    StructField,
    StructType,
    UserDefinedType,
)
from jsonplan.logging import configure_logging

__all__ = [
    # Configuration
    "CatalogPlanCompilation",
    "CatalogPlanRestore",
    "SerdeConfig",
    # Registries
    "EmptyCatalog",
    "InMemoryCatalog",
    "FunctionCatalog",
    "FunctionDefinition",
    "FunctionKind",
    "OperatorTable",
    "UserDefinedFunction",
    "TypeFactory",
    # Plan values
    "CallExpr",
    "ContextResolvedFunction",
    "ContextResolvedTable",
    "Expression",
    "InputRefExpr",
    "LiteralExpr",
    "ObjectIdentifier",
    "ResolvedTable",
    "ScanSpec",
    "SinkSpec",
    # Serde
    "JsonSerde",
    "PlanJsonSerde",
    "SerdeContext",
    "create_serde_context",
    # Errors
    "CatalogError",
    "ClassLoadingError",
    "ConfigurationError",
    "DeserializationError",
    "JsonPlanError",
    "ParseError",
    "SerdeError",
    "SerializationError",
    "TableAlreadyExistsError",
    "TableNotFoundError",
    # Types
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
    # Logging
    "configure_logging",
]
