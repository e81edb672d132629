"""Serialization/deserialization of catalog table and function references.

How much table metadata is written depends on `compile_catalog_objects`, and how
tables are re-bound on restore depends on `restore_catalog_objects`:

    compile     written fields
    ALL         identifier, resolved_table (schema, options, comment)
    SCHEMA      identifier, resolved_table (schema, comment)
    IDENTIFIER  identifier

    restore       metadata used
    ALL           persisted; options from the catalog when only the schema was written
    ALL_ENFORCED  persisted; schema and options must both have been written
    IDENTIFIER    catalog

`options` is written in ALL mode even when empty, so that it is not mistaken for
a SCHEMA compilation on restore. Anonymous tables are always written with their
full metadata. Permanent tables must exist in the catalog of the context in every
mode.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from jsonplan._constants import (
    CATALOG_NAME_KEY,
    CLASS_KEY,
    COMMENT_KEY,
    IDENTIFIER_KEY,
    OPTIONS_KEY,
    RESOLVED_TABLE_KEY,
    SCHEMA_KEY,
    SYSTEM_NAME_KEY,
)
from jsonplan.api.config import CatalogPlanCompilation, CatalogPlanRestore
from jsonplan.core._functions.definitions import UserDefinedFunction
from jsonplan.core._plan.references import (
    ContextResolvedFunction,
    ContextResolvedTable,
    ObjectIdentifier,
    ResolvedTable,
)
from jsonplan.core._serde.json.errors import DeserializationError, SerializationError
from jsonplan.core._serde.json.serde_scope import SerdeScope
from jsonplan.core.types.schema import ColumnField, Schema

logger = logging.getLogger(__name__)

_ANONYMOUS_KEY = "anonymous"
_NAME_KEY = "name"


# =============================================================================
# Tables
# =============================================================================


def serialize_table(table: ContextResolvedTable, scope: SerdeScope) -> Dict[str, Any]:
    """Serialize a context-resolved table.

    Raises:
        SerializationError: If a permanent table is absent from the catalog, or an
            anonymous table is compiled with IDENTIFIER.
    """
    compilation = scope.context.config.compile_catalog_objects
    identifier = table.identifier.as_serializable_string()

    if table.anonymous:
        if compilation == CatalogPlanCompilation.IDENTIFIER:
            raise scope.create_serde_error(
                SerializationError,
                f"Anonymous table {identifier} cannot be compiled with "
                f"{CatalogPlanCompilation.IDENTIFIER.value} because it has no catalog entry",
                ContextResolvedTable,
                reference=identifier,
            )
        return {
            IDENTIFIER_KEY: identifier,
            _ANONYMOUS_KEY: True,
            RESOLVED_TABLE_KEY: _serialize_resolved_table(table.resolved_table, scope, with_options=True),
        }

    if scope.context.environment.resolve_table(table.identifier) is None:
        raise scope.create_serde_error(
            SerializationError,
            f"Table {identifier} is not present in the catalog",
            ContextResolvedTable,
            reference=identifier,
        )

    node: Dict[str, Any] = {IDENTIFIER_KEY: identifier}
    if compilation != CatalogPlanCompilation.IDENTIFIER:
        node[RESOLVED_TABLE_KEY] = _serialize_resolved_table(
            table.resolved_table,
            scope,
            with_options=compilation == CatalogPlanCompilation.ALL,
        )
    return node


def _serialize_resolved_table(
    resolved_table: ResolvedTable, scope: SerdeScope, with_options: bool
) -> Dict[str, Any]:
    node: Dict[str, Any] = {}
    with scope.path_context(RESOLVED_TABLE_KEY):
        node[SCHEMA_KEY] = serialize_schema(resolved_table.schema, scope)
    if with_options:
        node[OPTIONS_KEY] = dict(resolved_table.options)
    if resolved_table.comment is not None:
        node[COMMENT_KEY] = resolved_table.comment
    return node


def serialize_schema(schema: Schema, scope: SerdeScope) -> list:
    """Serialize a schema as a list of `{"name", "type"}` columns."""
    columns = []
    with scope.path_context(SCHEMA_KEY):
        for i, column in enumerate(schema.column_fields):
            with scope.path_context(f"[{i}]"):
                columns.append(
                    {
                        _NAME_KEY: column.name,
                        scope.TYPE: scope.serialize_data_type(scope.TYPE, column.data_type),
                    }
                )
    return columns


def deserialize_schema(node: Any, scope: SerdeScope) -> Schema:
    """Deserialize a schema written by `serialize_schema`."""
    if not isinstance(node, list):
        raise scope.create_serde_error(
            DeserializationError, "Expected a JSON array of columns", Schema
        )
    columns = []
    with scope.path_context(SCHEMA_KEY):
        for i, column_node in enumerate(node):
            with scope.path_context(f"[{i}]"):
                name = scope.read_field(column_node, _NAME_KEY, str, ColumnField)
                data_type = scope.deserialize_data_type(
                    scope.TYPE, scope.read_field(column_node, scope.TYPE, str, ColumnField)
                )
                columns.append(ColumnField(name=name, data_type=data_type))
    return Schema(column_fields=columns)


def deserialize_table(node: Any, scope: SerdeScope) -> ContextResolvedTable:
    """Deserialize a context-resolved table, re-binding it against the catalog.

    Raises:
        DeserializationError: If the node is malformed, the table is missing from the
            catalog when it has to be looked up, or metadata is required by
            ALL_ENFORCED but was not persisted.
    """
    restore = scope.context.config.restore_catalog_objects
    environment = scope.context.environment
    identifier_text = scope.read_field(node, IDENTIFIER_KEY, str, ContextResolvedTable)
    with scope.path_context(IDENTIFIER_KEY), scope.translate_errors(
        DeserializationError, ContextResolvedTable
    ):
        identifier = environment.parse_identifier(identifier_text)
    anonymous = scope.read_field(node, _ANONYMOUS_KEY, bool, ContextResolvedTable, required=False) or False
    table_node = scope.read_field(node, RESOLVED_TABLE_KEY, dict, ContextResolvedTable, required=False)

    if anonymous:
        if table_node is None:
            raise scope.create_serde_error(
                DeserializationError,
                f"Anonymous table {identifier} has no persisted metadata",
                ContextResolvedTable,
            )
        return ContextResolvedTable(
            identifier=identifier,
            resolved_table=_deserialize_resolved_table(table_node, scope),
            anonymous=True,
        )

    if restore == CatalogPlanRestore.IDENTIFIER or table_node is None:
        if restore == CatalogPlanRestore.ALL_ENFORCED:
            raise scope.create_serde_error(
                DeserializationError,
                f"Table {identifier} was compiled without its metadata, which "
                f"{CatalogPlanRestore.ALL_ENFORCED.value} requires",
                ContextResolvedTable,
            )
        return ContextResolvedTable.permanent(identifier, _lookup_table(identifier, scope))

    resolved_table = _deserialize_resolved_table(table_node, scope)
    if OPTIONS_KEY not in table_node:
        # compiled with SCHEMA
        if restore == CatalogPlanRestore.ALL_ENFORCED:
            with scope.path_context(RESOLVED_TABLE_KEY):
                raise scope.create_serde_error(
                    DeserializationError,
                    f"Table {identifier} was compiled without its options, which "
                    f"{CatalogPlanRestore.ALL_ENFORCED.value} requires",
                    ContextResolvedTable,
                )
        catalog_table = environment.resolve_table(identifier)
        if catalog_table is not None:
            resolved_table = resolved_table.copy_with_options(catalog_table.options)
    return ContextResolvedTable.permanent(identifier, resolved_table)


def _lookup_table(identifier: ObjectIdentifier, scope: SerdeScope) -> ResolvedTable:
    resolved_table = scope.context.environment.resolve_table(identifier)
    if resolved_table is None:
        with scope.path_context(IDENTIFIER_KEY):
            raise scope.create_serde_error(
                DeserializationError,
                f"Table {identifier} is not present in the catalog",
                ContextResolvedTable,
            )
    return resolved_table


def _deserialize_resolved_table(node: Dict[str, Any], scope: SerdeScope) -> ResolvedTable:
    with scope.path_context(RESOLVED_TABLE_KEY):
        schema = deserialize_schema(scope.read_field(node, SCHEMA_KEY, list, ResolvedTable), scope)
        options = scope.read_field(node, OPTIONS_KEY, dict, ResolvedTable, required=False) or {}
        for key, value in options.items():
            if not isinstance(value, str):
                with scope.path_context(OPTIONS_KEY):
                    raise scope.create_serde_error(
                        DeserializationError,
                        f"Option '{key}' must be a string",
                        ResolvedTable,
                    )
        comment = scope.read_field(node, COMMENT_KEY, str, ResolvedTable, required=False)
    return ResolvedTable(schema=schema, options=dict(options), comment=comment)


# =============================================================================
# Functions
# =============================================================================


def serialize_function(function: ContextResolvedFunction, scope: SerdeScope) -> Dict[str, Any]:
    """Serialize a function reference to one of `system_name`, `catalog_name` or `class`.

    Raises:
        SerializationError: If the referenced function is not registered in the
            context, or an inline function cannot be referenced by class path.
    """
    environment = scope.context.environment
    if function.system_name is not None:
        if environment.resolve_function(function.system_name) is None:
            raise scope.create_serde_error(
                SerializationError,
                f"Function '{function.system_name}' is neither a built-in operator nor a "
                f"registered temporary system function",
                ContextResolvedFunction,
                reference=function.system_name,
            )
        return {SYSTEM_NAME_KEY: function.system_name}

    if function.identifier is not None:
        identifier = function.identifier.as_serializable_string()
        if environment.resolve_catalog_function(function.identifier) is None:
            raise scope.create_serde_error(
                SerializationError,
                f"Function {identifier} is not present in the function catalog",
                ContextResolvedFunction,
                reference=identifier,
            )
        return {CATALOG_NAME_KEY: identifier}

    implementation = function.definition.implementation
    if implementation is None:
        raise scope.create_serde_error(
            SerializationError,
            f"Inline function '{function.definition.name}' has no implementation class",
            ContextResolvedFunction,
            reference=function.definition.name,
        )
    # the class must load again in this context
    with scope.translate_errors(
        SerializationError, ContextResolvedFunction, reference=implementation
    ):
        scope.context.class_loader.load_class(implementation, UserDefinedFunction)
    return {CLASS_KEY: implementation}


def deserialize_function(node: Any, scope: SerdeScope) -> ContextResolvedFunction:
    """Deserialize a function reference and re-bind it against the context registries.

    Raises:
        DeserializationError: If the node addresses no function, or the function is
            not registered in the context.
    """
    environment = scope.context.environment

    system_name = scope.read_field(node, SYSTEM_NAME_KEY, str, ContextResolvedFunction, required=False)
    if system_name is not None:
        definition = environment.resolve_function(system_name)
        if definition is None:
            with scope.path_context(SYSTEM_NAME_KEY):
                raise scope.create_serde_error(
                    DeserializationError,
                    f"Function '{system_name}' is not registered",
                    ContextResolvedFunction,
                )
        return ContextResolvedFunction(definition=definition, system_name=system_name)

    catalog_name = scope.read_field(node, CATALOG_NAME_KEY, str, ContextResolvedFunction, required=False)
    if catalog_name is not None:
        with scope.path_context(CATALOG_NAME_KEY):
            with scope.translate_errors(DeserializationError, ContextResolvedFunction):
                identifier = environment.parse_identifier(catalog_name)
            definition = environment.resolve_catalog_function(identifier)
            if definition is None:
                raise scope.create_serde_error(
                    DeserializationError,
                    f"Function {identifier} is not present in the function catalog",
                    ContextResolvedFunction,
                )
        return ContextResolvedFunction(definition=definition, identifier=identifier)

    class_path = scope.read_field(node, CLASS_KEY, str, ContextResolvedFunction, required=False)
    if class_path is not None:
        with scope.path_context(CLASS_KEY), scope.translate_errors(
            DeserializationError, ContextResolvedFunction
        ):
            function_class = scope.context.class_loader.load_class(class_path, UserDefinedFunction)
        return ContextResolvedFunction(definition=function_class.definition(class_path))

    raise scope.create_serde_error(
        DeserializationError,
        f"Expected one of '{SYSTEM_NAME_KEY}', '{CATALOG_NAME_KEY}' or '{CLASS_KEY}'",
        ContextResolvedFunction,
    )
