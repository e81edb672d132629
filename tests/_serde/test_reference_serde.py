"""Tests for table and function reference serialization/deserialization."""

import json

import pytest

from jsonplan import (
    ContextResolvedFunction,
    ContextResolvedTable,
    DeserializationError,
    FunctionDefinition,
    ObjectIdentifier,
    OperatorTable,
    SerializationError,
    StringType,
    UserDefinedFunction,
)
from jsonplan.core._class_loader import ClassLoader
from jsonplan.testing import (
    assert_json_contains,
    assert_json_does_not_contain,
    assert_json_round_trip,
    catalog_serde_context,
    configured_serde_context,
    to_json,
    to_json_document,
    to_object,
)


class ReverseFunction(UserDefinedFunction):
    name = "reverse"
    input_types = (StringType,)
    return_type = StringType


class TestTableCompilation:
    def test_compile_all(self, catalog, resolved_orders, orders_identifier):
        document = to_json_document(catalog_serde_context(catalog), resolved_orders)
        assert document == {
            "identifier": orders_identifier.as_serializable_string(),
            "resolved_table": {
                "schema": [
                    {"name": "order_id", "type": "INTEGER"},
                    {"name": "customer", "type": "STRING"},
                ],
                "options": {"connector": "filesystem", "path": "/data/orders"},
                "comment": "All orders",
            },
        }

    def test_compile_schema_omits_options(self, catalog, resolved_orders):
        context = catalog_serde_context(catalog, {"plan.compile.catalog-objects": "SCHEMA"})
        document = to_json_document(context, resolved_orders)
        assert_json_contains(document, "resolved_table", "schema")
        assert_json_contains(document, "resolved_table", "comment")
        assert_json_does_not_contain(document, "resolved_table", "options")

    def test_compile_identifier_omits_metadata(self, catalog, resolved_orders, orders_identifier):
        context = catalog_serde_context(catalog, {"plan.compile.catalog-objects": "IDENTIFIER"})
        document = to_json_document(context, resolved_orders)
        assert document == {"identifier": orders_identifier.as_serializable_string()}

    def test_empty_options_are_written_and_kept(self, catalog, orders_table):
        identifier = ObjectIdentifier.of("events")
        catalog.create_table(identifier, orders_table.copy_with_options({"connector": "kafka"}))
        bare = ContextResolvedTable.permanent(identifier, orders_table.copy_with_options({}))
        context = catalog_serde_context(catalog)
        document = to_json_document(context, bare)
        assert document["resolved_table"]["options"] == {}
        assert_json_contains(document, "resolved_table", "comment")
        restored = assert_json_round_trip(context, bare)
        assert restored.resolved_table.options == {}

    @pytest.mark.parametrize("compilation", ["ALL", "SCHEMA", "IDENTIFIER"])
    def test_table_missing_from_catalog(self, resolved_orders, compilation):
        context = configured_serde_context({"plan.compile.catalog-objects": compilation})
        with pytest.raises(SerializationError, match="not present in the catalog") as exc_info:
            to_json(context, resolved_orders)
        assert exc_info.value.reference == resolved_orders.identifier.as_serializable_string()
        assert exc_info.value.field_path == "root"


class TestTableRestore:
    @pytest.mark.parametrize("compilation", ["ALL", "SCHEMA", "IDENTIFIER"])
    def test_restore_all_round_trips_every_compilation(self, catalog, resolved_orders, compilation):
        context = catalog_serde_context(catalog, {"plan.compile.catalog-objects": compilation})
        assert_json_round_trip(context, resolved_orders)

    def test_restore_all_uses_persisted_metadata_without_catalog(self, catalog, serde_context, resolved_orders):
        text = to_json(catalog_serde_context(catalog), resolved_orders)
        assert to_object(serde_context, text, ContextResolvedTable) == resolved_orders

    def test_restore_all_enforced(self, catalog, resolved_orders):
        compiled = to_json(catalog_serde_context(catalog), resolved_orders)
        enforced = catalog_serde_context(catalog, {"plan.restore.catalog-objects": "ALL_ENFORCED"})
        assert to_object(enforced, compiled, ContextResolvedTable) == resolved_orders

    def test_restore_all_enforced_rejects_schema_only(self, catalog, resolved_orders):
        compiled = to_json(
            catalog_serde_context(catalog, {"plan.compile.catalog-objects": "SCHEMA"}), resolved_orders
        )
        enforced = catalog_serde_context(catalog, {"plan.restore.catalog-objects": "ALL_ENFORCED"})
        with pytest.raises(DeserializationError, match="compiled without its options") as exc_info:
            to_object(enforced, compiled, ContextResolvedTable)
        assert exc_info.value.field_path == "root.resolved_table"

    def test_restore_all_fills_options_of_schema_only_documents(self, catalog, resolved_orders):
        compiled = to_json(
            catalog_serde_context(catalog, {"plan.compile.catalog-objects": "SCHEMA"}), resolved_orders
        )
        restored = to_object(catalog_serde_context(catalog), compiled, ContextResolvedTable)
        assert restored.resolved_table.options == resolved_orders.resolved_table.options

    def test_restore_all_enforced_rejects_identifier_only(self, catalog, resolved_orders):
        compiled = to_json(
            catalog_serde_context(catalog, {"plan.compile.catalog-objects": "IDENTIFIER"}), resolved_orders
        )
        enforced = catalog_serde_context(catalog, {"plan.restore.catalog-objects": "ALL_ENFORCED"})
        with pytest.raises(DeserializationError, match="ALL_ENFORCED requires"):
            to_object(enforced, compiled, ContextResolvedTable)

    def test_restore_identifier_prefers_catalog(self, catalog, resolved_orders):
        document = to_json_document(catalog_serde_context(catalog), resolved_orders)
        document["resolved_table"]["comment"] = "stale comment"
        by_identifier = catalog_serde_context(catalog, {"plan.restore.catalog-objects": "IDENTIFIER"})
        restored = to_object(by_identifier, json.dumps(document), ContextResolvedTable)
        assert restored == resolved_orders

    def test_restore_identifier_requires_catalog_entry(self, catalog, resolved_orders):
        text = to_json(catalog_serde_context(catalog), resolved_orders)
        by_identifier = configured_serde_context({"plan.restore.catalog-objects": "IDENTIFIER"})
        with pytest.raises(DeserializationError, match="not present in the catalog") as exc_info:
            to_object(by_identifier, text, ContextResolvedTable)
        assert exc_info.value.field_path == "root.identifier"

    def test_partial_identifier_is_qualified(self, catalog, orders_identifier, orders_table):
        restored = to_object(catalog_serde_context(catalog), '{"identifier": "orders"}', ContextResolvedTable)
        assert restored == ContextResolvedTable.permanent(orders_identifier, orders_table)

    @pytest.mark.parametrize(
        "document, field_path",
        [
            ({"identifier": "a.b.c.d"}, "root.identifier"),
            ({"identifier": "orders."}, "root.identifier"),
            ({"identifier": 1}, "root.identifier"),
            ({}, "root.identifier"),
            ({"identifier": "orders", "resolved_table": []}, "root.resolved_table"),
            (
                {"identifier": "orders", "resolved_table": {"schema": [], "options": {"retries": 3}}},
                "root.resolved_table.options",
            ),
        ],
    )
    def test_malformed_documents(self, catalog, document, field_path):
        with pytest.raises(DeserializationError) as exc_info:
            to_object(catalog_serde_context(catalog), json.dumps(document), ContextResolvedTable)
        assert exc_info.value.field_path == field_path


class TestAnonymousTables:
    def test_round_trip_without_catalog(self, serde_context, orders_table):
        inline = ContextResolvedTable.anonymous_table("inline_orders", orders_table)
        assert_json_round_trip(serde_context, inline)
        document = to_json_document(serde_context, inline)
        assert document["anonymous"] is True
        assert_json_contains(document, "resolved_table", "options", "connector")

    @pytest.mark.parametrize("compilation", ["SCHEMA", "ALL"])
    def test_always_written_with_options(self, orders_table, compilation):
        context = configured_serde_context({"plan.compile.catalog-objects": compilation})
        document = to_json_document(context, ContextResolvedTable.anonymous_table("t", orders_table))
        assert_json_contains(document, "resolved_table", "options")

    def test_identifier_compilation_rejected(self, orders_table):
        context = configured_serde_context({"plan.compile.catalog-objects": "IDENTIFIER"})
        with pytest.raises(SerializationError, match="cannot be compiled with IDENTIFIER"):
            to_json(context, ContextResolvedTable.anonymous_table("t", orders_table))

    def test_restore_requires_metadata(self, serde_context):
        text = json.dumps({"identifier": "`*anonymous*`.`*anonymous*`.`t`", "anonymous": True})
        with pytest.raises(DeserializationError, match="has no persisted metadata"):
            to_object(serde_context, text, ContextResolvedTable)


class TestFunctionReferences:
    def test_builtin_operator(self, catalog_context):
        upper = ContextResolvedFunction(definition=OperatorTable.default().lookup("UPPER"), system_name="UPPER")
        assert to_json_document(catalog_context, upper) == {"system_name": "UPPER"}
        assert_json_round_trip(catalog_context, upper)

    def test_temporary_system_function(self, catalog_context, function_catalog):
        mask = ContextResolvedFunction(
            definition=function_catalog.get_temporary_system_function("mask"), system_name="mask"
        )
        assert to_json_document(catalog_context, mask) == {"system_name": "mask"}
        assert_json_round_trip(catalog_context, mask)

    def test_catalog_function(self, catalog_context, function_catalog):
        identifier = ObjectIdentifier.of("discount")
        discount = ContextResolvedFunction(
            definition=function_catalog.get_catalog_function(identifier), identifier=identifier
        )
        assert to_json_document(catalog_context, discount) == {
            "catalog_name": identifier.as_serializable_string()
        }
        assert_json_round_trip(catalog_context, discount)

    def test_inline_function(self, serde_context):
        class_path = ClassLoader().class_path(ReverseFunction)
        reverse = ContextResolvedFunction(definition=ReverseFunction.definition(class_path))
        assert reverse.is_anonymous
        assert to_json_document(serde_context, reverse) == {"class": class_path}
        restored = assert_json_round_trip(serde_context, reverse)
        assert restored.definition.return_type == StringType

    def test_unregistered_system_function(self, serde_context):
        function = ContextResolvedFunction(definition=FunctionDefinition(name="mask"), system_name="mask")
        with pytest.raises(SerializationError, match="neither a built-in operator") as exc_info:
            to_json(serde_context, function)
        assert exc_info.value.reference == "mask"

    def test_unregistered_catalog_function(self, serde_context):
        identifier = ObjectIdentifier.of("discount")
        function = ContextResolvedFunction(definition=FunctionDefinition(name="discount"), identifier=identifier)
        with pytest.raises(SerializationError, match="not present in the function catalog") as exc_info:
            to_json(serde_context, function)
        assert exc_info.value.reference == identifier.as_serializable_string()

    def test_inline_function_without_implementation(self, serde_context):
        function = ContextResolvedFunction(definition=FunctionDefinition(name="anonymous"))
        with pytest.raises(SerializationError, match="has no implementation class"):
            to_json(serde_context, function)

    def test_inline_function_outside_allowed_modules(self):
        class_path = ClassLoader().class_path(ReverseFunction)
        context = configured_serde_context({"plan.extension-modules": "trusted_udfs"})
        with pytest.raises(DeserializationError, match="not in the allowed extension modules") as exc_info:
            to_object(context, json.dumps({"class": class_path}), ContextResolvedFunction)
        assert exc_info.value.field_path == "class"

    @pytest.mark.parametrize(
        "document, message, field_path",
        [
            ({}, "Expected one of", None),
            ({"system_name": "nope"}, "is not registered", "system_name"),
            ({"system_name": 1}, "Expected str but got number", "system_name"),
            ({"catalog_name": "nope"}, "not present in the function catalog", "catalog_name"),
            ({"catalog_name": "a.b.c.d"}, "one to three parts", "catalog_name"),
            ({"class": "builtins:str"}, "not a subclass of UserDefinedFunction", "class"),
        ],
    )
    def test_malformed_documents(self, catalog_context, document, message, field_path):
        with pytest.raises(DeserializationError, match=message) as exc_info:
            to_object(catalog_context, json.dumps(document), ContextResolvedFunction)
        assert exc_info.value.field_path == field_path
