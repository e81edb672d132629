"""Tests for the round-trip assertions and the properties they check."""

import json

import pytest

from jsonplan import (
    ArrayType,
    CallExpr,
    ContextResolvedFunction,
    ContextResolvedTable,
    DeserializationError,
    Expression,
    InputRefExpr,
    IntegerType,
    LiteralExpr,
    ObjectIdentifier,
    ScanSpec,
    SerializationError,
    SinkSpec,
    StringType,
)
from jsonplan.testing import (
    assert_json_contains,
    assert_json_does_not_contain,
    assert_json_round_trip,
    to_json,
    to_json_document,
    to_object,
)


def test_timeout_omitted_when_unset_and_written_when_set(catalog_context, resolved_orders):
    spec = ScanSpec(table=resolved_orders)
    restored = assert_json_round_trip(catalog_context, spec)
    assert restored == spec
    assert_json_does_not_contain(to_json_document(catalog_context, spec), "timeout")

    spec_with_timeout = ScanSpec(table=resolved_orders, timeout=30)
    assert_json_round_trip(catalog_context, spec_with_timeout)
    document = to_json_document(catalog_context, spec_with_timeout)
    assert_json_contains(document, "timeout")
    assert document["timeout"] == 30


def test_round_trip_with_default_context():
    assert_json_round_trip(None, ArrayType(element_type=StringType))
    assert_json_round_trip(None, LiteralExpr(value="x", literal_type=StringType))


def test_round_trip_with_base_expected_type(serde_context):
    restored = assert_json_round_trip(
        serde_context, InputRefExpr(index=1, input_type=IntegerType), Expression
    )
    assert isinstance(restored, InputRefExpr)


def test_round_trip_reports_value_mismatch(serde_context):
    # tuples are written as JSON arrays and come back as lists
    literal = LiteralExpr(value=(1, 2), literal_type=ArrayType(element_type=IntegerType))
    with pytest.raises(AssertionError) as exc_info:
        assert_json_round_trip(serde_context, literal)
    message = str(exc_info.value)
    assert "expected: LiteralExpr(value=(1, 2)" in message
    assert "actual:   LiteralExpr(value=[1, 2]" in message


def test_reserialization_is_stable(catalog_context, resolved_orders):
    spec = ScanSpec(
        table=resolved_orders,
        projected_fields=(1, 0),
        filter=CallExpr(
            function=ContextResolvedFunction(
                definition=catalog_context.operator_table.lookup("EQUALS"), system_name="EQUALS"
            ),
            operands=(
                InputRefExpr(index=1, input_type=StringType),
                LiteralExpr(value="acme", literal_type=StringType),
            ),
            return_type=catalog_context.operator_table.lookup("EQUALS").return_type,
        ),
        limit=10,
    )
    first = to_json(catalog_context, spec)
    second = to_json(catalog_context, to_object(catalog_context, first, ScanSpec))
    assert json.loads(first) == json.loads(second)


def test_reference_resolution_is_deterministic(catalog_context, resolved_orders):
    text = to_json(catalog_context, SinkSpec(table=resolved_orders))
    first = to_object(catalog_context, text, SinkSpec)
    second = to_object(catalog_context, text, SinkSpec)
    assert first == second
    assert first.table.resolved_table.schema.column_fields[0].data_type is (
        second.table.resolved_table.schema.column_fields[0].data_type
    )


def test_unresolvable_table_fails_serialization(serde_context, resolved_orders):
    with pytest.raises(SerializationError) as exc_info:
        assert_json_round_trip(serde_context, ScanSpec(table=resolved_orders))
    assert exc_info.value.reference == resolved_orders.identifier.as_serializable_string()
    assert exc_info.value.field_path == "table"


def test_unresolvable_table_fails_deserialization(catalog_context, serde_context, resolved_orders):
    text = to_json(catalog_context, resolved_orders)
    assert to_object(catalog_context, text, ContextResolvedTable) == resolved_orders
    only_identifier = json.dumps({"identifier": json.loads(text)["identifier"]})
    with pytest.raises(DeserializationError, match="not present in the catalog"):
        to_object(serde_context, only_identifier, ContextResolvedTable)


def test_malformed_text_reports_location(serde_context):
    with pytest.raises(DeserializationError) as exc_info:
        to_object(serde_context, '{"table": ', ScanSpec)
    assert exc_info.value.field_path == "line 1 column 11"
    assert exc_info.value.object_type is ScanSpec


def test_unknown_catalog_identifier_in_document(catalog_context):
    text = json.dumps({"table": {"identifier": ObjectIdentifier.of("returns").as_serializable_string()}})
    with pytest.raises(DeserializationError) as exc_info:
        to_object(catalog_context, text, ScanSpec)
    assert exc_info.value.field_path == "table.identifier"
