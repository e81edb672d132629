"""Serialization/deserialization of scan and sink specs.

Optional fields left at their defaults are omitted from the JSON document.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonplan.core._plan.specs import ScanSpec, SinkSpec
from jsonplan.core._serde.json.errors import DeserializationError
from jsonplan.core._serde.json.serde_scope import SerdeScope

PROJECTED_FIELDS = "projected_fields"
LIMIT = "limit"
TIMEOUT = "timeout"
OVERWRITE = "overwrite"
STATIC_PARTITIONS = "static_partitions"


def serialize_scan_spec(spec: ScanSpec, scope: SerdeScope) -> Dict[str, Any]:
    node: Dict[str, Any] = {scope.TABLE: scope.serialize_table(scope.TABLE, spec.table)}
    if spec.projected_fields is not None:
        node[PROJECTED_FIELDS] = list(spec.projected_fields)
    if spec.filter is not None:
        node[scope.FILTER] = scope.serialize_expr(scope.FILTER, spec.filter)
    if spec.limit is not None:
        node[LIMIT] = spec.limit
    if spec.timeout is not None:
        node[TIMEOUT] = spec.timeout
    return node


def deserialize_scan_spec(node: Any, scope: SerdeScope) -> ScanSpec:
    table = scope.deserialize_table(scope.TABLE, scope.read_field(node, scope.TABLE, dict, ScanSpec))
    projected_fields = scope.read_field(node, PROJECTED_FIELDS, list, ScanSpec, required=False)
    if projected_fields is not None:
        with scope.path_context(PROJECTED_FIELDS):
            for i, index in enumerate(projected_fields):
                if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                    with scope.path_context(f"[{i}]"):
                        raise scope.create_serde_error(
                            DeserializationError,
                            f"Expected a non-negative field index but got {index!r}",
                            ScanSpec,
                        )
        projected_fields = tuple(projected_fields)
    filter_node = scope.read_field(node, scope.FILTER, dict, ScanSpec, required=False)
    return ScanSpec(
        table=table,
        projected_fields=projected_fields,
        filter=scope.deserialize_expr(scope.FILTER, filter_node) if filter_node is not None else None,
        limit=scope.read_field(node, LIMIT, int, ScanSpec, required=False),
        timeout=scope.read_field(node, TIMEOUT, int, ScanSpec, required=False),
    )


def serialize_sink_spec(spec: SinkSpec, scope: SerdeScope) -> Dict[str, Any]:
    node: Dict[str, Any] = {scope.TABLE: scope.serialize_table(scope.TABLE, spec.table)}
    if spec.overwrite:
        node[OVERWRITE] = True
    if spec.static_partitions:
        node[STATIC_PARTITIONS] = dict(spec.static_partitions)
    return node


def deserialize_sink_spec(node: Any, scope: SerdeScope) -> SinkSpec:
    table = scope.deserialize_table(scope.TABLE, scope.read_field(node, scope.TABLE, dict, SinkSpec))
    static_partitions = scope.read_field(node, STATIC_PARTITIONS, dict, SinkSpec, required=False) or {}
    with scope.path_context(STATIC_PARTITIONS):
        for key, value in static_partitions.items():
            if not isinstance(value, str):
                with scope.path_context(key):
                    raise scope.create_serde_error(
                        DeserializationError, "Partition values must be strings", SinkSpec
                    )
    return SinkSpec(
        table=table,
        overwrite=scope.read_field(node, OVERWRITE, bool, SinkSpec, required=False) or False,
        static_partitions=dict(static_partitions),
    )
