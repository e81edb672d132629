"""Specs of compiled plan nodes that read from and write to catalog tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from jsonplan.core._plan.expressions import Expression
from jsonplan.core._plan.references import ContextResolvedTable


@dataclass(frozen=True)
class ScanSpec:
    """Reads a table, optionally with pushed-down projection, filter and limit.

    Attributes:
        table: The table to read.
        projected_fields: Indices of the columns to read, or None for all columns.
        filter: Predicate pushed into the source, if any.
        limit: Maximum number of rows to read, if any.
        timeout: Source read timeout in seconds, if any.
    """

    table: ContextResolvedTable
    projected_fields: Optional[Tuple[int, ...]] = None
    filter: Optional[Expression] = None
    limit: Optional[int] = None
    timeout: Optional[int] = None


@dataclass(frozen=True)
class SinkSpec:
    """Writes into a table."""

    table: ContextResolvedTable
    overwrite: bool = False
    static_partitions: Dict[str, str] = field(default_factory=dict)
