"""Values of compiled plans that are serialized to JSON."""

from jsonplan.core._plan.expressions import (
    CallExpr,
    Expression,
    InputRefExpr,
    LiteralExpr,
)
from jsonplan.core._plan.references import (
    ContextResolvedFunction,
    ContextResolvedTable,
    ObjectIdentifier,
    ResolvedTable,
)
from jsonplan.core._plan.specs import ScanSpec, SinkSpec

__all__ = [
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
]
