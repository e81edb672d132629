"""Function definitions, the function catalog, and the operator table."""

from jsonplan.core._functions.definitions import (
    FunctionDefinition,
    FunctionKind,
    UserDefinedFunction,
)
from jsonplan.core._functions.operators import OperatorTable
from jsonplan.core._functions.registry import FunctionCatalog

__all__ = [
    "FunctionCatalog",
    "FunctionDefinition",
    "FunctionKind",
    "OperatorTable",
    "UserDefinedFunction",
]
