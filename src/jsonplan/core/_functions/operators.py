"""Table of built-in operators referenced by system name."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from jsonplan.core._functions.definitions import FunctionDefinition, FunctionKind
from jsonplan.core.types.datatypes import BooleanType, IntegerType, StringType


def _comparison(name: str) -> FunctionDefinition:
    return FunctionDefinition(name=name, return_type=BooleanType)


def _arithmetic(name: str) -> FunctionDefinition:
    return FunctionDefinition(name=name)


_BUILTIN_OPERATORS = (
    _comparison("EQUALS"),
    _comparison("NOT_EQUALS"),
    _comparison("GREATER_THAN"),
    _comparison("LESS_THAN"),
    _comparison("IS_NULL"),
    FunctionDefinition(name="AND", return_type=BooleanType, input_types=(BooleanType, BooleanType)),
    FunctionDefinition(name="OR", return_type=BooleanType, input_types=(BooleanType, BooleanType)),
    FunctionDefinition(name="NOT", return_type=BooleanType, input_types=(BooleanType,)),
    _arithmetic("PLUS"),
    _arithmetic("MINUS"),
    _arithmetic("TIMES"),
    _arithmetic("DIVIDE"),
    FunctionDefinition(name="UPPER", return_type=StringType, input_types=(StringType,)),
    FunctionDefinition(name="LOWER", return_type=StringType, input_types=(StringType,)),
    FunctionDefinition(name="CONCAT", return_type=StringType),
    FunctionDefinition(name="COUNT", kind=FunctionKind.AGGREGATE, return_type=IntegerType),
    FunctionDefinition(name="SUM", kind=FunctionKind.AGGREGATE),
)


class OperatorTable:
    """Read-only lookup of built-in operators by their upper-case system name."""

    def __init__(self, operators: Iterable[FunctionDefinition]):
        operators_by_name: Dict[str, FunctionDefinition] = {}
        for operator in operators:
            operators_by_name[operator.name.upper()] = operator
        self._operators: Mapping[str, FunctionDefinition] = MappingProxyType(operators_by_name)

    @classmethod
    def default(cls) -> OperatorTable:
        """Return a table holding the built-in operators."""
        return cls(_BUILTIN_OPERATORS)

    def lookup(self, name: str) -> Optional[FunctionDefinition]:
        return self._operators.get(name.upper())

    def list_operators(self) -> List[str]:
        return sorted(self._operators)
