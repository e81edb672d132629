"""Resolved row expressions of a compiled plan."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Tuple

from jsonplan.core._plan.references import ContextResolvedFunction
from jsonplan.core.types.datatypes import DataType


class Expression(ABC):
    """Base class for resolved expressions; every expression carries its result type."""

    @property
    @abstractmethod
    def data_type(self) -> DataType:
        pass


@dataclass(frozen=True)
class LiteralExpr(Expression):
    """A constant. `value` is None for a typed NULL."""

    value: Any
    literal_type: DataType

    @property
    def data_type(self) -> DataType:
        return self.literal_type

    def __str__(self) -> str:
        return f"{self.value!r}:{self.literal_type}"


@dataclass(frozen=True)
class InputRefExpr(Expression):
    """Reference to a field of the input row by position."""

    index: int
    input_type: DataType

    @property
    def data_type(self) -> DataType:
        return self.input_type

    def __str__(self) -> str:
        return f"${self.index}"


@dataclass(frozen=True)
class CallExpr(Expression):
    """Call of a resolved function or operator."""

    function: ContextResolvedFunction
    operands: Tuple[Expression, ...]
    return_type: DataType

    @property
    def data_type(self) -> DataType:
        return self.return_type

    def __str__(self) -> str:
        return f"{self.function}({', '.join(str(operand) for operand in self.operands)})"
