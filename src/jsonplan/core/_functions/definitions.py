"""Function definitions referenced by compiled plans."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

from jsonplan.core.types.datatypes import DataType


class FunctionKind(str, Enum):
    SCALAR = "SCALAR"
    AGGREGATE = "AGGREGATE"
    TABLE = "TABLE"


@dataclass(frozen=True)
class FunctionDefinition:
    """Signature of a built-in, catalog, or inline user-defined function.

    Attributes:
        name: Name of the function, used in error messages.
        kind: Whether the function is scalar, aggregate, or table-valued.
        return_type: The return type, or None when it is inferred from the operands.
        input_types: The operand types, or None when the function is polymorphic.
        deterministic: Whether the function always returns the same result for the
            same operands.
        implementation: Class path of the implementing class for user-defined
            functions, None for built-ins.
    """

    name: str
    kind: FunctionKind = FunctionKind.SCALAR
    return_type: Optional[DataType] = None
    input_types: Optional[Tuple[DataType, ...]] = None
    deterministic: bool = True
    implementation: Optional[str] = None


class UserDefinedFunction:
    """Base class for functions implemented outside of jsonplan.

    Inline (unregistered) functions are serialized by class path and re-created
    through the class loader, so subclasses must be defined at module level.

    Example:
        ```python
        class Reverse(UserDefinedFunction):
            name = "reverse"
            input_types = (StringType,)
            return_type = StringType
        ```
    """

    name: ClassVar[str]
    kind: ClassVar[FunctionKind] = FunctionKind.SCALAR
    input_types: ClassVar[Optional[Tuple[DataType, ...]]] = None
    return_type: ClassVar[Optional[DataType]] = None
    deterministic: ClassVar[bool] = True

    @classmethod
    def definition(cls, implementation: str) -> FunctionDefinition:
        """Build the function definition, recording `implementation` as its class path."""
        return FunctionDefinition(
            name=cls.name,
            kind=cls.kind,
            return_type=cls.return_type,
            input_types=cls.input_types,
            deterministic=cls.deterministic,
            implementation=implementation,
        )
