"""Schema definitions for tables referenced by compiled plans.

This module provides ColumnField for individual column definitions and Schema for
the complete structure of a catalog table.
"""
from __future__ import annotations

from typing import List

from pydantic.dataclasses import ConfigDict, dataclass

from jsonplan._constants import PRETTY_PRINT_INDENT
from jsonplan.core.types.datatypes import DataType


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class ColumnField:
    """Represents a typed column in a table schema.

    Attributes:
        name: The name of the column.
        data_type: The data type of the column, as a DataType instance.
    """

    name: str
    data_type: DataType

    def __str__(self) -> str:
        return f"ColumnField(name='{self.name}', data_type={self.data_type})"


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class Schema:
    """Represents the schema of a table.

    Attributes:
        column_fields: An ordered list of ColumnField objects that define the
            structure of the table.
    """

    column_fields: List[ColumnField]

    def __str__(self) -> str:
        """Return a multi-line string showing the schema structure."""
        field_strs = [f"{PRETTY_PRINT_INDENT}{field}" for field in self.column_fields]
        fields_content = "\n".join(field_strs)
        return f"Schema(\n{fields_content}\n)"

    def __hash__(self):
        return hash(tuple((field.name, field.data_type) for field in self.column_fields))
