"""Catalog object references embedded in compiled plans.

Tables and functions are resolved against the catalog and function registries
while a plan is compiled. The context-resolved variants keep both the symbolic
reference and the resolved object, so that a serialized plan can be restored by
re-binding the reference against a live catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from jsonplan._constants import DEFAULT_CATALOG_NAME, DEFAULT_DATABASE_NAME
from jsonplan.core._type_factory import quote_identifier
from jsonplan.core.types.schema import Schema

if TYPE_CHECKING:
    from jsonplan.core._functions.definitions import FunctionDefinition


@dataclass(frozen=True, order=True)
class ObjectIdentifier:
    """Fully qualified name of a catalog object."""

    catalog: str
    database: str
    name: str

    @classmethod
    def of(
        cls,
        name: str,
        database: str = DEFAULT_DATABASE_NAME,
        catalog: str = DEFAULT_CATALOG_NAME,
    ) -> ObjectIdentifier:
        return cls(catalog=catalog, database=database, name=name)

    def as_serializable_string(self) -> str:
        """Render the identifier with every part backtick-quoted."""
        return ".".join(quote_identifier(part) for part in (self.catalog, self.database, self.name))

    def __str__(self) -> str:
        return self.as_serializable_string()


@dataclass(frozen=True)
class ResolvedTable:
    """Metadata of a catalog table as seen by the planner.

    Attributes:
        schema: The table schema.
        options: Connector options of the table.
        comment: Optional description of the table.
    """

    schema: Schema
    options: Dict[str, str] = field(default_factory=dict)
    comment: Optional[str] = None

    def copy_with_options(self, options: Dict[str, str]) -> ResolvedTable:
        return ResolvedTable(schema=self.schema, options=dict(options), comment=self.comment)


@dataclass(frozen=True)
class ContextResolvedTable:
    """A table resolved against the catalog of the planning context.

    Anonymous tables are declared inline and have no catalog entry; their
    identifier is only used for display and they are always persisted with
    their full metadata.
    """

    identifier: ObjectIdentifier
    resolved_table: ResolvedTable
    anonymous: bool = False

    @classmethod
    def permanent(cls, identifier: ObjectIdentifier, resolved_table: ResolvedTable) -> ContextResolvedTable:
        return cls(identifier=identifier, resolved_table=resolved_table)

    @classmethod
    def anonymous_table(cls, name: str, resolved_table: ResolvedTable) -> ContextResolvedTable:
        return cls(
            identifier=ObjectIdentifier.of(name, database="*anonymous*", catalog="*anonymous*"),
            resolved_table=resolved_table,
            anonymous=True,
        )


@dataclass(frozen=True)
class ContextResolvedFunction:
    """A function resolved against the operator table or function catalog.

    Exactly one way of addressing the function applies:
      - `system_name`: a built-in operator or a temporary system function.
      - `identifier`: a catalog function.
      - neither: an inline user-defined function, addressed by the class path
        stored in `definition.implementation`.
    """

    definition: FunctionDefinition
    system_name: Optional[str] = None
    identifier: Optional[ObjectIdentifier] = None

    @property
    def is_anonymous(self) -> bool:
        return self.system_name is None and self.identifier is None

    def __str__(self) -> str:
        if self.system_name is not None:
            return self.system_name
        if self.identifier is not None:
            return str(self.identifier)
        return f"{self.definition.name} ({self.definition.implementation})"
