"""In-memory catalogs used to resolve table references in serde contexts."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from jsonplan.core._interfaces.catalog import BaseCatalog
from jsonplan.core._plan.references import ObjectIdentifier, ResolvedTable
from jsonplan.core.error import TableAlreadyExistsError, TableNotFoundError

logger = logging.getLogger(__name__)


class EmptyCatalog(BaseCatalog):
    """A catalog without any tables."""

    def get_table(self, identifier: ObjectIdentifier) -> Optional[ResolvedTable]:
        return None

    def list_tables(self) -> List[ObjectIdentifier]:
        return []


class InMemoryCatalog(BaseCatalog):
    """A catalog holding tables in a dictionary keyed by identifier."""

    def __init__(self, tables: Optional[Mapping[ObjectIdentifier, ResolvedTable]] = None):
        self._tables: Dict[ObjectIdentifier, ResolvedTable] = dict(tables or {})

    def get_table(self, identifier: ObjectIdentifier) -> Optional[ResolvedTable]:
        return self._tables.get(identifier)

    def list_tables(self) -> List[ObjectIdentifier]:
        return sorted(self._tables)

    def create_table(
        self,
        identifier: ObjectIdentifier,
        table: ResolvedTable,
        ignore_if_exists: bool = False,
    ) -> bool:
        """Create a table.

        Returns:
            True if the table was created, False if it already existed and
            `ignore_if_exists` is set.

        Raises:
            TableAlreadyExistsError: If the table exists and `ignore_if_exists` is False.
        """
        if identifier in self._tables:
            if ignore_if_exists:
                return False
            raise TableAlreadyExistsError(identifier)
        self._tables[identifier] = table
        logger.debug(f"Created table {identifier}")
        return True

    def drop_table(self, identifier: ObjectIdentifier, ignore_if_not_exists: bool = False) -> bool:
        """Drop a table.

        Raises:
            TableNotFoundError: If the table does not exist and `ignore_if_not_exists` is False.
        """
        if identifier not in self._tables:
            if ignore_if_not_exists:
                return False
            raise TableNotFoundError(identifier)
        del self._tables[identifier]
        logger.debug(f"Dropped table {identifier}")
        return True
