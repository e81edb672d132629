from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from jsonplan.core._plan.references import ObjectIdentifier, ResolvedTable


class BaseCatalog(ABC):
    @abstractmethod
    def get_table(self, identifier: ObjectIdentifier) -> Optional[ResolvedTable]:
        """Look up a table by its fully qualified identifier; None if it does not exist."""
        pass

    @abstractmethod
    def list_tables(self) -> List[ObjectIdentifier]:
        """Get a list of the identifiers of all tables, in sorted order."""
        pass

    def does_table_exist(self, identifier: ObjectIdentifier) -> bool:
        """Checks if a table with the specified identifier exists."""
        return self.get_table(identifier) is not None
