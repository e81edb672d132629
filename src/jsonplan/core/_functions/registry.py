"""Registry of user-registered functions.

Functions are registered either as temporary system functions, addressed by a
bare name, or as catalog functions, addressed by a fully qualified identifier.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from jsonplan.core._functions.definitions import FunctionDefinition
from jsonplan.core._plan.references import ObjectIdentifier
from jsonplan.core.error import FunctionAlreadyExistsError, FunctionNotFoundError

logger = logging.getLogger(__name__)


class FunctionCatalog:
    """In-memory registry of temporary system functions and catalog functions."""

    def __init__(
        self,
        temporary_system_functions: Optional[Mapping[str, FunctionDefinition]] = None,
        catalog_functions: Optional[Mapping[ObjectIdentifier, FunctionDefinition]] = None,
    ):
        self._temporary_system_functions: Dict[str, FunctionDefinition] = {
            name.upper(): definition
            for name, definition in (temporary_system_functions or {}).items()
        }
        self._catalog_functions: Dict[ObjectIdentifier, FunctionDefinition] = dict(
            catalog_functions or {}
        )

    def register_temporary_system_function(
        self, name: str, definition: FunctionDefinition, ignore_if_exists: bool = False
    ) -> bool:
        """Register a function addressed by a bare name.

        Returns:
            True if the function was registered, False if it already existed and
            `ignore_if_exists` is set.

        Raises:
            FunctionAlreadyExistsError: If the name is taken and `ignore_if_exists` is False.
        """
        key = name.upper()
        if key in self._temporary_system_functions:
            if ignore_if_exists:
                return False
            raise FunctionAlreadyExistsError(name)
        self._temporary_system_functions[key] = definition
        logger.debug(f"Registered temporary system function {key}")
        return True

    def register_catalog_function(
        self,
        identifier: ObjectIdentifier,
        definition: FunctionDefinition,
        ignore_if_exists: bool = False,
    ) -> bool:
        """Register a function addressed by a fully qualified identifier."""
        if identifier in self._catalog_functions:
            if ignore_if_exists:
                return False
            raise FunctionAlreadyExistsError(str(identifier))
        self._catalog_functions[identifier] = definition
        logger.debug(f"Registered catalog function {identifier}")
        return True

    def drop_temporary_system_function(self, name: str) -> None:
        key = name.upper()
        if key not in self._temporary_system_functions:
            raise FunctionNotFoundError(name, self.list_functions())
        del self._temporary_system_functions[key]

    def get_temporary_system_function(self, name: str) -> Optional[FunctionDefinition]:
        return self._temporary_system_functions.get(name.upper())

    def get_catalog_function(self, identifier: ObjectIdentifier) -> Optional[FunctionDefinition]:
        return self._catalog_functions.get(identifier)

    def list_functions(self) -> List[str]:
        """List the names of all registered functions."""
        return sorted(self._temporary_system_functions) + sorted(
            str(identifier) for identifier in self._catalog_functions
        )
