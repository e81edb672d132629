"""Execution context used to resolve symbolic references during plan serde."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from jsonplan.api.config import SerdeConfig
from jsonplan.core._catalog import EmptyCatalog
from jsonplan.core._class_loader import ClassLoader
from jsonplan.core._functions import FunctionCatalog, FunctionDefinition, OperatorTable
from jsonplan.core._interfaces.catalog import BaseCatalog
from jsonplan.core._parser import Parser
from jsonplan.core._plan.references import ObjectIdentifier, ResolvedTable
from jsonplan.core._type_factory import TypeFactory
from jsonplan.core.error import ValidationError
from jsonplan.core.types.datatypes import DataType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannerEnvironment:
    """Resolved-symbol environment of a serde context.

    Exposes lookups of types by descriptor, functions by system name or
    identifier, and tables by identifier. Lookups return None for unknown
    names; turning that into an error is up to the caller.
    """

    config: SerdeConfig
    catalog: BaseCatalog
    function_catalog: FunctionCatalog
    operator_table: OperatorTable
    parser: Parser

    def qualify(self, parts: List[str]) -> ObjectIdentifier:
        """Qualify a one to three part name with the default catalog and database.

        Raises:
            ValidationError: If there are more than three parts.
        """
        if not 1 <= len(parts) <= 3:
            raise ValidationError(
                f"Identifier {'.'.join(parts)} must have one to three parts, got {len(parts)}"
            )
        if len(parts) == 1:
            return ObjectIdentifier(self.config.default_catalog, self.config.default_database, parts[0])
        if len(parts) == 2:
            return ObjectIdentifier(self.config.default_catalog, parts[0], parts[1])
        return ObjectIdentifier(parts[0], parts[1], parts[2])

    def parse_identifier(self, text: str) -> ObjectIdentifier:
        return self.qualify(self.parser.parse_identifier(text))

    def resolve_type(self, descriptor: str) -> DataType:
        return self.parser.parse_type(descriptor)

    def resolve_function(self, system_name: str) -> Optional[FunctionDefinition]:
        """Resolve a system name; temporary system functions shadow built-ins."""
        definition = self.function_catalog.get_temporary_system_function(system_name)
        if definition is not None:
            return definition
        return self.operator_table.lookup(system_name)

    def resolve_catalog_function(self, identifier: ObjectIdentifier) -> Optional[FunctionDefinition]:
        return self.function_catalog.get_catalog_function(identifier)

    def resolve_table(self, identifier: ObjectIdentifier) -> Optional[ResolvedTable]:
        return self.catalog.get_table(identifier)


@dataclass(frozen=True)
class SerdeContext:
    """Bundle of registries a serializer needs to resolve symbolic references.

    A context is immutable once built and holds no per-call state, so it can be
    shared by concurrent readers. The registries it references must not be
    mutated while the context is in use.
    """

    parser: Parser
    environment: PlannerEnvironment
    class_loader: ClassLoader
    type_factory: TypeFactory
    operator_table: OperatorTable

    @property
    def config(self) -> SerdeConfig:
        return self.environment.config


ConfigLike = Union[SerdeConfig, Mapping[str, Any]]


def resolve_config(config: Optional[ConfigLike]) -> SerdeConfig:
    """Merge a flat option mapping over the default config, or pass a SerdeConfig through."""
    if config is None:
        return SerdeConfig.default()
    if isinstance(config, SerdeConfig):
        return config
    return SerdeConfig.default().with_overrides(config)


def create_serde_context(
    config: Optional[ConfigLike] = None,
    catalog: Optional[BaseCatalog] = None,
    function_catalog: Optional[FunctionCatalog] = None,
    type_factory: Optional[TypeFactory] = None,
    class_loader: Optional[ClassLoader] = None,
) -> SerdeContext:
    """Create a new SerdeContext instance.

    This is the preferred way to get a context for serde operations. Building a
    context only constructs in-memory objects, so it is cheap enough to do per
    test case.

    Args:
        config: A SerdeConfig, or a flat option mapping merged over the defaults.
        catalog: Catalog used to resolve tables. Defaults to an empty catalog.
        function_catalog: Registry of user functions. Defaults to an empty registry.
        type_factory: Type factory. Defaults to the shared `TypeFactory.instance()`.
        class_loader: Class loader. Defaults to one restricted to the configured
            extension modules.

    Returns:
        A new SerdeContext ready for serde operations.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    resolved_config = resolve_config(config)
    class_loader = class_loader or ClassLoader(resolved_config.extension_module_prefixes)
    type_factory = type_factory or TypeFactory.instance()
    operator_table = OperatorTable.default()
    parser = Parser(type_factory, class_loader)
    environment = PlannerEnvironment(
        config=resolved_config,
        catalog=catalog if catalog is not None else EmptyCatalog(),
        function_catalog=function_catalog if function_catalog is not None else FunctionCatalog(),
        operator_table=operator_table,
        parser=parser,
    )
    logger.debug(
        f"Created serde context with {type(environment.catalog).__name__} "
        f"(compile={resolved_config.compile_catalog_objects.value}, "
        f"restore={resolved_config.restore_catalog_objects.value})"
    )
    return SerdeContext(
        parser=parser,
        environment=environment,
        class_loader=class_loader,
        type_factory=type_factory,
        operator_table=operator_table,
    )
