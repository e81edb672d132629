"""Configuration of serde contexts."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from jsonplan._constants import DEFAULT_CATALOG_NAME, DEFAULT_DATABASE_NAME
from jsonplan.core.error import ConfigurationError

logger = logging.getLogger(__name__)


class CatalogPlanCompilation(str, Enum):
    """How much catalog table metadata is written into a compiled plan."""

    ALL = "ALL"
    """Identifier, schema, options and comment."""
    SCHEMA = "SCHEMA"
    """Identifier and schema; options are read from the catalog on restore."""
    IDENTIFIER = "IDENTIFIER"
    """Identifier only; the table must exist in the catalog on restore."""


class CatalogPlanRestore(str, Enum):
    """How catalog tables are resolved when a compiled plan is restored."""

    ALL = "ALL"
    """Use the persisted metadata, falling back to the catalog when only the identifier was persisted."""
    ALL_ENFORCED = "ALL_ENFORCED"
    """Use the persisted metadata; fail if the plan only contains the identifier."""
    IDENTIFIER = "IDENTIFIER"
    """Always look the table up in the catalog, ignoring persisted metadata."""


class SerdeConfig(BaseModel):
    """Configuration consumed when building a serde context.

    Options can be given by field name or by their dotted option key, e.g.
    `"plan.compile.catalog-objects"`. Unrecognized options are ignored so that
    configurations can be minimal.

    Attributes:
        default_catalog: Catalog used to qualify partial identifiers.
        default_database: Database used to qualify partial identifiers.
        compile_catalog_objects: How much table metadata is written to plans.
        restore_catalog_objects: How tables are resolved when plans are restored.
        pretty_print: Indent serialized JSON.
        extension_module_prefixes: Modules from which extension classes may be
            loaded. Empty means unrestricted.

    Example:
        ```python
        config = SerdeConfig.default().with_overrides(
            {"plan.compile.catalog-objects": "IDENTIFIER"}
        )
        ```
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    default_catalog: str = Field(default=DEFAULT_CATALOG_NAME, alias="catalog.default-catalog")
    default_database: str = Field(default=DEFAULT_DATABASE_NAME, alias="catalog.default-database")
    compile_catalog_objects: CatalogPlanCompilation = Field(
        default=CatalogPlanCompilation.ALL, alias="plan.compile.catalog-objects"
    )
    restore_catalog_objects: CatalogPlanRestore = Field(
        default=CatalogPlanRestore.ALL, alias="plan.restore.catalog-objects"
    )
    pretty_print: bool = Field(default=False, alias="plan.json.pretty-print")
    extension_module_prefixes: Tuple[str, ...] = Field(default=(), alias="plan.extension-modules")

    @field_validator("compile_catalog_objects", "restore_catalog_objects", mode="before")
    @classmethod
    def _normalize_enum_case(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("extension_module_prefixes", mode="before")
    @classmethod
    def _split_module_prefixes(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(prefix.strip() for prefix in value.split(",") if prefix.strip())
        return value

    @model_validator(mode="after")
    def _validate_default_names(self) -> SerdeConfig:
        if not self.default_catalog.strip():
            raise ConfigurationError("default_catalog must not be blank")
        if not self.default_database.strip():
            raise ConfigurationError("default_database must not be blank")
        return self

    @classmethod
    def default(cls) -> SerdeConfig:
        return cls()

    @classmethod
    def option_keys(cls) -> Dict[str, str]:
        """Map every accepted option key (field name or alias) to its field name."""
        keys = {}
        for name, field_info in cls.model_fields.items():
            keys[name] = name
            if field_info.alias:
                keys[field_info.alias] = name
        return keys

    def with_overrides(self, overrides: Mapping[str, Any]) -> SerdeConfig:
        """Return a copy of this config with `overrides` merged over its values.

        Raises:
            ConfigurationError: If an override has an invalid value.
        """
        option_keys = self.option_keys()
        merged = self.model_dump()
        for key, value in overrides.items():
            field_name = option_keys.get(key)
            if field_name is None:
                logger.debug(f"Ignoring unrecognized configuration option '{key}'")
                continue
            merged[field_name] = value
        try:
            return SerdeConfig.model_validate(merged)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid serde configuration: {e}") from e
