"""jsonplan error hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from jsonplan.core._plan.references import ObjectIdentifier


# Base exception
class JsonPlanError(Exception):
    """Base exception for all jsonplan errors."""

    pass


# 1. Configuration Errors
class ConfigurationError(JsonPlanError):
    """Errors in the configuration used to build a serde context."""

    pass


# 2. Validation Errors
class ValidationError(JsonPlanError):
    """Invalid usage of public APIs or incorrect arguments."""

    pass


class ParseError(ValidationError):
    """An identifier or type descriptor could not be parsed."""

    def __init__(self, message: str, text: str, position: int):
        """Initialize a parse error.

        Args:
            message: What went wrong.
            text: The text being parsed.
            position: Character offset in `text` where parsing failed.
        """
        self.text = text
        self.position = position
        super().__init__(f"{message} at position {position} in '{text}'")


class ClassLoadingError(ValidationError):
    """A class referenced by path could not be loaded."""

    def __init__(self, class_path: str, reason: str):
        """Initialize a class loading error.

        Args:
            class_path: The `module:QualName` path that failed to load.
            reason: Why loading failed.
        """
        self.class_path = class_path
        super().__init__(f"Could not load class '{class_path}': {reason}")


# 3. Catalog Errors
class CatalogError(JsonPlanError):
    """Catalog and function registry errors."""

    pass


class TableNotFoundError(CatalogError):
    """Table doesn't exist."""

    def __init__(self, identifier: ObjectIdentifier):
        """Initialize a table not found error.

        Args:
            identifier: The identifier of the table that was not found.
        """
        self.identifier = identifier
        super().__init__(f"Table {identifier} does not exist")


class TableAlreadyExistsError(CatalogError):
    """Table already exists."""

    def __init__(self, identifier: ObjectIdentifier):
        """Initialize a table already exists error.

        Args:
            identifier: The identifier of the table that already exists.
        """
        self.identifier = identifier
        super().__init__(f"Table {identifier} already exists")


class FunctionNotFoundError(CatalogError):
    """Function doesn't exist."""

    def __init__(self, function_name: str, available: Optional[list[str]] = None):
        """Initialize a function not found error.

        Args:
            function_name: The name of the function that was not found.
            available: Optional list of function names that are registered.
        """
        self.function_name = function_name
        message = f"Function '{function_name}' does not exist"
        if available:
            message += f". Available functions: {', '.join(sorted(available))}"
        super().__init__(message)


class FunctionAlreadyExistsError(CatalogError):
    """Function already exists."""

    def __init__(self, function_name: str):
        """Initialize a function already exists error.

        Args:
            function_name: The name of the function that already exists.
        """
        self.function_name = function_name
        super().__init__(f"Function '{function_name}' already exists")


# 4. Internal Errors
class InternalError(JsonPlanError):
    """Internal invariant violations."""

    pass
