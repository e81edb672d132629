"""Class loading handle used to resolve extension classes referenced by path."""

from __future__ import annotations

import importlib
import logging
from typing import Sequence, Type, TypeVar

from jsonplan._constants import CLASS_PATH_SEPARATOR
from jsonplan.core.error import ClassLoadingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClassLoader:
    """Loads classes from `module:QualName` paths.

    When `allowed_module_prefixes` is non-empty, only classes from modules whose
    dotted name starts with one of the prefixes can be loaded. An empty sequence
    places no restriction on the module.
    """

    def __init__(self, allowed_module_prefixes: Sequence[str] = ()):
        self._allowed_module_prefixes = tuple(allowed_module_prefixes)

    @property
    def allowed_module_prefixes(self) -> tuple[str, ...]:
        return self._allowed_module_prefixes

    def class_path(self, cls: type) -> str:
        """Render the path under which `cls` can be loaded again.

        Raises:
            ClassLoadingError: If the class is defined in a local scope.
        """
        path = f"{cls.__module__}{CLASS_PATH_SEPARATOR}{cls.__qualname__}"
        if "<locals>" in cls.__qualname__:
            raise ClassLoadingError(path, "classes defined in a local scope cannot be referenced")
        return path

    def load_class(self, class_path: str, base: Type[T]) -> Type[T]:
        """Load the class at `class_path` and check it is a subclass of `base`.

        Args:
            class_path: A `module:QualName` path as rendered by `class_path`.
            base: The class the loaded class must derive from.

        Returns:
            The loaded class.

        Raises:
            ClassLoadingError: If the path is malformed, the module is not allowed or
                cannot be imported, the attribute does not exist, or the class does not
                derive from `base`.
        """
        module_name, separator, qualname = class_path.partition(CLASS_PATH_SEPARATOR)
        if not separator or not module_name or not qualname:
            raise ClassLoadingError(
                class_path, f"expected '<module>{CLASS_PATH_SEPARATOR}<qualified name>'"
            )
        if not self._is_allowed(module_name):
            raise ClassLoadingError(
                class_path,
                f"module '{module_name}' is not in the allowed extension modules "
                f"{list(self._allowed_module_prefixes)}",
            )

        try:
            target = importlib.import_module(module_name)
        except ImportError as e:
            raise ClassLoadingError(class_path, str(e)) from e

        for attribute in qualname.split("."):
            if not hasattr(target, attribute):
                raise ClassLoadingError(
                    class_path, f"'{attribute}' not found in {target!r}"
                )
            target = getattr(target, attribute)

        if not isinstance(target, type) or not issubclass(target, base):
            raise ClassLoadingError(class_path, f"not a subclass of {base.__name__}")
        logger.debug(f"Loaded class {class_path}")
        return target

    def _is_allowed(self, module_name: str) -> bool:
        if not self._allowed_module_prefixes:
            return True
        return any(
            module_name == prefix or module_name.startswith(f"{prefix}.")
            for prefix in self._allowed_module_prefixes
        )
