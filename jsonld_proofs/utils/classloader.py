"""Resolve classes named by dotted path, such as the proof engine in settings."""

from importlib import import_module
from typing import Optional, Type

from ..core.error import BaseError


class ClassNotFoundError(BaseError):
    """Class not found error."""


class ClassLoader:
    """Class used to load classes from modules dynamically."""

    @classmethod
    def load_class(cls, class_name: str, default_module: Optional[str] = None) -> Type:
        """Resolve `package.module.Class`, or a bare `Class` within `default_module`.

        Raises:
            ClassNotFoundError: If the module cannot be imported or does not define
                a class of that name

        """
        mod_path, _, name = class_name.rpartition(".")
        if not mod_path:
            if not default_module:
                raise ClassNotFoundError(
                    f"Cannot resolve class name with no default module: {class_name}"
                )
            mod_path = default_module

        try:
            module = import_module(mod_path)
        except ImportError as err:
            raise ClassNotFoundError(f"Unable to import module {mod_path}") from err

        resolved = getattr(module, name, None)
        if not isinstance(resolved, type):
            raise ClassNotFoundError(f"No class {name} defined in module {mod_path}")
        return resolved
