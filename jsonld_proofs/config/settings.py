"""Settings implementation."""

from typing import Any, Iterator, Mapping, Optional

from ..core.error import BaseError

SKOLEM_PREFIX_SETTING = "jsonld.skolem_prefix"
PROOF_ENGINE_CLASS_SETTING = "proof_engine.class"
LOG_CONFIG_SETTING = "log.config"
LOG_LEVEL_SETTING = "log.level"
LOG_FILE_SETTING = "log.file"

DEFAULT_SETTINGS = {
    SKOLEM_PREFIX_SETTING: "urn:bnid:",
}

FALSE_VALUES = ("false", "False", "0")


class ConfigError(BaseError):
    """A base exception for all configuration errors."""


class SettingsError(ConfigError):
    """Invalid setting name or value."""


class Settings(Mapping[str, Any]):
    """Mutable settings, falling back to `DEFAULT_SETTINGS`."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        """Initialize a Settings object.

        Args:
            values: An optional dictionary of settings
        """
        self._values = {**DEFAULT_SETTINGS, **(values or {})}

    def get_value(self, *var_names, default=None):
        """Fetch the first defined setting among `var_names`."""
        for name in var_names:
            if name in self._values:
                return self._values[name]
        return default

    def get_bool(self, *var_names, default: Optional[bool] = None) -> Optional[bool]:
        """Fetch a setting as a boolean value."""
        value = self.get_value(*var_names, default=default)
        if value is None:
            return None
        return bool(value) and value not in FALSE_VALUES

    def get_str(self, *var_names, default: Optional[str] = None) -> Optional[str]:
        """Fetch a setting as a string value."""
        value = self.get_value(*var_names, default=default)
        return None if value is None else str(value)

    def set_value(self, var_name: str, value):
        """Add a setting."""
        if not isinstance(var_name, str) or not var_name:
            raise SettingsError("Setting name must be a non-empty string")
        self._values[var_name] = value

    def clear_value(self, var_name: str):
        """Remove a setting."""
        self._values.pop(var_name, None)

    @property
    def skolem_prefix(self) -> str:
        """Accessor for the IRI prefix used when skolemizing blank nodes."""
        prefix = self.get_str(SKOLEM_PREFIX_SETTING)
        if not prefix or ":" not in prefix:
            raise SettingsError(
                f"Setting {SKOLEM_PREFIX_SETTING} must be an absolute IRI prefix"
            )
        return prefix

    def copy(self) -> "Settings":
        """Produce a copy of the settings instance."""
        return Settings(self._values)

    def extend(self, other: Mapping[str, Any]) -> "Settings":
        """Merge another mapping to produce a new settings instance."""
        return Settings({**self._values, **other})

    def __getitem__(self, index):
        """Fetch a setting, raising `KeyError` when undefined."""
        if not isinstance(index, str):
            raise TypeError(f"Index {index} must be a string")
        if index not in self._values:
            raise KeyError(f"Undefined index: {index}")
        return self._values[index]

    def __setitem__(self, index, value):
        """Implement update operator for array index."""
        self.set_value(index, value)

    def __delitem__(self, index):
        """Implement del operator for array index."""
        self.clear_value(index)

    def __contains__(self, index) -> bool:
        """Define 'in' operator."""
        return index in self._values

    def __iter__(self) -> Iterator[str]:
        """Iterate settings keys."""
        return iter(self._values)

    def __len__(self) -> int:
        """Fetch the length of the mapping."""
        return len(self._values)

    def __repr__(self) -> str:
        """Provide a human readable representation of this object."""
        items = ", ".join(f"{k}={v}" for k, v in self._values.items())
        return f"<Settings({items})>"
