"""Per-request gateway settings.

Settings are addressed by colon-delimited keys such as `DomainController:Url`
or `Jwt:Key`. In any environment other than development, environment
variables take precedence over the structured settings store. Two variable
names are tried for each key:

- `DomainController__Url` (colons replaced with double underscores)
- `DOMAINCONTROLLER_URL` (colons replaced with underscores, upper cased)

The settings store is a YAML document whose nested mappings follow the key
path...

    DomainController:
      Url: ldaps://dc1.example.com
      Domain: CORP
    Jwt:
      Key: change-me
      ExpiresMinutes: 60
"""
import logging
import os
import pathlib
from collections.abc import Mapping
from typing import Any, Tuple

import yaml
from starlette.config import Config

from dcauth.exceptions import ConfigurationError



_LOGGER = logging.getLogger("dcauth.settings")

DEVELOPMENT = "development"


def is_development(environment: str) -> bool:
    return environment.strip().lower() == DEVELOPMENT


def environment_keys(key: str) -> Tuple[str, str]:
    """Return the environment variable names a settings key maps to."""
    return key.replace(":", "__"), key.replace(":", "_").upper()


def _lookup(mapping: Mapping[str, Any], part: str) -> Any:
    if part in mapping:
        return mapping[part]
    folded = part.casefold()
    for name, value in mapping.items():
        if str(name).casefold() == folded:
            return value
    return None


class SettingsStore:
    """Structured settings loaded from a YAML document.
    
    Key lookups are case-insensitive at every level of the path.
    """
    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data = data or {}

    @classmethod
    def from_path(cls, path: pathlib.Path | None) -> "SettingsStore":
        """Load the settings store from a YAML file. A missing file is empty.
        
        Raises:
            ConfigurationError: The file does not contain a mapping.
        """
        if not path or not path.exists():
            _LOGGER.debug("No settings file found at %s", path)
            return cls()
        data = yaml.safe_load(path.read_text())
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")
        return cls(data)

    def get(self, key: str) -> str | None:
        value: Any = self._data
        for part in key.split(":"):
            if not isinstance(value, Mapping):
                return None
            value = _lookup(value, part)
            if value is None:
                return None
        if isinstance(value, (Mapping, list)):
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)


class EnvironmentSettings:
    """Settings source that prefers environment variables over the settings
    store outside of development.

    Args:
        store: The structured settings store.
        environment: The deployment environment name.
        environ: Environment mapping, defaults to `os.environ`.
    """
    def __init__(
        self,
        store: SettingsStore,
        environment: str = "production",
        environ: Mapping[str, str] | None = None
    ) -> None:
        self.store = store
        self.environment = environment
        self._config = Config(environ=environ if environ is not None else os.environ)

    @property
    def is_development(self) -> bool:
        return is_development(self.environment)

    def get(self, key: str) -> str | None:
        if not self.is_development:
            for name in environment_keys(key):
                value = self._config(name, default=None)
                if value:
                    return value
        return self.store.get(key)
