"""
Settings stores for export options.

A store only answers "what is the value of this option"; defaults and type
checks live in ExportSettings. Unknown options resolve to None.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError
from .utils.logging import get_logger

logger = get_logger(__name__)


class DictSettingsStore:
    """Settings kept in memory, e.g. pushed by a host bridge."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(data or {})

    async def get(self, name: str) -> Any:
        return self.data.get(name)

    async def set(self, **values: Any) -> None:
        self.data.update(values)


class YamlSettingsStore(DictSettingsStore):
    """
    Settings read from a YAML file.

    The file is a flat mapping of option names to values, e.g.

        token: 0123abcd
        note_parent_folder: 5f8d...
        note_tags: email, inbox
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)
        super().__init__(self._load_config())

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            logger.warning(
                f"Settings file not found: {self.config_path}",
                extra={"data": {"path": str(self.config_path)}}
            )
            return {}

        try:
            with open(self.config_path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse settings file {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file {self.config_path} must contain a mapping, got {type(data).__name__}"
            )

        logger.info(
            f"Settings loaded from {self.config_path.name}",
            extra={"data": {"path": str(self.config_path), "entries": len(data)}}
        )
        return data

    def reload(self) -> None:
        """Re-read the file, e.g. after the user edited it."""
        self.data = self._load_config()
