# chatplatform/config/manager.py
"""
Configuration manager for the platform.

Resolution order, later wins:
    1. dataclass defaults (schema.py)
    2. optional JSON file, one object per section
    3. environment variables (ENV_OVERRIDES)
"""

import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Tuple

from chatplatform.config.schema import (
    ConfigField,
    ServerSettings,
    DatabaseSettings,
    SecuritySettings,
    LLMSettings,
    UploadSettings,
    PathSettings,
)
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

SECTIONS = {
    "server": ServerSettings,
    "database": DatabaseSettings,
    "security": SecuritySettings,
    "llm": LLMSettings,
    "uploads": UploadSettings,
    "paths": PathSettings,
}


def _as_bool(raw: str) -> bool:
    return raw.lower() in ("1", "true", "yes", "on")


def _as_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


# (section, field, env var, caster)
ENV_OVERRIDES: List[Tuple[str, str, str, Callable[[str], Any]]] = [
    ("server", "log_level", "LOG_LEVEL", str.upper),
    ("server", "debug", "DEBUG", _as_bool),
    ("server", "cors_origins", "FRONTEND_URL", _as_list),
    ("server", "port", "PORT", int),
    ("database", "url", "DATABASE_URL", str),
    ("security", "secret_key", "JWT_SECRET", str),
    ("security", "admin_secret_key", "ADMIN_SECRET_KEY", str),
    ("llm", "api_key", "OPENROUTER_API_KEY", str),
    ("llm", "referer", "FRONTEND_URL", str),
    ("uploads", "upload_dir", "UPLOAD_DIR", str),
]

_TYPE_CHECKS = {
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "float": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "bool": lambda v: isinstance(v, bool),
    "str": lambda v: isinstance(v, str),
}


class ConfigurationManager:
    """
    Process-wide settings holder (singleton).

    Section objects are created once and mutated in place, so modules that
    imported e.g. ``LLM`` keep seeing current values.
    """

    _instance = None
    _lock = Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._sections = {name: factory() for name, factory in SECTIONS.items()}
                    instance._config_file = None
                    instance._mutex = Lock()
                    cls._instance = instance
        return cls._instance

    def initialize(self, config_file: Optional[str] = None, base_dir: Optional[str] = None):
        """
        Load the JSON file (if present) and environment overrides, then
        anchor relative paths at ``base_dir`` (defaults to the repo root).
        """
        with self._mutex:
            self.paths.base_dir = base_dir or str(Path(__file__).resolve().parents[2])

            if config_file:
                path = Path(config_file)
                self._config_file = path if path.is_absolute() else Path(self.paths.base_dir) / path
                if self._config_file.exists():
                    self._load_from_file()

            self._apply_env()
            self._resolve_paths()

    def _load_from_file(self):
        try:
            data = json.loads(self._config_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable config file {self._config_file}: {e}")
            return

        for name, values in data.items():
            section = self._sections.get(name)
            if section is None or not isinstance(values, dict):
                continue
            for field, value in values.items():
                if hasattr(section, field):
                    setattr(section, field, value)

        logger.info(f"Configuration loaded from {self._config_file}")

    def _apply_env(self):
        for name, field, env_var, caster in ENV_OVERRIDES:
            raw = os.getenv(env_var, "").strip()
            if not raw:
                continue
            try:
                setattr(self._sections[name], field, caster(raw))
            except ValueError:
                logger.warning(f"Ignoring invalid value for {env_var}")

    def _resolve_paths(self):
        base = Path(self.paths.base_dir)
        for section, field in (("paths", "data_dir"), ("uploads", "upload_dir")):
            value = Path(getattr(self._sections[section], field))
            if not value.is_absolute():
                setattr(self._sections[section], field, str(base / value))

    # =========================================================================
    # Section accessors
    # =========================================================================

    @property
    def server(self) -> ServerSettings:
        return self._sections["server"]

    @property
    def database(self) -> DatabaseSettings:
        return self._sections["database"]

    @property
    def security(self) -> SecuritySettings:
        return self._sections["security"]

    @property
    def llm(self) -> LLMSettings:
        return self._sections["llm"]

    @property
    def uploads(self) -> UploadSettings:
        return self._sections["uploads"]

    @property
    def paths(self) -> PathSettings:
        return self._sections["paths"]

    # =========================================================================
    # Runtime access
    # =========================================================================

    def get(self, category: str, field: str) -> Any:
        """Single value, or None for an unknown section/field."""
        section = self._sections.get(category)
        return getattr(section, field, None) if section is not None else None

    def get_section(self, category: str) -> Optional[Dict[str, Any]]:
        section = self._sections.get(category)
        return section.to_dict() if section is not None else None

    def get_all_values(self) -> Dict[str, Dict[str, Any]]:
        return {name: section.to_dict() for name, section in self._sections.items()}

    def set(self, category: str, field: str, value: Any) -> bool:
        """
        Update a value at runtime.

        Returns:
            False (and leaves the value unchanged) for an unknown field or a
            value rejected by the field's metadata.
        """
        section = self._sections.get(category)
        if section is None or not hasattr(section, field):
            return False

        meta = self._field_metadata(category, field)
        if meta is not None and not self._valid(meta, value):
            logger.warning(f"Rejected {category}.{field}={value!r}")
            return False

        with self._mutex:
            setattr(section, field, value)
        return True

    def _field_metadata(self, category: str, field: str) -> Optional[ConfigField]:
        describe = getattr(SECTIONS[category], "get_field_metadata", None)
        if describe is None:
            return None
        return next((meta for meta in describe() if meta.name == field), None)

    @staticmethod
    def _valid(meta: ConfigField, value: Any) -> bool:
        check = _TYPE_CHECKS.get(meta.field_type)
        if check is not None and not check(value):
            return False
        if meta.min_value is not None and value < meta.min_value:
            return False
        if meta.max_value is not None and value > meta.max_value:
            return False
        if meta.options and value not in meta.options:
            return False
        return True


# Global configuration manager instance
config_manager = ConfigurationManager()
