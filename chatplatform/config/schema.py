# chatplatform/config/schema.py
"""
Configuration schema definitions.
All configurable values are defined here with types, defaults, and validation.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any
from enum import Enum


class ConfigCategory(Enum):
    """Categories for grouping configuration fields."""
    SERVER = "server"
    DATABASE = "database"
    SECURITY = "security"
    LLM = "llm"
    UPLOADS = "uploads"
    PATHS = "paths"


@dataclass
class ConfigField:
    """Metadata for a configuration field."""
    name: str
    category: ConfigCategory
    description: str
    field_type: str  # "int", "float", "str", "bool", "list", "path"
    default: Any
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    options: Optional[List[str]] = None
    editable: bool = True
    requires_restart: bool = False


class SettingsSection:
    """Common behaviour of every settings group."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Server Configuration
# =============================================================================

@dataclass
class ServerSettings(SettingsSection):
    """FastAPI server settings."""
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    debug: bool = False

    @classmethod
    def get_field_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField("port", ConfigCategory.SERVER,
                        "HTTP port", "int", 3001, 1, 65535, requires_restart=True),
            ConfigField("log_level", ConfigCategory.SERVER,
                        "Logging level", "str", "INFO",
                        options=["DEBUG", "INFO", "WARNING", "ERROR"]),
            ConfigField("debug", ConfigCategory.SERVER,
                        "Include exception messages in 500 responses", "bool", False),
        ]


# =============================================================================
# Database Configuration
# =============================================================================

@dataclass
class DatabaseSettings(SettingsSection):
    """Relational store settings."""
    url: str = ""  # empty -> SQLite file in the data directory
    echo: bool = False


# =============================================================================
# Security Configuration
# =============================================================================

@dataclass
class SecuritySettings(SettingsSection):
    """Token signing and password hashing settings."""
    secret_key: str = "dev_secret_key_CHANGE_ME_IN_PROD"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 10080  # 7 days
    admin_secret_key: str = ""
    bcrypt_rounds: int = 12

    @classmethod
    def get_field_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField("algorithm", ConfigCategory.SECURITY,
                        "JWT signing algorithm", "str", "HS256",
                        options=["HS256", "HS384", "HS512"], requires_restart=True),
            ConfigField("access_token_expire_minutes", ConfigCategory.SECURITY,
                        "Bearer token lifetime", "int", 10080, 1, 525600),
            ConfigField("bcrypt_rounds", ConfigCategory.SECURITY,
                        "bcrypt cost factor", "int", 12, 4, 16),
        ]


# =============================================================================
# LLM Configuration
# =============================================================================

@dataclass
class LLMSettings(SettingsSection):
    """Upstream chat-completion API settings."""
    api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    models_url: str = "https://openrouter.ai/api/v1/models"
    api_key: str = ""
    default_model: str = "openai/gpt-3.5-turbo"
    max_tokens: int = 4096
    temperature: float = 0.7
    timeout: float = 120.0
    referer: str = "http://localhost:5173"
    title: str = "Chatbot Platform"
    fallback_models: List[Dict[str, str]] = field(default_factory=lambda: [
        {"id": "openai/gpt-3.5-turbo", "name": "GPT-3.5 Turbo"},
        {"id": "openai/gpt-4", "name": "GPT-4"},
        {"id": "anthropic/claude-2", "name": "Claude 2"},
        {"id": "google/gemini-pro", "name": "Gemini Pro"},
    ])

    @classmethod
    def get_field_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField("default_model", ConfigCategory.LLM,
                        "Model assigned to new projects", "str", "openai/gpt-3.5-turbo"),
            ConfigField("max_tokens", ConfigCategory.LLM,
                        "Maximum tokens to generate", "int", 4096, 1, 32768),
            ConfigField("temperature", ConfigCategory.LLM,
                        "Sampling temperature (higher = more random)", "float", 0.7, 0.0, 2.0),
            ConfigField("timeout", ConfigCategory.LLM,
                        "Upstream request timeout in seconds", "float", 120.0, 1.0, 600.0),
        ]


# =============================================================================
# Upload Configuration
# =============================================================================

@dataclass
class UploadSettings(SettingsSection):
    """Project file upload settings."""
    upload_dir: str = "uploads"
    max_file_size_mb: int = 10
    allowed_mime_types: List[str] = field(default_factory=lambda: [
        "text/plain",
        "text/markdown",
        "application/pdf",
        "application/json",
        "text/csv",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ])
    allow_any_text: bool = True

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @classmethod
    def get_field_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField("max_file_size_mb", ConfigCategory.UPLOADS,
                        "Upload size ceiling in MB", "int", 10, 1, 100),
            ConfigField("allow_any_text", ConfigCategory.UPLOADS,
                        "Accept every text/* MIME type", "bool", True),
        ]


# =============================================================================
# Paths
# =============================================================================

@dataclass
class PathSettings(SettingsSection):
    """Application file paths."""
    base_dir: str = ""
    data_dir: str = "data"
