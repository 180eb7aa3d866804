# chatplatform/config/__init__.py
"""
Centralized configuration system.

Usage:
    from chatplatform.config import config, SERVER, SECURITY, LLM, UPLOADS

    # Access settings
    max_tokens = LLM.max_tokens
    limit = UPLOADS.max_file_size_bytes

    # Update settings
    config.set('llm', 'temperature', 0.8)
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from chatplatform.config.schema import (
    ServerSettings,
    DatabaseSettings,
    SecuritySettings,
    LLMSettings,
    UploadSettings,
    PathSettings,
    ConfigCategory,
    ConfigField,
)
from chatplatform.config.manager import config_manager

load_dotenv()

_base_dir = Path(__file__).parent.parent.parent
config_manager.initialize(
    config_file=os.getenv("CHATPLATFORM_CONFIG", "config.json"),
    base_dir=str(_base_dir)
)

config = config_manager

# Direct access to settings groups
SERVER = config_manager.server
DATABASE = config_manager.database
SECURITY = config_manager.security
LLM = config_manager.llm
UPLOADS = config_manager.uploads
PATHS = config_manager.paths

__all__ = [
    "config",
    "config_manager",
    "SERVER",
    "DATABASE",
    "SECURITY",
    "LLM",
    "UPLOADS",
    "PATHS",
    "ServerSettings",
    "DatabaseSettings",
    "SecuritySettings",
    "LLMSettings",
    "UploadSettings",
    "PathSettings",
    "ConfigCategory",
    "ConfigField",
]
