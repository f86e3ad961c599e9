"""
Configuration management with schema validation.
Single source of truth for VidForge settings.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .exceptions import ConfigError

# Load environment variables
load_dotenv()

CONFIG_DIR = Path("config")
SETTINGS_FILE = CONFIG_DIR / "settings.yaml"

DEFAULT_SYSTEM_PROMPT = """You are an advanced AI video generator that creates high-quality, cinematic videos based on user prompts.

Your capabilities:
- Generate videos with smooth motion and cinematic quality
- Create content in various styles: cinematic, realistic, artistic, animated, documentary
- Support different aspect ratios and durations
- Ensure visual coherence and storytelling throughout the video
- Apply appropriate lighting, camera movements, and visual effects

Output: Return a direct video URL that can be processed by the client."""


class AppSettings(BaseModel):
    name: str = "VidForge"
    version: str = "1.0.0"
    environment: str = "development"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class AuthSettings(BaseModel):
    session_ttl_hours: int = Field(default=24, ge=1)
    sweep_interval_seconds: int = Field(default=3600, ge=1)
    seed_demo_user: bool = True


class HistorySettings(BaseModel):
    max_records: int = Field(default=100, ge=1)
    default_limit: int = Field(default=20, ge=1)
    seed_demo: bool = True
    thumbnail_base_url: str = "https://placehold.co/320x180"


class GenerationSettings(BaseModel):
    endpoint: str = "https://oi-server.onrender.com/chat/completions"
    model: str = "replicate/google/veo-3"
    api_key: str = ""
    customer_id: Optional[str] = None
    timeout_seconds: int = Field(default=900, ge=1)
    connect_timeout: int = Field(default=30, ge=1)
    min_duration: int = 5
    max_duration: int = 60
    placeholder_base_url: str = "https://placehold.co"
    system_prompt: str = DEFAULT_SYSTEM_PROMPT


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)


class ConfigManager:
    """Singleton configuration manager"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self.settings_path = Path(os.getenv("VIDFORGE_SETTINGS", str(SETTINGS_FILE)))
        self._settings: Optional[Settings] = None
        self._initialized = True

    def _substitute_env_vars(self, value: Any) -> Any:
        """Recursively substitute ${VAR} and ${VAR:default} placeholders"""
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return os.getenv(var_name.strip(), default.strip())
                else:
                    return os.getenv(var_expr, value)
        elif isinstance(value, dict):
            return {k: self._substitute_env_vars(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._substitute_env_vars(item) for item in value]
        return value

    def load_settings(self, path: Optional[Path] = None) -> Settings:
        """
        Load and validate settings.yaml.

        An explicit path must exist. Without one, a missing default file
        yields built-in defaults.
        """
        settings_path = Path(path) if path is not None else self.settings_path
        if not settings_path.exists():
            if path is not None:
                raise ConfigError(f"Settings file not found: {settings_path}")
            self._settings = Settings()
            return self._settings

        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                raw_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read settings from {settings_path}: {str(e)}")

        processed_data = self._substitute_env_vars(raw_data)
        try:
            self._settings = Settings(**processed_data)
        except ValueError as e:
            raise ConfigError(f"Invalid settings in {settings_path}: {str(e)}")
        return self._settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            return self.load_settings()
        return self._settings


# Global instance
config_manager = ConfigManager()
