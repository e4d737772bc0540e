"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel

CONFIG_ENV_VAR = "BLOGREFRESH_CONFIG"


def default_config_path() -> Path:
    """Config path from the environment, else the per-user default."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "blogrefresh" / "config.yaml"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = default_config_path()
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @classmethod
    def from_model(cls, model: ConfigModel) -> "Config":
        """Wrap an already built model (no file involved)."""
        config = cls(Path(os.devnull))
        config._config = model
        return config

    @property
    def config(self) -> ConfigModel:
        """Model loaded from ``config_path`` on first access."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def get_db_config(self) -> Dict[str, Any]:
        """Connection settings for ``Database``, with the password resolved."""
        postgres = self.config.postgres
        settings = postgres.model_dump(exclude={"password", "password_env"})
        settings["password"] = postgres.resolved_password()
        return settings

    def get_llm_config(self) -> Dict[str, Any]:
        """Provider settings for ``create_llm_provider``, with the API key resolved."""
        llm = self.config.llm
        settings = llm.model_dump(exclude={"api_key", "api_key_env"})
        settings["api_key"] = llm.resolved_api_key()
        return settings


def load_config(config_path: Path) -> ConfigModel:
    """
    Read and validate a YAML config file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: ``config_path`` does not exist
        ValueError: The file is not YAML or does not validate
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e

    try:
        return ConfigModel.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Write ``config`` as YAML, creating parent directories."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        yaml.safe_dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    )
