"""Configuration management for blogrefresh."""

from .loader import Config, default_config_path, load_config, save_config
from .models import (
    BrowserConfig,
    CatalogConfig,
    ConfigModel,
    ExtractionConfig,
    LLMConfig,
    PipelineConfig,
    PostgresConfig,
    SearchConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "BrowserConfig",
    "CatalogConfig",
    "ExtractionConfig",
    "LLMConfig",
    "PipelineConfig",
    "PostgresConfig",
    "SearchConfig",
    "default_config_path",
    "load_config",
    "save_config",
]
