"""Configuration models."""

import os
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
)


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("blogrefresh", description="Database name")
    user: str = Field("blogrefresh", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    min_pool_size: int = Field(1, ge=1, le=20)
    max_pool_size: int = Field(4, ge=1, le=50)

    def resolved_password(self) -> Optional[str]:
        """Password from ``password_env`` when that variable is set, else the inline value."""
        return _from_env(self.password_env) or self.password


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field("openai", description="LLM provider (openai, mock)")
    model: str = Field("gpt-4-turbo", description="Model name")
    api_key_env: Optional[str] = Field("OPENAI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for an OpenAI-compatible API")
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(4000, ge=1, le=32000)

    def resolved_api_key(self) -> Optional[str]:
        """API key from ``api_key_env`` when that variable is set, else the inline value."""
        return _from_env(self.api_key_env) or self.api_key


class CatalogConfig(BaseModel):
    """Blog catalog to ingest articles from."""

    base_url: str = Field("https://beyondchats.com/blogs/", description="Blog listing URL")
    timeout_seconds: float = Field(30.0, gt=0, le=300)
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User agent for catalog requests")

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Page URLs are built by appending 'page/N/'."""
        return v if v.endswith("/") else v + "/"


class BrowserConfig(BaseModel):
    """Headless browser settings."""

    headless: bool = Field(True)
    navigation_timeout_ms: int = Field(30000, ge=1000, le=300000)
    user_agent: str = Field(DEFAULT_USER_AGENT)
    launch_args: List[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"]
    )


class SearchConfig(BaseModel):
    """Search engine settings."""

    search_url: str = Field(
        "https://html.duckduckgo.com/html/?q={query}",
        description="Results page URL; {query} is replaced by the encoded query",
    )
    result_selector: str = Field(".result__a", description="CSS selector of result links")
    max_results: int = Field(2, ge=1, le=2, description="Results scraped per article")
    blocked_domains: List[str] = Field(
        default_factory=lambda: ["duckduckgo.com", "google.com", "bing.com", "yandex.com", "yandex.ru"]
    )

    @field_validator("search_url")
    @classmethod
    def require_query_placeholder(cls, v: str) -> str:
        """Validate that the URL has a query placeholder."""
        if "{query}" not in v:
            raise ValueError("search_url must contain a {query} placeholder")
        return v


class ExtractionConfig(BaseModel):
    """Content length limits, in characters."""

    min_content_chars: int = Field(500, ge=0, le=100000)
    source_excerpt_chars: int = Field(5000, ge=100, le=100000)
    original_prompt_chars: int = Field(500, ge=50, le=100000)
    corpus_prompt_chars: int = Field(15000, ge=100, le=500000)


class PipelineConfig(BaseModel):
    """Refresh pipeline settings."""

    batch_size: int = Field(1, ge=1, le=100, description="Articles per refresh run")
    lease_minutes: int = Field(30, ge=1, le=1440, description="Claim lease before another worker may take over")
    rewrite_timeout_seconds: float = Field(120.0, gt=0, le=3600)
    article_timeout_seconds: float = Field(300.0, gt=0, le=7200)


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field("INFO")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names only."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _from_env(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return os.environ.get(name) or None
