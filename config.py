"""
Centralized configuration for the competitor tracker.

Loads all environment variables and provides typed configuration objects.
No hardcoded secrets - all sensitive values must come from environment.
"""

import os
from typing import Optional
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class DatabaseConfig:
    """Relational store holding channels and their daily snapshots."""

    # Support direct DATABASE_URL or individual components
    database_url: Optional[str] = field(
        default_factory=lambda: os.getenv("DATABASE_URL"))
    host: str = field(default_factory=lambda: os.getenv(
        "POSTGRES_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(
        os.getenv("POSTGRES_PORT", "5432")))
    user: str = field(
        default_factory=lambda: os.getenv("POSTGRES_USER", "tracker_admin"))
    password: Optional[str] = field(
        default_factory=lambda: os.getenv("POSTGRES_PASSWORD"))
    database: str = field(default_factory=lambda: os.getenv(
        "POSTGRES_DB", "competitor_tracker"))
    ssl_mode: str = field(default_factory=lambda: os.getenv(
        "POSTGRES_SSL_MODE", "prefer"))

    @property
    def url(self) -> str:
        """
        Build the SQLAlchemy connection URL.

        Prioritizes DATABASE_URL if set, otherwise builds a PostgreSQL URL
        from components.
        """
        if self.database_url:
            url = self.database_url
            # Normalize postgres:// to postgresql://
            if url.startswith("postgres://"):
                return url.replace("postgres://", "postgresql://", 1)
            return url

        auth = f"{self.user}:{self.password}@" if self.password else f"{self.user}@"
        return f"postgresql://{auth}{self.host}:{self.port}/{self.database}?sslmode={self.ssl_mode}"


@dataclass
class YouTubeConfig:
    """YouTube Data API v3 access (API key, public channel statistics)."""

    api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("YOUTUBE_API_KEY"))
    default_country: str = field(
        default_factory=lambda: os.getenv("YOUTUBE_DEFAULT_COUNTRY", "BR"))
    max_results: int = field(default_factory=lambda: int(
        os.getenv("YOUTUBE_MAX_RESULTS", "10")))


@dataclass
class LLMConfig:
    """LLM provider configuration - supports Azure OpenAI (default) and Gemini (fallback)."""

    provider: str = field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "azure_openai"))
    temperature: float = field(default_factory=lambda: float(
        os.getenv("LLM_TEMPERATURE", "0.3")))
    max_tokens: int = field(default_factory=lambda: int(
        os.getenv("LLM_MAX_TOKENS", "2048")))
    response_language: str = field(
        default_factory=lambda: os.getenv("LLM_RESPONSE_LANGUAGE", "Brazilian Portuguese"))

    # Azure OpenAI configuration
    azure_openai_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_API_KEY"))
    azure_openai_endpoint: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_ENDPOINT"))
    azure_openai_api_version: str = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-15-preview"))
    azure_openai_deployment_name: Optional[str] = field(
        default_factory=lambda: os.getenv("AZURE_OPENAI_DEPLOYMENT"))

    # Gemini configuration (fallback)
    gemini_api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    gemini_model: str = field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.5-flash"))


@dataclass
class ServerConfig:
    """Server runtime configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(
        os.getenv("SERVER_PORT", "8080")))
    debug: bool = field(default_factory=lambda: os.getenv(
        "DEBUG", "false").lower() == "true")
    log_level: str = field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cors_origins: list[str] = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*").split(",")
    )


@dataclass
class Config:
    """
    Root configuration object aggregating all config sections.

    Usage:
        config = Config()
        db_url = config.database.url
        api_key = config.youtube.api_key
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of warnings/errors.

        Returns:
            List of validation messages (empty if all valid)
        """
        warnings = []

        if not self.youtube.api_key:
            warnings.append("YOUTUBE_API_KEY not set - channel sync and lookup will fail")

        if not self.llm.azure_openai_api_key and not self.llm.gemini_api_key:
            warnings.append("No LLM API key set (Azure OpenAI or Gemini) - growth analysis will fail")

        if not self.database.database_url and not self.database.password and not self.server.debug:
            warnings.append("POSTGRES_PASSWORD not set in production mode")

        return warnings


# Global config instance - import and use this
config = Config()
