"""
Honig - Configuration

Pydantic Settings for all configuration via environment variables.
"""

import logging
from typing import List, Literal, Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings


DEFAULT_BLOCKED_DOMAINS = [
    "reddit.com",
    "twitter.com",
    "x.com",
    "facebook.com",
    "instagram.com",
    "linkedin.com",
    "researchgate.net",
    "academia.edu",
]


class LLMSettings(BaseSettings):
    """Completion capability configuration."""
    provider: Literal["gemini", "openai", "lm_studio"] = Field(
        "gemini", alias="LLM_PROVIDER"
    )
    base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta", alias="LLM_BASE_URL"
    )
    api_key: Optional[str] = Field(None, alias="LLM_API_KEY")
    model: str = Field("gemini-2.0-flash", alias="LLM_MODEL")
    timeout_ms: int = Field(30000, alias="LLM_TIMEOUT_MS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class SearchSettings(BaseSettings):
    """Source adapter configuration."""
    serper_api_key: Optional[str] = Field(None, alias="SERPER_API_KEY")
    serper_url: str = Field("https://google.serper.dev/search", alias="SERPER_URL")
    news_api_key: Optional[str] = Field(None, alias="NEWS_API_KEY")
    news_api_url: str = Field(
        "https://newsapi.org/v2/everything", alias="NEWS_API_URL"
    )
    wikipedia_api_url: str = Field(
        "https://en.wikipedia.org/w/api.php", alias="WIKIPEDIA_API_URL"
    )
    timeout_ms: int = Field(10000, alias="SEARCH_TIMEOUT_MS")
    max_candidates: int = Field(15, alias="MAX_CANDIDATES")

    model_config = {"env_prefix": "", "extra": "ignore"}


class ScraperSettings(BaseSettings):
    """Web scraper configuration."""
    timeout_ms: int = Field(8000, alias="SCRAPER_TIMEOUT_MS")
    max_content_length: int = Field(15000, alias="SCRAPER_MAX_CONTENT_LENGTH")
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; HonigAgent/1.0)", alias="SCRAPER_USER_AGENT"
    )
    cors_proxy_url: str = Field(
        "https://api.allorigins.win/get", alias="SCRAPER_CORS_PROXY_URL"
    )
    blocked_domains: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_DOMAINS),
        alias="SCRAPER_BLOCKED_DOMAINS",
    )
    min_content_chars: int = Field(100, alias="SCRAPER_MIN_CONTENT_CHARS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class EngineSettings(BaseSettings):
    """Answer pipeline configuration."""
    pipeline_timeout_ms: int = Field(15000, alias="PIPELINE_TIMEOUT_MS")
    direct_timeout_ms: int = Field(8000, alias="DIRECT_TIMEOUT_MS")
    max_sources_to_scrape: int = Field(12, alias="MAX_SOURCES_TO_SCRAPE")
    synthesis_source_chars: int = Field(2000, alias="SYNTHESIS_SOURCE_CHARS")
    enable_database_check: bool = Field(True, alias="ENABLE_DATABASE_CHECK")
    enable_routing: bool = Field(True, alias="ENABLE_ROUTING")

    model_config = {"env_prefix": "", "extra": "ignore"}


class CacheSettings(BaseSettings):
    """Response cache configuration."""
    enabled: bool = Field(True, alias="CACHE_ENABLED")
    max_entries: int = Field(100, alias="CACHE_MAX_ENTRIES")
    ttl_seconds: int = Field(300, alias="CACHE_TTL_SECONDS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class KnowledgeStoreSettings(BaseSettings):
    """Private knowledge store (Qdrant) configuration."""
    enabled: bool = Field(False, alias="KNOWLEDGE_STORE_ENABLED")
    host: str = Field("localhost", alias="QDRANT_HOST")
    port: int = Field(6333, alias="QDRANT_PORT")
    api_key: Optional[str] = Field(None, alias="QDRANT_API_KEY")
    collection: str = Field("honig_responses", alias="KNOWLEDGE_COLLECTION")

    model_config = {"env_prefix": "", "extra": "ignore"}


class MCPSettings(BaseSettings):
    """MCP server configuration."""
    transport: Literal["sse", "stdio"] = Field("stdio", alias="MCP_TRANSPORT")
    port: int = Field(8080, alias="MCP_PORT")
    host: str = Field("0.0.0.0", alias="MCP_HOST")

    model_config = {"env_prefix": "", "extra": "ignore"}


class LogSettings(BaseSettings):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", alias="LOG_LEVEL"
    )
    format: Literal["json", "text"] = Field("text", alias="LOG_FORMAT")

    model_config = {"env_prefix": "", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings aggregating all configuration."""
    llm: LLMSettings = Field(default_factory=LLMSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    knowledge: KnowledgeStoreSettings = Field(default_factory=KnowledgeStoreSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = {"env_prefix": "", "extra": "ignore"}


class ConfigurationError(RuntimeError):
    """A required credential or setting is missing."""


def get_settings() -> Settings:
    """Load settings from environment variables."""
    from dotenv import load_dotenv
    load_dotenv()
    return Settings()


TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def json_formatter() -> logging.Formatter:
    """Render stdlib records as one JSON object per line."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.processors.TimeStamper(fmt="iso", key="time"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.format_exc_info,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(settings: Optional[Settings] = None, stream=None) -> None:
    """Configure root logging from LogSettings."""
    settings = settings or get_settings()

    handler = logging.StreamHandler(stream)
    if settings.log.format == "json":
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(level=settings.log.level, handlers=[handler], force=True)

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
