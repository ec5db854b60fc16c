"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (TRUTHRANK_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP facade configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class RankingSettings(BaseModel):
    """Tunables for relevance and trust scoring.

    The blend weights of the combined score are fixed; only the knobs that
    change behaviour at the edges are configurable.
    """

    empty_query_relevance: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Relevance assigned to every record when the query is empty",
    )
    fuzzy_coverage_damping: float = Field(
        default=0.6,
        gt=0.0,
        lt=1.0,
        description="Weight of fuzzy-only keyword matches in per-field coverage",
    )
    max_keywords: int = Field(default=24, ge=1, description="Maximum distinct query keywords considered")
    reference_year: int | None = Field(
        default=None,
        description="Fixed 'current' year for age and date scoring (None = current UTC year)",
    )


class ContentSettings(BaseModel):
    """Content-safety classification configuration."""

    default_mode: str = Field(
        default="safe",
        description="Policy mode used when a caller supplies none: safe, moderate, unrestricted, explicit-only",
    )
    keywords_path: Path | None = Field(
        default=None,
        description="Keyword dictionary file (JSON or YAML). None uses the bundled dictionary",
    )

    @field_validator("keywords_path", mode="before")
    @classmethod
    def _empty_path_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the TRUTHRANK_ prefix.
    Nested settings use double underscores: TRUTHRANK_RANKING__REFERENCE_YEAR=2024

    Example:
        TRUTHRANK_SERVER__PORT=9090
        TRUTHRANK_CONTENT__DEFAULT_MODE=moderate
        TRUTHRANK_CONTENT__KEYWORDS_PATH=/etc/truthrank/keywords.json
    """

    model_config = {
        "env_prefix": "TRUTHRANK_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="truthrank", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    server: ServerSettings = Field(default_factory=ServerSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file win over environment variables; settings
        the file leaves out still come from the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
