"""Configuration models for Wasifu."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from wasifu.core.constants import FlowVariant

# Config file version constants
SUPPORTED_VERSIONS = frozenset({"1.0"})
CURRENT_VERSION = "1.0"

DEFAULT_NEWS_LINK = "https://news.microsoft.com/exec/brad-smith/ot"


class FlowSettings(BaseModel):
    """Shape of the intake flow."""

    variant: FlowVariant = Field(
        default=FlowVariant.EXTENDED, description="Flow revision: basic or extended"
    )
    county_choices: list[str] | None = Field(
        default=None,
        description="Fixed county choice set; None asks for free-text county names",
    )
    ward_choices: list[str] = Field(
        default_factory=lambda: ["Sub 1", "ub"], min_length=1, description="Ward choice set"
    )
    name_validator: str = Field(default="non_empty", description="Validator for the name reply")
    max_retries: int | None = Field(
        default=None,
        ge=1,
        description="Failed replies tolerated per prompt before restarting; None is unbounded",
    )
    news_link: str = Field(default=DEFAULT_NEWS_LINK, description="Follow-up link for news cards")

    @field_validator("county_choices")
    @classmethod
    def _non_empty_choices(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and not value:
            raise ValueError("county_choices must be null or a non-empty list")
        return value


class ReferenceDataConfig(BaseModel):
    """Where county reference data comes from."""

    path: str | None = Field(default=None, description="JSON file; None uses packaged data")


class PersistenceConfig(BaseModel):
    """Configuration for the session state store."""

    backend: Literal["memory", "sqlite", "postgres"] = Field(
        default="memory", description="Store backend type"
    )
    path: str = Field(default=":memory:", description="File path or connection string")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    json_file: str | None = Field(default=None, description="Rotating JSON log file")


class Settings(BaseModel):
    """Runtime settings."""

    flow: FlowSettings = Field(default_factory=FlowSettings)
    reference_data: ReferenceDataConfig = Field(default_factory=ReferenceDataConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class WasifuConfig(BaseModel):
    """Root configuration with file versioning."""

    version: str = Field(default=CURRENT_VERSION, description="Config file version")
    settings: Settings = Field(default_factory=Settings)

    def model_post_init(self, __context: object) -> None:
        """Validate config version after initialization."""
        if self.version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported config version: {self.version}. "
                f"Supported: {', '.join(sorted(SUPPORTED_VERSIONS))}"
            )
