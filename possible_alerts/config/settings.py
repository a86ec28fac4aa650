"""
Possible Alerts Settings

Loads configuration from environment variables with sensible defaults.
Uses Pydantic Settings for validation and type coercion.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─────────────────────────────────────────────────────────────
    # Orion Server
    # ─────────────────────────────────────────────────────────────
    orion_host: str = Field(default="localhost", description="Orion server host")
    orion_username: str = Field(default="admin", description="Orion user name")
    orion_password: str = Field(default="", description="Orion password")
    orion_web_scheme: Literal["http", "https"] = Field(
        default="http",
        description="Scheme of the Orion website",
    )

    # Query service (SWIS)
    swis_port: int = Field(default=17778, description="SWIS REST port")
    swis_verify_ssl: bool = Field(
        default=False,
        description="Verify the SWIS TLS certificate (usually self-signed)",
    )

    request_timeout_seconds: int = Field(default=30, description="HTTP timeout")

    @computed_field
    @property
    def web_base_url(self) -> str:
        """Construct Orion website base URL."""
        return f"{self.orion_web_scheme}://{self.orion_host}"

    @computed_field
    @property
    def alert_lookup_url(self) -> str:
        """Construct the alert discovery endpoint URL."""
        return f"{self.web_base_url}/api/AllAlertThisObjectCanTrigger/GetAlerts"

    @computed_field
    @property
    def swis_query_url(self) -> str:
        """Construct the SWIS JSON query endpoint URL."""
        return (
            f"https://{self.orion_host}:{self.swis_port}"
            "/SolarWinds/InformationService/v3/Json/Query"
        )

    # ─────────────────────────────────────────────────────────────
    # Discovery & Lookup
    # ─────────────────────────────────────────────────────────────
    alert_page_size: int = Field(
        default=10,
        ge=1,
        description="Alerts requested per element (first page only)",
    )
    query_row_limit: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap on rows per discovery query (performance testing)",
    )
    element_order: Literal["caption", "query", "sample"] = Field(
        default="caption",
        description="caption = sort by caption, query = as discovered, sample = random subset",
    )
    sample_size: int = Field(default=25, ge=1, description="Elements kept in sample mode")
    sample_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducible samples",
    )

    # ─────────────────────────────────────────────────────────────
    # Output & Logging
    # ─────────────────────────────────────────────────────────────
    report_path: Optional[str] = Field(default=None, description="Report output file")
    report_format: Literal["csv", "json", "table"] = Field(
        default="table",
        description="Report output format",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Logging format (json or text)")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
