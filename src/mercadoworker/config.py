"""
Configuration for MercadoWorker.

Uses Pydantic for validation and environment loading.
"""

import os
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


DEFAULT_API_HOST = "https://api.mercadolibre.com"


class PageFailurePolicy(str, Enum):
    """What to do when a search page (other than the first) fails."""

    SKIP = "skip"  # report it, drop that page's products
    ABORT = "abort"  # fail the whole run


class SourceConfig(BaseModel):
    """Configuration for one seller catalog on Mercado Libre."""

    # Required, no defaults: the run aborts when either is empty
    username: str = Field(default="", description="Seller nickname")
    site_id: str = Field(default="", description="Marketplace site, e.g. MLA")

    api_host: str = Field(default=DEFAULT_API_HOST, description="API base URL")
    page_size: int = Field(default=50, description="Results per search page")

    busy_catalog_threshold: int = Field(
        default=50, description="Product count above which a slow-import notice is logged"
    )
    large_catalog_threshold: int = Field(
        default=300, description="Product count above which image import is capped"
    )
    large_catalog_image_cap: int = Field(
        default=3, description="Max pictures per product for large catalogs"
    )

    page_failure_policy: PageFailurePolicy = Field(default=PageFailurePolicy.SKIP)
    request_timeout: Optional[float] = Field(
        default=30.0, description="HTTP timeout in seconds, None=wait forever"
    )

    @field_validator("page_failure_policy", mode="before")
    @classmethod
    def _parse_policy(cls, value):
        """Accept policy names case-insensitively."""
        if isinstance(value, str):
            try:
                return PageFailurePolicy(value.strip().lower())
            except ValueError:
                raise ConfigurationError(
                    f"Unknown page failure policy: {value!r} (expected 'skip' or 'abort')"
                )
        return value

    @field_validator("page_size")
    @classmethod
    def _positive_page_size(cls, value: int) -> int:
        if value <= 0:
            raise ConfigurationError(f"page_size must be positive, got {value}")
        return value

    @field_validator(
        "busy_catalog_threshold", "large_catalog_threshold", "large_catalog_image_cap"
    )
    @classmethod
    def _non_negative(cls, value: int, info) -> int:
        if value < 0:
            raise ConfigurationError(f"{info.field_name} must not be negative, got {value}")
        return value

    def missing_fields(self) -> list[str]:
        """Names of required settings that are not set."""
        return [name for name in ("username", "site_id") if not getattr(self, name)]


class WorkerConfig(BaseSettings):
    """Master configuration for MercadoWorker.

    Loads from environment variables (exact names, no prefix).
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    # Service identity
    service_name: str = Field(default="mercadoworker")
    service_version: str = Field(default="0.1.0")
    log_level: str = Field(default="INFO")

    # Where imported images are written
    cache_dir: str = Field(default=".cache/mercadoworker")

    # Seconds between full re-imports, 0 means run once
    schedule_interval: int = Field(default=0)

    source: SourceConfig = Field(default_factory=SourceConfig)

    @classmethod
    def from_env(cls) -> "WorkerConfig":
        """Load configuration from environment variables."""
        timeout = os.getenv("ML_REQUEST_TIMEOUT", "30.0")
        return cls(
            service_name=os.getenv("SERVICE_NAME", "mercadoworker"),
            service_version=os.getenv("SERVICE_VERSION", "0.1.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cache_dir=os.getenv("CACHE_DIR", ".cache/mercadoworker"),
            schedule_interval=int(os.getenv("SCHEDULE_INTERVAL_SEC", "0")),
            source=SourceConfig(
                username=os.getenv("ML_USERNAME", ""),
                site_id=os.getenv("ML_SITE_ID", ""),
                api_host=os.getenv("ML_API_HOST", DEFAULT_API_HOST),
                page_size=int(os.getenv("ML_PAGE_SIZE", "50")),
                large_catalog_threshold=int(
                    os.getenv("ML_LARGE_CATALOG_THRESHOLD", "300")
                ),
                large_catalog_image_cap=int(os.getenv("ML_IMAGE_CAP", "3")),
                page_failure_policy=os.getenv("ML_PAGE_FAILURE_POLICY", "skip"),
                request_timeout=float(timeout) if timeout else None,
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> WorkerConfig:
    """Get the process-wide configuration, loaded once from the environment."""
    from dotenv import load_dotenv

    load_dotenv()
    return WorkerConfig.from_env()
