"""
Configuration management for the load-testing helpers.
Endpoint templates, fixed request headers and pacing defaults.
"""
from pydantic_settings import BaseSettings
from pydantic import Field
import logging


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix PLANLOAD_)."""

    # Target API
    api_base_url: str = "http://localhost:3000/api"
    default_headers: dict[str, str] = Field(
        default_factory=lambda: {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
    )
    request_timeout: float = 30.0

    # Think time between user actions (seconds)
    think_time_min: float = 1.0
    think_time_max: float = 3.0

    log_level: str = "INFO"

    # Stub server
    host: str = "127.0.0.1"
    port: int = 3000

    class Config:
        env_prefix = "PLANLOAD_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


class Endpoints:
    """URL templates for the Travel Plan API."""

    def __init__(self, base_url: str | None = None):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")

    @property
    def travel_plans(self) -> str:
        return f"{self.base_url}/travel-plans"

    def travel_plan_by_id(self, plan_id: str) -> str:
        return f"{self.base_url}/travel-plans/{plan_id}"

    def locations_for_plan(self, plan_id: str) -> str:
        return f"{self.base_url}/travel-plans/{plan_id}/locations"

    def location_by_id(self, location_id: str) -> str:
        return f"{self.base_url}/locations/{location_id}"

    @property
    def health(self) -> str:
        return f"{self.base_url}/health"


def configure_logging(level: str | None = None):
    """Basic console logging for load-test scripts."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
