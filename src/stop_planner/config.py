"""Application configuration and settings management."""

from typing import Annotated, Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="SP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Stop Planner API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level applied by the app factory.")
    osrm_base_url: str = Field(
        default="https://router.project-osrm.org",
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "walking", "cycling"] = Field(
        default="driving",
        description="OSRM profile to use when optimizing trips.",
    )
    osrm_timeout_seconds: float = Field(default=30.0, gt=0.0)
    nominatim_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL for the Nominatim geocoding service.",
    )
    geocoder_user_agent: str = Field(
        default="stop-planner/0.1",
        description="User-Agent sent to the geocoder (required by the Nominatim usage policy).",
    )
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    default_delay_per_stop_minutes: int = Field(default=0, ge=0, le=30)
    navigation_url_template: str = Field(
        default="https://www.google.com/maps/dir/?api=1&destination={destination}&travelmode={travel_mode}",
        description="Hand-off link template; {destination} is the url-encoded address.",
    )
    navigation_travel_mode: str = Field(default="driving")
    default_map_center: Annotated[tuple[float, float], NoDecode] = Field(
        default=(49.25, -123.1),
        description="Map center (lat, lon) used while no stop has coordinates.",
    )
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            # Try comma-separated
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            # Single value
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("default_map_center", mode="before")
    @classmethod
    def _parse_center_from_env(cls, value: Any) -> Any:
        """Parse "lat,lon" or a JSON array into a coordinate pair."""
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(float(item) for item in parsed)
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            return tuple(float(item.strip()) for item in value.split(",") if item.strip())
        return value


settings = Settings()
