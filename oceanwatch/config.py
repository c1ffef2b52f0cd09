"""Pydantic Settings loaded from environment."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    refresh_interval_seconds: float = 30.0
    simulate_activity: bool = False
    simulation_probability: float = 0.2  # Chance of a synthetic report per refresh tick
    seed_on_startup: bool = True
    timezone: str = "UTC"  # e.g. Asia/Kolkata for IST calendar days
    trend_days: int = 30
    default_radius_km: float = 50.0
    default_user_lat: float | None = None
    default_user_lng: float | None = None
    audit_log_size: int = 10_000

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
