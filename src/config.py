"""Centralised application settings loaded from environment / .env file."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings

from src.domain.enums import DeliveryBoyStatus


class Settings(BaseSettings):
    # Realtime store backend
    realtime_backend: Literal["firebase", "redis"] = "firebase"

    # Firebase Realtime Database (all four required for the firebase backend)
    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None
    firebase_database_url: Optional[str] = None

    # Redis (only used by the redis backend)
    redis_url: Optional[str] = None

    # Tracking
    route_cache_ttl_days: int = 7
    nearest_max_distance_km: float = 20.0
    online_status: str = DeliveryBoyStatus.ONLINE.value

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
