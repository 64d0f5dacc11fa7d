from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "meal-planner"

    # Auth: X-User-Id header wins; this is the fallback for single-user installs
    default_user_id: Optional[str] = None

    # AI
    ai_mode: str = "mock"  # "mock" or "gemini"
    gemini_api_key: Optional[str] = None
    gemini_text_model: str = "gemini-2.5-flash"
    generation_timeout_s: float = 120.0

    # Per-user fixed window limits for the generation routes
    plan_rate_limit: int = 10
    plan_rate_window_s: int = 60
    shopping_rate_limit: int = 10
    shopping_rate_window_s: int = 60

    # Per-IP guard (slowapi)
    ip_rate_limit: str = "100/minute"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


settings = Settings()
