"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    buyer_repository: str = "in_memory"  # in_memory or postgres
    database_url: str = ""  # Required when buyer_repository=postgres
    actor_header: str = "X-Actor-Id"
    rate_limit_enabled: bool = True
    rate_limiter_backend: str = "in_memory"  # in_memory or redis
    redis_url: str = "redis://localhost:6379/0"
    import_rate_limit: int = 3
    import_rate_window_seconds: int = 600  # 10 minutes
    create_rate_limit: int = 10
    create_rate_window_seconds: int = 60
    rate_limit_sweep_interval_seconds: int = 3600
    max_import_rows: int = 200
    page_size: int = 10
    history_preview_limit: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
