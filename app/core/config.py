from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://planner:planner@db:5432/planner"
    APP_ENV: str = "development"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"
    # "text" or "json"; production always logs JSON.
    LOG_FORMAT: str = "text"

    # IANA zone used to decide "today" and the Monday week anchor.
    PLANNER_TIMEZONE: str = "UTC"

    HISTORY_LIMIT: int = 8
    CADENCE_THRESHOLD: float = 0.6
    ENGAGEMENT_DEFAULT_TARGET: int = 10
    POSTS_DEFAULT_TARGET: int = 2

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
