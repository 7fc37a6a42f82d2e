from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql+psycopg2://foundations:foundations@db:5432/foundations"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # IANA zone whose local midnight closes a tracking day.
    TIMEZONE: str = "UTC"

    VIOLATION_COOLDOWN_HOURS: int = 24
    CONSISTENCY_THRESHOLD_DAYS: int = 7
    # Habit formation target used by the dashboards ("mastered" habits).
    MASTERY_THRESHOLD_DAYS: int = 67

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
