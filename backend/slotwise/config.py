from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_ENV: str = "dev"
    SECRET_KEY: str = "change-me"
    JWT_EXPIRES_MIN: int = 1440
    LOG_LEVEL: str = "INFO"

    # DB
    DB_URL: str = "sqlite:///./slotwise.db"

    # Availability engine
    # zone used by the default policy when a link has no saved settings
    TIMEZONE: str = "UTC"
    SLOT_BUFFER_MIN: int = 15
    SLOT_STEP_MIN: int = 30

    # Google Calendar (None in dev: every calendar read degrades to blocks-only)
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_CALENDAR_ID: str = "primary"
    CALENDAR_TIMEOUT_SEC: float = 10.0


settings = Settings()
