from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_ENV: str = "dev"
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    LOG_LEVEL: str = "INFO"

    # DB (sqlite:// accepted for dev and tests)
    DB_URL: str

    # Scheduling defaults, used when a captain profile leaves a field unset
    DEFAULT_TIMEZONE: str = "America/New_York"
    DEFAULT_BUFFER_MINUTES: int = 60
    DEFAULT_ADVANCE_DAYS: int = 60
    SLOT_STEP_MINUTES: int = 30

    # Limits
    MAX_BLACKOUT_RANGE_DAYS: int = 60
    MAX_PARTY_SIZE: int = 6  # USCG six-pack licence

    # Bearer secret for /ops jobs; unset -> open (dev)
    CRON_SECRET: str | None = None

    # Maintenance: while true, only reads, /ops and /ping are served
    MAINTENANCE_MODE: bool = False


settings = Settings()
