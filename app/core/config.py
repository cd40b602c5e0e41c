from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    APP_NAME: str = "Freight Match API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # REQUIRED in .env
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24  # 1 day, login and registration alike

    DATABASE_URL: str = "sqlite:///./freight.db"

    CORS_ORIGINS: list[str] = ["*"]

    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Push notifications
    PUSH_PROVIDER: str = "expo"  # expo | stub
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    EXPO_ACCESS_TOKEN: str | None = None
    PUSH_MAX_CONCURRENCY: int = 10
    PUSH_TIMEOUT_SECONDS: float = 10.0

    # First admin, created on startup when no admin exists
    SEED_ADMIN_NAME: str = "Admin"
    SEED_ADMIN_EMAIL: str | None = None
    SEED_ADMIN_PASSWORD: str | None = None

    class Config:
        env_file = ".env"

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_secret(cls, v: str) -> str:
        if not v or len(v.strip()) < 32:
            raise ValueError("JWT_SECRET must be set and at least 32 characters.")
        if "CHANGE_ME" in v.upper():
            raise ValueError("JWT_SECRET looks like a placeholder. Set a real secret.")
        return v.strip()

    @field_validator("PUSH_PROVIDER")
    @classmethod
    def validate_push_provider(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("expo", "stub"):
            raise ValueError("PUSH_PROVIDER must be 'expo' or 'stub'.")
        return v


settings = Settings()
