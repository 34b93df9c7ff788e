import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    AUTH_DB_NAME: str | None = os.getenv("AUTH_DB_NAME")
    FACILITY_DB_NAME: str | None = os.getenv("FACILITY_DB_NAME")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "require")

    # Full URLs win over the DB_* parts (used for local runs and tests)
    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    AUTH_DATABASE_URL: str | None = os.getenv("AUTH_DATABASE_URL")

    POOL_SIZE: int = int(os.getenv("POOL_SIZE", 2))
    MAX_OVERFLOW: int = int(os.getenv("MAX_OVERFLOW", 2))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS", "http://localhost:8080,http://127.0.0.1:8002")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


def build_database_url(settings: Settings, db_name: str | None, override: str | None, fallback: str) -> str:
    if override:
        return override
    if not settings.DB_HOST or not db_name:
        return fallback
    return (
        f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{db_name}?sslmode={settings.DB_SSLMODE}"
    )


settings = Settings()

FACILITY_DATABASE_URL = build_database_url(
    settings, settings.FACILITY_DB_NAME, settings.DATABASE_URL, "sqlite:///./occupancy.db")

AUTH_DATABASE_URL = build_database_url(
    settings, settings.AUTH_DB_NAME, settings.AUTH_DATABASE_URL, "sqlite:///./auth.db")
