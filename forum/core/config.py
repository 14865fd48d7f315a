# Application settings, read from environment variables and an optional .env file:
# database selection (APP_ENV / DATABASE_URL) and storage timeout
# session cookie name and lifetime
# password hashing cost

from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

SQLITE_DEV_DB = "sqlite:///./dev.db"
SQLITE_TEST_DB = "sqlite:///./test.db"
SQLITE_PROD_DB = "sqlite:///./prod.db"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    DATABASE_URL: str | None = None
    DB_TIMEOUT_SECONDS: float = 5.0
    SEED_CATEGORIES: bool = True

    COOKIE_NAME: str = "forum_session"
    SESSION_TTL_HOURS: int = 24 * 7  # one week

    BCRYPT_ROUNDS: int = 12

    @property
    def database_url(self) -> str:
        """Explicit DATABASE_URL wins, otherwise one SQLite file per environment"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.APP_ENV == "test":
            return SQLITE_TEST_DB
        if self.APP_ENV == "production":
            return SQLITE_PROD_DB
        return SQLITE_DEV_DB

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.SESSION_TTL_HOURS)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
