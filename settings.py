"""Application settings -- loaded once at startup.

Uses pydantic-settings to validate env vars at import time.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./kepegawaian.db"
    SECRET_KEY: str = ""  # signs session tokens; empty = reject all authenticated requests

    # What to do when an approved transfer targets a position with no slots left.
    QUOTA_EXHAUSTED_POLICY: Literal["reject", "warn"] = "reject"

    WILAYAH_API_URL: str = "https://wilayah.id/api"

    CORS_ORIGINS: str = "http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
