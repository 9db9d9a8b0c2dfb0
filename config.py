"""
Application configuration - reads from environment variables (and .env).
"""
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = "https://styliqueecommerce.netlify.app,http://localhost:5173"


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    database_name: str = "stylique"
    db_user: str = ""
    db_pass: str = ""
    db_host: str = "cluster0.jd0pjh8.mongodb.net"
    cors_origins: List[str] = field(default_factory=lambda: _split_origins(DEFAULT_CORS_ORIGINS))
    port: int = 3000
    log_level: str = "INFO"

    @property
    def mongo_uri(self) -> str:
        """Explicit DATABASE_URL wins; otherwise build the Atlas SRV URI."""
        if self.database_url:
            return self.database_url
        return (
            f"mongodb+srv://{self.db_user}:{self.db_pass}@{self.db_host}/"
            f"?retryWrites=true&w=majority&appName=Cluster0"
        )


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", ""),
        database_name=os.getenv("DATABASE_NAME", "stylique"),
        db_user=os.getenv("DB_USER", ""),
        db_pass=os.getenv("DB_PASS", ""),
        db_host=os.getenv("DB_HOST", "cluster0.jd0pjh8.mongodb.net"),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


settings = load_settings()
