"""
Application settings
Read once from the environment (and an optional .env file) at startup.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _as_list(value: Optional[str], default: List[str]) -> List[str]:
    if not value:
        return list(default)
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "redrelief"
    mongo_timeout_ms: int = 5000
    compound_queries_enabled: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    jwt_secret: str = ""
    jwt_algorithms: List[str] = field(default_factory=lambda: ["HS256"])
    jwt_audience: Optional[str] = None
    log_level: str = "INFO"
    environment: str = "production"
    api_version: str = "1.0.0"
    # requests per client address across every route
    rate_limit: str = "100 per 15 minutes"
    rate_limit_enabled: bool = True

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            mongo_url=os.environ.get("MONGO_URL", cls.mongo_url),
            db_name=os.environ.get("DB_NAME", cls.db_name),
            mongo_timeout_ms=int(os.environ.get("MONGO_TIMEOUT_MS", cls.mongo_timeout_ms)),
            compound_queries_enabled=_as_bool(os.environ.get("COMPOUND_QUERIES_ENABLED"), True),
            cors_origins=_as_list(os.environ.get("CORS_ORIGINS"), ["http://localhost:3000"]),
            jwt_secret=os.environ.get("JWT_SECRET", ""),
            jwt_algorithms=_as_list(os.environ.get("JWT_ALGORITHMS"), ["HS256"]),
            jwt_audience=os.environ.get("JWT_AUDIENCE") or None,
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
            environment=os.environ.get("ENVIRONMENT", cls.environment),
            api_version=os.environ.get("API_VERSION", cls.api_version),
            rate_limit=os.environ.get("RATE_LIMIT", cls.rate_limit),
            rate_limit_enabled=_as_bool(os.environ.get("RATE_LIMIT_ENABLED"), True),
        )
