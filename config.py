"""
Application settings loaded from the environment.

Values come from process environment variables, with a `.env` file
loaded first (python-dotenv) for local development.

Usage:
     from config import settings

     engine = build_engine(settings.database_url)
"""
import os
from dataclasses import dataclass, field
from typing import List
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_USSD_PREFIX = "*001*"


def _mssql_url_from_parts() -> str:
     """Build the MS SQL Server URL from the DB_* variables."""
     user = quote_plus(os.getenv("DB_USER") or "")
     password = quote_plus(os.getenv("DB_PASS") or "")
     server = os.getenv("DB_SERVER")
     port = os.getenv("DB_PORT", "1433")
     name = os.getenv("DB_NAME")
     return f"mssql+pymssql://{user}:{password}@{server}:{port}/{name}"


@dataclass
class Settings:
     """Runtime configuration for the settlement service."""

     database_url: str = "sqlite:///./fare_settlement.db"
     sql_echo: bool = False
     jwt_secret: str = ""
     jwt_algorithm: str = "HS256"
     cors_origins: List[str] = field(default_factory=list)
     ussd_prefix: str = DEFAULT_USSD_PREFIX
     policy_cache_ttl_seconds: float = 60.0
     policy_cache_max_entries: int = 500
     log_level: str = "INFO"
     log_format: str = "standard"
     port: int = 10000

     @classmethod
     def from_env(cls) -> "Settings":
          """Create settings from environment variables."""
          database_url = os.getenv("DATABASE_URL")
          if not database_url:
               database_url = _mssql_url_from_parts() if os.getenv("DB_SERVER") else cls.database_url

          origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

          return cls(
               database_url=database_url,
               sql_echo=os.getenv("SQL_ECHO", "false").lower() == "true",
               jwt_secret=os.getenv("JWT_SECRET", ""),
               jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
               cors_origins=origins,
               ussd_prefix=os.getenv("USSD_PREFIX", DEFAULT_USSD_PREFIX),
               policy_cache_ttl_seconds=float(os.getenv("POLICY_CACHE_TTL_SECONDS", "60")),
               policy_cache_max_entries=int(os.getenv("POLICY_CACHE_MAX_ENTRIES", "500")),
               log_level=os.getenv("LOG_LEVEL", "INFO"),
               log_format=os.getenv("LOG_FORMAT", "standard"),
               port=int(os.getenv("PORT", "10000")),
          )


settings = Settings.from_env()
