# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_TIMES: int = Field(..., validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(..., validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(..., validation_alias="TRUST_PROXY")

    # Memcached registry: "host[:port],host[:port]"
    MEMCACHED_SERVERS: str = Field(default="", validation_alias="MEMCACHED_SERVERS")
    MEMCACHED_DEFAULT_PORT: int = Field(
        default=11211, validation_alias="MEMCACHED_DEFAULT_PORT"
    )
    MEMCACHED_CONNECT_TIMEOUT: float = Field(
        default=2.0, validation_alias="MEMCACHED_CONNECT_TIMEOUT"
    )
    MEMCACHED_TIMEOUT: float = Field(default=5.0, validation_alias="MEMCACHED_TIMEOUT")

    # Key layout of the application that owns the cache
    CACHE_KEY_SALT: str = Field(default="", validation_alias="CACHE_KEY_SALT")
    CURRENT_SITE_ID: int = Field(default=1, ge=0, validation_alias="CURRENT_SITE_ID")
    SHOW_ALL_SITES: bool = Field(default=False, validation_alias="SHOW_ALL_SITES")

    # Logging knobs
    LOGGER_NAME: str = "spider-inspect"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    @property
    def salt_offset(self) -> int:
        """1 when every stored key carries a leading salt segment, else 0."""
        return 1 if self.CACHE_KEY_SALT else 0


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
