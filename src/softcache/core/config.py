# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from softcache.core.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TTL,
    INDEX_RETRIES,
    PUSH_LOCK_RETRIES,
    SPIN_DELAY,
    TRIM_SETTLE_DELAY,
    CompressionFlag,
    StoreBackend,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SOFTCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Backing store
    backend: StoreBackend = StoreBackend.MEMCACHED
    host: str = DEFAULT_HOST  # "hostname[:port]"
    default_port: int = DEFAULT_PORT
    redis_url: str = "redis://localhost:6379/0"

    # Keys and values
    key_prefix: str = ""
    compression: CompressionFlag = CompressionFlag.ZLIB
    default_ttl: int = DEFAULT_TTL  # seconds, 0 = never expires

    # Soft expiration
    use_clean_queue: bool = True

    # Lists and spin-lock
    push_lock_retries: int = PUSH_LOCK_RETRIES
    index_retries: int = INDEX_RETRIES
    spin_delay: float = SPIN_DELAY  # seconds between retries
    trim_settle_delay: float = TRIM_SETTLE_DELAY
    lock_ttl: int = 0  # 0 = the trim lock has no lease

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("backend", "compression", mode="before")
    @classmethod
    def _lower_enum(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("host", mode="before")
    @classmethod
    def _strip_host(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip() or DEFAULT_HOST
            _, _, port = v.partition(":")
            if port and not port.isdigit():
                raise ValueError(f"invalid port in host {v!r}")
        return v

    def host_and_port(self) -> tuple[str, int]:
        """Split ``host`` into a hostname and port, falling back to ``default_port``."""
        name, _, port = self.host.partition(":")
        return name, int(port) if port else self.default_port


def get_settings() -> Settings:
    return Settings()
