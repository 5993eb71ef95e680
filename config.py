"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field
from typing import Literal


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "240"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class StorageConfig:
    """Where win/loss statistics are kept."""

    backend: Literal["redis", "file", "memory"] = field(
        default_factory=lambda: os.getenv("STATS_BACKEND", "redis")  # type: ignore[arg-type]
    )
    file_path: str = field(
        default_factory=lambda: os.getenv(
            "STATS_FILE",
            os.path.join(os.path.expanduser("~"), ".blackjack_stats.json"),
        )
    )

    def __post_init__(self) -> None:
        if self.backend not in ("redis", "file", "memory"):
            raise ValueError(f"Unknown STATS_BACKEND: {self.backend}")


@dataclass(frozen=True)
class GameConfig:
    """Default game configuration."""

    action_cooldown_ms: int = field(
        default_factory=lambda: int(os.getenv("ACTION_COOLDOWN_MS", "500"))
    )
    auto_stand_on_bust: bool = field(
        default_factory=lambda: _env_flag("AUTO_STAND_ON_BUST", "true")
    )
    stats_key: str = field(default_factory=lambda: os.getenv("STATS_KEY", "blackjackStats"))
    deal_cue_ms: int = 50
    win_cue_ms: int = 100
    loss_cue_ms: int = 200

    def __post_init__(self) -> None:
        if self.action_cooldown_ms < 0:
            raise ValueError("ACTION_COOLDOWN_MS cannot be negative")


@dataclass(frozen=True)
class PacingConfig:
    """Delays between streamed steps (milliseconds). Presentation only."""

    card_deal_delay_ms: int = field(
        default_factory=lambda: int(os.getenv("CARD_DEAL_DELAY_MS", "300"))
    )
    dealer_reveal_delay_ms: int = 500
    dealer_turn_delay_ms: int = field(
        default_factory=lambda: int(os.getenv("DEALER_TURN_DELAY_MS", "1000"))
    )
    auto_stand_delay_ms: int = 800


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_flag("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    session_ttl: int = 3600  # Session timeout in seconds

    redis: RedisConfig = field(default_factory=RedisConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    game: GameConfig = field(default_factory=GameConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
