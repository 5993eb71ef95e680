"""Tests for configuration classes."""

import os
import pytest
from unittest.mock import patch

from config import (
    AppConfig,
    CORSConfig,
    GameConfig,
    PacingConfig,
    RateLimitConfig,
    RedisConfig,
    SecurityConfig,
    StorageConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_default_origin(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_parses_comma_separated_origins(self):
        """Origins are split on commas and stripped of whitespace."""
        with patch.dict(os.environ, {"CORS_ORIGINS": " http://a.test , http://b.test ,"}):
            assert _parse_cors_origins() == ["http://a.test", "http://b.test"]

    def test_allows_everything_else(self):
        config = CORSConfig()
        assert config.allow_credentials is True
        assert config.allow_methods == ["*"]
        assert config.allow_headers == ["*"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 240

    def test_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "false", "RATE_LIMIT_RPM": "30"}):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 30

    @pytest.mark.parametrize("value,expected", [("TRUE", True), ("True", True), ("0", False), ("no", False)])
    def test_flag_parsing(self, value, expected):
        """Only 'true', in any case, enables the limiter."""
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": value}):
            assert RateLimitConfig().enabled is expected


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_generated_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert len(SecurityConfig().secret_key) > 0

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "not-very-secret"}):
            assert SecurityConfig().secret_key == "not-very-secret"


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_url_without_password(self):
        with patch.dict(os.environ, {}, clear=True):
            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_url_from_env(self):
        env = {
            "REDIS_HOST": "redis.example.com",
            "REDIS_PORT": "6380",
            "REDIS_DB": "1",
            "REDIS_PASSWORD": "secret123",
        }
        with patch.dict(os.environ, env, clear=True):
            assert RedisConfig().url == "redis://:secret123@redis.example.com:6380/1"


class TestStorageConfig:
    """Tests for StorageConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = StorageConfig()
            assert config.backend == "redis"
            assert config.file_path.endswith(".blackjack_stats.json")

    def test_from_env(self):
        with patch.dict(os.environ, {"STATS_BACKEND": "file", "STATS_FILE": "/tmp/stats.json"}):
            config = StorageConfig()
            assert config.backend == "file"
            assert config.file_path == "/tmp/stats.json"

    def test_unknown_backend(self):
        with patch.dict(os.environ, {"STATS_BACKEND": "sqlite"}):
            with pytest.raises(ValueError):
                StorageConfig()


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = GameConfig()
            assert config.action_cooldown_ms == 500
            assert config.auto_stand_on_bust is True
            assert config.stats_key == "blackjackStats"
            assert (config.deal_cue_ms, config.win_cue_ms, config.loss_cue_ms) == (50, 100, 200)

    def test_from_env(self):
        env = {"ACTION_COOLDOWN_MS": "250", "AUTO_STAND_ON_BUST": "false", "STATS_KEY": "mine"}
        with patch.dict(os.environ, env):
            config = GameConfig()
            assert config.action_cooldown_ms == 250
            assert config.auto_stand_on_bust is False
            assert config.stats_key == "mine"

    def test_negative_cooldown(self):
        with patch.dict(os.environ, {"ACTION_COOLDOWN_MS": "-1"}):
            with pytest.raises(ValueError):
                GameConfig()

    def test_frozen(self):
        config = GameConfig()
        with pytest.raises(Exception):  # dataclasses.FrozenInstanceError
            config.action_cooldown_ms = 0


class TestPacingConfig:
    """Tests for PacingConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = PacingConfig()
            assert config.card_deal_delay_ms == 300
            assert config.dealer_reveal_delay_ms == 500
            assert config.dealer_turn_delay_ms == 1000
            assert config.auto_stand_delay_ms == 800


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
            assert config.debug is False
            assert config.port == 8000
            assert config.log_level == "INFO"
            assert config.session_ttl == 3600

    def test_log_level_normalised(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert AppConfig().log_level == "DEBUG"

    def test_nested_configs(self):
        config = AppConfig()
        assert isinstance(config.storage, StorageConfig)
        assert isinstance(config.game, GameConfig)
        assert isinstance(config.pacing, PacingConfig)
        assert isinstance(config.redis, RedisConfig)
