"""Tests for session management."""

import time
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

import api.session as session_module
from api.session import (
    GameRegistry,
    SessionSigner,
    create_game,
    create_session_id,
    extract_session_id,
    get_session_signer,
)
from core.game import ActionCooldown, BlackjackGame
from core.statistics import InMemoryStore, Statistics, StatsRepository


@pytest.fixture
def shared_store(monkeypatch):
    """Replace the process-wide statistics store with an in-memory one."""
    store = InMemoryStore()
    monkeypatch.setattr(session_module, "_stats_store", store)
    return store


class TestSessionSigner:
    """Tests for SessionSigner class."""

    def test_round_trip(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("session-456")
        assert token != "session-456"
        assert signer.unsign(token, max_age=3600) == "session-456"

    def test_invalid_token(self):
        assert SessionSigner(secret_key="test-secret").unsign("garbage", max_age=3600) is None

    def test_wrong_secret(self):
        token = SessionSigner(secret_key="one").sign("session")
        assert SessionSigner(secret_key="two").unsign(token, max_age=3600) is None

    def test_expired_token(self):
        signer = SessionSigner(secret_key="test-secret")
        token = signer.sign("session")

        original_time = time.time
        with patch("time.time", lambda: original_time() + 7200):
            assert signer.unsign(token, max_age=3600) is None


class TestModuleFunctions:
    """Tests for module-level session functions."""

    def test_signer_is_singleton(self, monkeypatch):
        monkeypatch.setattr(session_module, "_session_signer", None)
        assert get_session_signer() is get_session_signer()

    def test_create_session_id(self):
        token = create_session_id()
        raw = extract_session_id(token)
        assert raw is not None
        assert len(raw) == 36

    def test_create_unsigned_session_id(self):
        session_id = create_session_id(signed=False)
        assert len(session_id) == 36
        assert session_id.count("-") == 4

    def test_extract_invalid(self):
        assert extract_session_id("invalid-token") is None


class TestCreateGame:
    """Tests for building a session's game."""

    def test_statistics_keyed_per_session(self, shared_store):
        StatsRepository(shared_store, key="blackjackStats:abc").save(Statistics(wins=3, losses=2))

        assert create_game("abc").statistics == Statistics(wins=3, losses=2)
        assert create_game("xyz").statistics == Statistics()

    def test_uses_configured_cooldown(self, shared_store):
        assert create_game("abc").cooldown.window_ms == 500
        assert create_game("abc", cooldown_ms=0).cooldown.window_ms == 0


class TestGameRegistry:
    """Tests for GameRegistry class."""

    @pytest.fixture
    def games(self):
        return GameRegistry(
            ttl=60,
            game_factory=lambda sid: BlackjackGame(cooldown=ActionCooldown(window_ms=0)),
        )

    def test_get_missing(self, games):
        assert games.get("nobody") is None

    def test_get_or_create_reuses_game(self, games):
        game = games.get_or_create("s1")
        assert games.get_or_create("s1") is game
        assert len(games) == 1

    def test_reset_replaces_game(self, games):
        game = games.get_or_create("s1")
        assert games.reset("s1") is not game

    def test_delete(self, games):
        games.get_or_create("s1")
        games.delete("s1")
        games.delete("s1")
        assert games.get("s1") is None

    def test_expired_game_is_dropped(self, games):
        games.get_or_create("s1")
        later = datetime.now() + timedelta(seconds=61)
        with patch("api.session.datetime") as mock_datetime:
            mock_datetime.now.return_value = later
            assert games.get("s1") is None
        assert len(games) == 0

    def test_cleanup_expired(self, games):
        games.get_or_create("s1")
        games.get_or_create("s2")
        later = datetime.now() + timedelta(seconds=61)
        with patch("api.session.datetime") as mock_datetime:
            mock_datetime.now.return_value = later
            assert games.cleanup_expired() == 2
        assert len(games) == 0
