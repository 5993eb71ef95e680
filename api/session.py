"""Session management: signed session IDs and one game per session."""

import logging
from datetime import datetime, timedelta
from typing import Callable
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config
from core.game import ActionCooldown, BlackjackGame, TactileCues
from core.statistics import KeyValueStore, StatsRepository, create_store

logger = logging.getLogger(__name__)


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key)

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        max_age = max_age or config.session_ttl
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


def create_session_id(signed: bool = True) -> str:
    """
    Create a new session ID.

    Args:
        signed: If True, return a signed session token

    Returns:
        A new session ID (signed or unsigned based on parameter)
    """
    session_id = str(uuid4())
    if signed:
        return get_session_signer().sign(session_id)
    return session_id


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)


# Global statistics store, shared by every session
_stats_store: KeyValueStore | None = None


def get_stats_store() -> KeyValueStore:
    """Get or create the configured statistics store."""
    global _stats_store
    if _stats_store is None:
        _stats_store = create_store(
            backend=config.storage.backend,
            file_path=config.storage.file_path,
            redis_url=config.redis.url,
        )
        logger.info("Statistics store: %s", type(_stats_store).__name__)
    return _stats_store


def create_game(session_id: str, cooldown_ms: int | None = None) -> BlackjackGame:
    """Create a game whose statistics are kept under the session's key."""
    if cooldown_ms is None:
        cooldown_ms = config.game.action_cooldown_ms
    repository = StatsRepository(
        get_stats_store(),
        key=f"{config.game.stats_key}:{session_id}",
    )
    return BlackjackGame(
        stats_repository=repository,
        cooldown=ActionCooldown(window_ms=cooldown_ms),
        auto_stand_on_bust=config.game.auto_stand_on_bust,
        cues=TactileCues(
            deal_ms=config.game.deal_cue_ms,
            win_ms=config.game.win_cue_ms,
            loss_ms=config.game.loss_cue_ms,
        ),
    )


class GameRegistry:
    """In-memory games keyed by session ID, expiring after a period of inactivity."""

    def __init__(
        self,
        ttl: int | None = None,
        game_factory: Callable[[str], BlackjackGame] = create_game,
    ) -> None:
        self.ttl = ttl or config.session_ttl
        self.game_factory = game_factory
        self._games: dict[str, tuple[BlackjackGame, datetime]] = {}

    def get(self, session_id: str) -> BlackjackGame | None:
        """Get a live game, extending its expiry."""
        if session_id not in self._games:
            return None

        game, expiry = self._games[session_id]
        if expiry < datetime.now():
            self.delete(session_id)
            return None

        self._games[session_id] = (game, self._expiry())
        return game

    def get_or_create(self, session_id: str) -> BlackjackGame:
        """Get the session's game, creating one if needed."""
        game = self.get(session_id)
        if game is None:
            game = self.reset(session_id)
        return game

    def reset(self, session_id: str) -> BlackjackGame:
        """Replace the session's game. Statistics are reloaded from the store."""
        self.cleanup_expired()
        game = self.game_factory(session_id)
        self._games[session_id] = (game, self._expiry())
        return game

    def delete(self, session_id: str) -> None:
        """Drop a session's game."""
        self._games.pop(session_id, None)

    def cleanup_expired(self) -> int:
        """Remove expired games."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._games.items() if expiry < now]
        for sid in expired:
            del self._games[sid]
        return len(expired)

    def _expiry(self) -> datetime:
        return datetime.now() + timedelta(seconds=self.ttl)

    def __len__(self) -> int:
        return len(self._games)


# Global game registry
registry = GameRegistry()
