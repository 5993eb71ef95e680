"""Key-value stores backing the statistics record."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod

import redis

from core.statistics.record import Statistics

logger = logging.getLogger(__name__)

DEFAULT_STATS_KEY = "blackjackStats"


class KeyValueStore(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Store a value under a key."""
        ...


class InMemoryStore(KeyValueStore):
    """Dict-backed store for tests and local development."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str) -> str | None:
        return self._data.get(key)

    def save(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore(KeyValueStore):
    """
    Store every key in a single JSON object on disk.

    The file is read on each load and replaced on each save. An unreadable
    or corrupted file behaves like an empty one.
    """

    def __init__(self, path: str | None = None) -> None:
        """
        Initialize the store.

        Args:
            path: Path to the JSON file. Defaults to ~/.blackjack_stats.json
        """
        if path is None:
            path = os.path.join(os.path.expanduser("~"), ".blackjack_stats.json")
        self.path = path

    def _read(self) -> dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("Ignoring unreadable store file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store file %s: not a JSON object", self.path)
            return {}
        return data

    def load(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def save(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value

        # The file is only ever replaced by a completely written sibling
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".stats-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise


class RedisStore(KeyValueStore):
    """Redis-backed store."""

    def __init__(self, redis_client: redis.Redis, prefix: str = "blackjack:") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        """Get Redis key for a store key."""
        return f"{self._prefix}{key}"

    def load(self, key: str) -> str | None:
        value = self._redis.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def save(self, key: str, value: str) -> None:
        self._redis.set(self._key(key), value)


def create_store(
    backend: str = "memory",
    file_path: str | None = None,
    redis_url: str | None = None,
) -> KeyValueStore:
    """
    Create the configured store.

    Args:
        backend: "redis", "file" or "memory"
        file_path: JSON file used by the "file" backend
        redis_url: Connection URL used by the "redis" backend

    Returns:
        A store; "redis" falls back to in-memory when the server is unreachable
    """
    if backend == "memory":
        return InMemoryStore()
    if backend == "file":
        return JsonFileStore(file_path)
    if backend == "redis":
        try:
            client = redis.Redis.from_url(redis_url or "redis://localhost:6379/0")
            client.ping()
        except redis.RedisError as e:
            logger.warning("Redis unavailable (%s), keeping statistics in memory", e)
            return InMemoryStore()
        return RedisStore(client)
    raise ValueError(f"Unknown storage backend: {backend}")


class StatsRepository:
    """Load and save a Statistics record under a fixed key."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STATS_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> Statistics:
        """
        Load statistics.

        Missing, corrupt or unreachable records fall back to zeroed statistics.
        """
        try:
            raw = self._store.load(self._key)
        except (OSError, ValueError, redis.RedisError) as e:
            logger.warning("Could not read statistics %r: %s", self._key, e)
            return Statistics()

        if raw is None:
            return Statistics()

        try:
            return Statistics.from_json(raw)
        except (ValueError, RecursionError) as e:
            logger.warning("Discarding corrupt statistics %r: %s", self._key, e)
            return Statistics()

    def save(self, stats: Statistics) -> bool:
        """
        Save statistics.

        Returns:
            True if the record was written
        """
        try:
            self._store.save(self._key, stats.to_json())
        except (OSError, redis.RedisError) as e:
            logger.warning("Could not save statistics %r: %s", self._key, e)
            return False
        return True
