"""Win/loss statistics and their persistence."""

from core.statistics.record import Statistics
from core.statistics.store import (
    KeyValueStore,
    InMemoryStore,
    JsonFileStore,
    RedisStore,
    StatsRepository,
    create_store,
)

__all__ = [
    "Statistics",
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "RedisStore",
    "StatsRepository",
    "create_store",
]
