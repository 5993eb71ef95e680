"""Pytest fixtures for blackjack tests."""

import pytest
from random import Random

from core.cards import Card, Deck
from core.hand import Hand
from core.game import ActionCooldown, BlackjackGame
from core.statistics import InMemoryStore, StatsRepository


class FakeClock:
    """Controllable monotonic clock returning seconds. Time is kept in whole milliseconds."""

    def __init__(self, start_ms: int = 100_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms / 1000

    def advance(self, ms: int) -> None:
        self.now_ms += ms


def _make_hand(*cards: str) -> Hand:
    """Build a hand from card strings like 'AS', '10H'."""
    hand = Hand()
    for card in cards:
        hand.add_card(Card.from_string(card))
    return hand


def _stack_deck(deck: Deck, *cards: str) -> None:
    """Replace the deck so the given cards are drawn first, in order."""
    deck._cards = [Card.from_string(c) for c in reversed(cards)]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    d = Deck(rng=rng)
    d.shuffle()
    return d


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return _make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return _make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return _make_hand("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return _make_hand("10S", "6H", "KC")


@pytest.fixture
def clock():
    """A controllable clock."""
    return FakeClock()


@pytest.fixture
def store():
    """An empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def repository(store):
    """Statistics repository over the in-memory store."""
    return StatsRepository(store)


@pytest.fixture
def game(rng, repository):
    """A new game with no cooldown."""
    return BlackjackGame(
        stats_repository=repository,
        cooldown=ActionCooldown(window_ms=0),
        rng=rng,
    )


@pytest.fixture
def debounced_game(rng, repository, clock):
    """A new game with the default 500 ms cooldown on a fake clock."""
    return BlackjackGame(
        stats_repository=repository,
        cooldown=ActionCooldown(window_ms=500, clock=clock),
        rng=rng,
    )


@pytest.fixture
def make_hand():
    """Builder for hands from card strings."""
    return _make_hand


@pytest.fixture
def stack_deck():
    """Helper that fixes the next cards drawn from a deck."""
    return _stack_deck
