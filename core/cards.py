"""Card and Deck classes - immutable cards, a self-replenishing deck."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import MutableSequence, TypeVar

T = TypeVar("T")


class Suit(Enum):
    """Card suits."""

    HEARTS = auto()
    DIAMONDS = auto()
    SPADES = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.SPADES: "♠",
            Suit.CLUBS: "♣",
        }
        return symbols[self]

    @property
    def is_red(self) -> bool:
        """Hearts and diamonds are red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks with blackjack values."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        return min(self.value, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_red(self) -> bool:
        """Check if this card is red."""
        return self.suit.is_red

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {str(rank): rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def build_deck() -> list[Card]:
    """Return the 52 cards of a standard deck in suit-major order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle(cards: MutableSequence[T], rng: Random | None = None) -> None:
    """
    Shuffle a sequence in place with the Fisher-Yates algorithm.

    Walks from the last index down to 1, swapping each element with a
    uniformly chosen element at or before it.
    """
    rng = rng or Random()
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randint(0, i)
        cards[i], cards[j] = cards[j], cards[i]


class Deck:
    """
    A single 52-card deck dealt from the top.

    The deck never runs dry: drawing from an empty deck rebuilds and
    shuffles a fresh one first.
    """

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize a new, unshuffled deck."""
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self._reshuffles = 0
        self.reset()

    def reset(self) -> None:
        """Reset deck to all 52 cards in order."""
        self._cards = build_deck()

    def shuffle(self) -> None:
        """Shuffle the remaining cards."""
        shuffle(self._cards, self._rng)

    def draw(self) -> Card:
        """Draw a card from the top of the deck, replenishing it if empty."""
        if not self._cards:
            self.reset()
            self.shuffle()
            self._reshuffles += 1
        return self._cards.pop()

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def reshuffles(self) -> int:
        """Return how many times the deck was rebuilt after running out."""
        return self._reshuffles

    @property
    def is_empty(self) -> bool:
        """Check whether the next draw will rebuild the deck."""
        return not self._cards
