"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit, build_deck, shuffle
from core.hand import Hand, Outcome, determine_outcome, dealer_should_draw, score

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "build_deck",
    "shuffle",
    "Hand",
    "Outcome",
    "determine_outcome",
    "dealer_should_draw",
    "score",
]
