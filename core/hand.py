"""Hand evaluation and round settlement for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from core.cards import Card

BLACKJACK_SCORE = 21
DEALER_STAND_SCORE = 17


def score(cards: Iterable[Card]) -> int:
    """
    Calculate the best score for a set of cards.

    Aces start at 11 and drop to 1, one at a time, while the total is
    over 21.
    """
    total = 0
    aces = 0

    for card in cards:
        total += card.value
        if card.is_ace:
            aces += 1

    while total > BLACKJACK_SCORE and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    @property
    def value(self) -> int:
        """Return the hand's score."""
        return score(self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= BLACKJACK_SCORE

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK_SCORE

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK_SCORE

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


def dealer_should_draw(dealer_hand: Hand) -> bool:
    """Dealer draws below 17 and stands on any 17, soft or hard."""
    return dealer_hand.value < DEALER_STAND_SCORE


class Outcome(Enum):
    """Round outcomes, each mapped to a win, loss or push result."""

    BUST = "bust"
    DEALER_BUST = "dealer_bust"
    PUSH = "push"
    BLACKJACK = "blackjack"
    WIN = "win"
    LOSS = "loss"

    @property
    def result(self) -> str:
        """Return 'win', 'loss' or 'push'."""
        if self in (Outcome.DEALER_BUST, Outcome.BLACKJACK, Outcome.WIN):
            return "win"
        if self == Outcome.PUSH:
            return "push"
        return "loss"

    @property
    def is_win(self) -> bool:
        return self.result == "win"

    @property
    def is_loss(self) -> bool:
        return self.result == "loss"

    @property
    def message(self) -> str:
        """Return the banner text shown to the player."""
        return _OUTCOME_MESSAGES[self]


_OUTCOME_MESSAGES = {
    Outcome.BUST: "BUST! YOU LOSE",
    Outcome.DEALER_BUST: "DEALER BUSTED! YOU WIN!",
    Outcome.PUSH: "PUSH!",
    Outcome.BLACKJACK: "BLACKJACK! YOU WIN!",
    Outcome.WIN: "YOU WIN!",
    Outcome.LOSS: "YOU LOSE",
}


def determine_outcome(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare player and dealer hands.

    Checks run in a fixed order and the first match wins. Equal scores are
    checked before the natural, so a two-card 21 against any dealer 21 is
    a push.
    """
    player_value = player_hand.value
    dealer_value = dealer_hand.value

    if player_value > BLACKJACK_SCORE:
        return Outcome.BUST
    if dealer_value > BLACKJACK_SCORE:
        return Outcome.DEALER_BUST
    if player_value == dealer_value:
        return Outcome.PUSH
    if player_hand.is_blackjack:
        return Outcome.BLACKJACK
    if player_value > dealer_value:
        return Outcome.WIN
    return Outcome.LOSS
