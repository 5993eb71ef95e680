"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: NOT_STARTED → DEALING → PLAYER_TURN → DEALER_TURN → SETTLED
    """

    # No round dealt yet
    NOT_STARTED = auto()

    # Initial four cards being dealt
    DEALING = auto()

    # Player may hit or stand
    PLAYER_TURN = auto()

    # Hole card revealed, dealer draws to 17
    DEALER_TURN = auto()

    # Outcome recorded, waiting for a new round
    SETTLED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def is_game_over(self) -> bool:
        """The player can no longer act once the dealer has taken over."""
        return self in (RoundState.DEALER_TURN, RoundState.SETTLED)

