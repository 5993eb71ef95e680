"""Blackjack round controller with state machine."""

import logging
from dataclasses import dataclass
from itertools import chain
from random import Random
from typing import Callable, Iterator

from transitions import Machine

from core.cards import Deck
from core.hand import (
    BLACKJACK_SCORE,
    Hand,
    Outcome,
    dealer_should_draw,
    determine_outcome,
)
from core.statistics import InMemoryStore, Statistics, StatsRepository
from core.game.cooldown import ActionCooldown
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import RoundState

logger = logging.getLogger(__name__)

PLAYER = "player"
DEALER = "dealer"

# Opening deal as (target, face_down); the dealer's first card is the hole card
INITIAL_DEAL = (
    (PLAYER, False),
    (DEALER, True),
    (PLAYER, False),
    (DEALER, False),
)

Steps = Iterator[GameEvent]


@dataclass(frozen=True)
class TactileCues:
    """Vibration lengths requested from the haptic collaborator, in milliseconds."""

    deal_ms: int = 50
    win_ms: int = 100
    loss_ms: int = 200


class BlackjackGame:
    """
    Single-player blackjack round controller using a state machine.

    Commands (start_round, hit, stand) return an iterator of GameEvents.
    Each event is one discrete step and is also delivered to subscribers
    as it is produced, so the presentation layer decides the pacing by how
    fast it advances the iterator. A rejected command returns an empty
    iterator.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_deal", "source": "*", "dest": "dealing"},
        {"trigger": "finish_deal", "source": "dealing", "dest": "player_turn"},
        {"trigger": "player_hit", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "player_stand", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_draw", "source": "dealer_turn", "dest": "dealer_turn"},
        {"trigger": "finish_round", "source": "dealer_turn", "dest": "settled"},
    ]

    def __init__(
        self,
        stats_repository: StatsRepository | None = None,
        cooldown: ActionCooldown | None = None,
        auto_stand_on_bust: bool = True,
        cues: TactileCues | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a new game.

        Args:
            stats_repository: Where statistics are loaded from and saved to
            cooldown: Debounce policy for commands (500 ms if not provided)
            auto_stand_on_bust: Run the dealer turn automatically after a bust
            cues: Tactile cue durations
            rng: Random number generator for reproducible games
        """
        self.deck = Deck(rng=rng)
        self.deck.shuffle()

        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.events = EventEmitter()
        self.cooldown = cooldown or ActionCooldown()
        self.auto_stand_on_bust = auto_stand_on_bust
        self.cues = cues or TactileCues()

        self._stats_repository = stats_repository or StatsRepository(InMemoryStore())
        self.statistics: Statistics = self._stats_repository.load()
        self.last_outcome: Outcome | None = None

        self._round_id = 0
        self._busy = False
        self._active: Steps | None = None

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="not_started",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    @property
    def round_id(self) -> int:
        """Return the number of rounds started so far."""
        return self._round_id

    @property
    def game_over(self) -> bool:
        """Check whether the player is done acting this round."""
        return self.state.is_game_over

    @property
    def round_events(self) -> list[GameEvent]:
        """Return the steps emitted so far in the current round."""
        return self.events.history

    @property
    def is_busy(self) -> bool:
        """Check whether a step sequence is still running."""
        return self._busy

    @property
    def player_score(self) -> int:
        return self.player_hand.value

    @property
    def dealer_score(self) -> int:
        return self.dealer_hand.value

    @property
    def dealer_visible_score(self) -> int | None:
        """Dealer score, or None while the hole card is hidden."""
        if self.game_over:
            return self.dealer_hand.value
        return None

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.can_stand and not self.player_hand.is_busted

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.state == RoundState.PLAYER_TURN and not self._busy

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    # Commands

    def start_round(self) -> Steps:
        """
        Deal a new round.

        Allowed from any state. A round whose outcome no longer depends on
        the player (dealer turn, or player bust) is played out and settled
        first, and its remaining steps lead the returned sequence. Any other
        step sequence still running stops without touching the new round.
        """
        if not self.cooldown.try_acquire():
            logger.debug("Rejected start_round: cooldown")
            return iter(())

        finished = self._finish_decided_round()

        self._round_id += 1
        self._busy = True
        self.last_outcome = None
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.events.clear_history()
        self.begin_deal()

        logger.info("Round %d started", self._round_id)
        steps = self._deal_steps()
        self._active = steps
        return self._run(self._round_id, chain(finished, steps))

    def hit(self) -> Steps:
        """Player hits (takes another card)."""
        if not self._accept("hit"):
            return iter(())

        self.player_hit()
        self._busy = True
        return self._launch(self._hit_steps())

    def stand(self) -> Steps:
        """Player stands; the dealer reveals and plays out the round."""
        if not self._accept("stand"):
            return iter(())

        self.player_stand()
        self._busy = True
        return self._launch(self._stand_steps())

    def play_out(self) -> list[GameEvent]:
        """
        Run the in-flight step sequence to completion without pacing.

        For hosts that stop advancing a command's iterator, e.g. when a
        client disconnects, so the game is not left busy or unsettled.

        Returns:
            The steps that had not been produced yet
        """
        steps, self._active = self._active, None
        if steps is None:
            return []
        return list(steps)

    def settle(self) -> Outcome | None:
        """
        Settle the round once the dealer has finished drawing.

        Records the outcome in the statistics and persists them.

        Returns:
            The outcome, or None if the round is not ready to settle
        """
        if self.state != RoundState.DEALER_TURN or dealer_should_draw(self.dealer_hand):
            logger.debug("Rejected settle in state %s", self.state.name)
            return None

        outcome = determine_outcome(self.player_hand, self.dealer_hand)
        self.statistics.record(outcome)
        self.last_outcome = outcome
        self.finish_round()
        self._busy = False

        logger.info(
            "Round %d settled: %s (player %d, dealer %d), wins=%d losses=%d",
            self._round_id,
            outcome.value,
            self.player_score,
            self.dealer_score,
            self.statistics.wins,
            self.statistics.losses,
        )
        self._stats_repository.save(self.statistics)
        return outcome

    # Step sequences

    def _accept(self, command: str) -> bool:
        """Apply the player-command preconditions, consuming the cooldown on success."""
        if self.state != RoundState.PLAYER_TURN:
            reason = f"state is {self.state.name}"
        elif self._busy:
            reason = "previous steps still running"
        elif command == "hit" and self.player_hand.is_busted:
            reason = "player is bust"
        elif not self.cooldown.try_acquire():
            reason = "cooldown"
        else:
            return True

        logger.debug("Rejected %s: %s", command, reason)
        return False

    def _finish_decided_round(self) -> list[GameEvent]:
        """Play out and settle the current round if only the dealer has anything left to do."""
        decided = self.state == RoundState.DEALER_TURN or (
            self.state == RoundState.PLAYER_TURN and self.player_hand.is_busted
        )
        if not decided:
            return []

        logger.info("Round %d superseded, settling it first", self._round_id)
        events = self.play_out()
        if self.state == RoundState.PLAYER_TURN:
            events.extend(self._auto_stand_steps())
        return events

    def _launch(self, steps: Steps) -> Steps:
        self._active = steps
        return self._run(self._round_id, steps)

    def _run(self, round_id: int, steps: Steps) -> Steps:
        """Advance steps only while round_id is still the current round."""
        while round_id == self._round_id:
            try:
                event = next(steps)
            except StopIteration:
                return
            yield event

    def _emit(self, event_type: EventType, **data) -> GameEvent:
        return self.events.emit_new(event_type, **data)

    def _scores_changed(self) -> GameEvent:
        return self._emit(
            EventType.SCORES_CHANGED,
            player_score=self.player_score,
            dealer_score=self.dealer_visible_score,
        )

    def _deal_card(self, target: str, face_down: bool = False) -> Steps:
        """Deal one card to a hand."""
        hand = self.player_hand if target == PLAYER else self.dealer_hand

        reshuffled = self.deck.is_empty
        card = self.deck.draw()
        hand.add_card(card)

        if reshuffled:
            logger.info("Deck exhausted, continuing with a fresh shuffled deck")
            yield self._emit(EventType.DECK_RESHUFFLED, reshuffles=self.deck.reshuffles)

        yield self._emit(
            EventType.CARD_DEALT,
            target=target,
            card="??" if face_down else str(card),
            face_down=face_down,
            is_red=None if face_down else card.is_red,
            hand_size=len(hand),
        )
        yield self._scores_changed()
        yield self._emit(EventType.TACTILE_CUE, duration_ms=self.cues.deal_ms)

    def _deal_steps(self) -> Steps:
        yield self._emit(
            EventType.ROUND_STARTED,
            round_id=self._round_id,
            wins=self.statistics.wins,
            losses=self.statistics.losses,
        )

        for target, face_down in INITIAL_DEAL:
            yield from self._deal_card(target, face_down)

        self.finish_deal()

        if self.player_score == BLACKJACK_SCORE:
            self.player_stand()
            yield self._emit(EventType.PLAYER_BLACKJACK, player_score=self.player_score)
            yield from self._dealer_steps()
            return

        self._busy = False
        yield self._emit(EventType.PLAYER_TURN, player_score=self.player_score)

    def _hit_steps(self) -> Steps:
        yield from self._deal_card(PLAYER)

        busted = self.player_hand.is_busted
        if not busted or not self.auto_stand_on_bust:
            self._busy = False

        yield self._emit(EventType.PLAYER_HIT, player_score=self.player_score)
        if not busted:
            return

        yield self._emit(EventType.PENDING_BUST, player_score=self.player_score)
        if self.auto_stand_on_bust:
            yield from self._auto_stand_steps()

    def _auto_stand_steps(self) -> Steps:
        self.player_stand()
        yield self._emit(EventType.PLAYER_STAND, player_score=self.player_score, automatic=True)
        yield from self._dealer_steps()

    def _stand_steps(self) -> Steps:
        yield self._emit(EventType.PLAYER_STAND, player_score=self.player_score, automatic=False)
        yield from self._dealer_steps()

    def _dealer_steps(self) -> Steps:
        """Reveal the hole card, draw to 17, then settle."""
        yield self._emit(
            EventType.DEALER_REVEALS,
            card=str(self.dealer_hand.cards[0]),
            is_red=self.dealer_hand.cards[0].is_red,
            dealer_score=self.dealer_score,
        )
        yield self._scores_changed()

        while dealer_should_draw(self.dealer_hand):
            self.dealer_draw()
            yield from self._deal_card(DEALER)
            yield self._emit(EventType.DEALER_HITS, dealer_score=self.dealer_score)

        if self.dealer_hand.is_busted:
            yield self._emit(EventType.DEALER_BUSTS, dealer_score=self.dealer_score)
        else:
            yield self._emit(EventType.DEALER_STANDS, dealer_score=self.dealer_score)

        outcome = self.settle()
        if outcome is None:
            return

        yield self._emit(
            EventType.ROUND_SETTLED,
            outcome=outcome.value,
            result=outcome.result,
            message=outcome.message,
            player_score=self.player_score,
            dealer_score=self.dealer_score,
            wins=self.statistics.wins,
            losses=self.statistics.losses,
        )
        duration = self.cues.win_ms if outcome.is_win else self.cues.loss_ms
        yield self._emit(EventType.TACTILE_CUE, duration_ms=duration)
