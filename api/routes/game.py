"""Game API endpoints."""

from typing import Annotated, Callable, Iterator

from fastapi import APIRouter, Header, HTTPException

from api.schemas import (
    CardResponse,
    CommandResponse,
    EventResponse,
    GameStateResponse,
    HandResponse,
    SessionResponse,
)
from api.session import create_session_id, extract_session_id, registry
from core.cards import Card
from core.game import BlackjackGame, GameEvent
from core.hand import Hand

router = APIRouter()


def card_response(card: Card, hidden: bool = False) -> CardResponse:
    """Convert a Card to CardResponse."""
    if hidden:
        return CardResponse(rank="?", suit="?", value=0, is_red=False, hidden=True)
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        is_red=card.is_red,
    )


def hand_response(hand: Hand, hide_first: bool = False) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[
            card_response(card, hidden=hide_first and i == 0)
            for i, card in enumerate(hand.cards)
        ],
        score=None if hide_first else hand.value,
    )


def game_state_response(game: BlackjackGame) -> GameStateResponse:
    """Convert game state to response; the hole card stays hidden until game over."""
    outcome = game.last_outcome
    return GameStateResponse(
        state=game.state.name,
        round_id=game.round_id,
        player_hand=hand_response(game.player_hand),
        dealer_hand=hand_response(
            game.dealer_hand,
            hide_first=not game.game_over and len(game.dealer_hand) > 0,
        ),
        game_over=game.game_over,
        can_hit=game.can_hit,
        can_stand=game.can_stand,
        outcome=outcome.value if outcome else None,
        message=outcome.message if outcome else None,
        wins=game.statistics.wins,
        losses=game.statistics.losses,
    )


def event_response(event: GameEvent) -> EventResponse:
    """Convert a GameEvent to EventResponse."""
    return EventResponse(**event.to_dict())


def resolve_game(token: str) -> tuple[str, BlackjackGame]:
    """Look up the game for a signed session token."""
    session_id = extract_session_id(token)
    if session_id is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")
    return session_id, registry.get_or_create(session_id)


def _run_command(game: BlackjackGame, command: Callable[[], Iterator[GameEvent]]) -> CommandResponse:
    """Drain a command's steps without pacing."""
    events = [event_response(e) for e in command()]
    return CommandResponse(
        accepted=bool(events),
        events=events,
        state=game_state_response(game),
    )


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> SessionResponse:
    """Create a game session, or reset the game of an existing one."""
    raw_id = extract_session_id(session_id) if session_id else None
    if raw_id is None:
        session_id = create_session_id()
        raw_id = extract_session_id(session_id)

    registry.reset(raw_id)
    return SessionResponse(session_id=session_id)


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current round state."""
    _, game = resolve_game(session_id)
    return game_state_response(game)


@router.post("/round")
async def start_round(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> CommandResponse:
    """Deal a new round."""
    _, game = resolve_game(session_id)
    return _run_command(game, game.start_round)


@router.post("/hit")
async def hit(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> CommandResponse:
    """Player takes a card."""
    _, game = resolve_game(session_id)
    return _run_command(game, game.hit)


@router.post("/stand")
async def stand(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> CommandResponse:
    """Player stands; the dealer plays out and the round settles."""
    _, game = resolve_game(session_id)
    return _run_command(game, game.stand)
