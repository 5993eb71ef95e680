"""Pydantic schemas for API requests and responses."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class CardResponse(BaseModel):
    """Card representation. Hidden cards carry no rank or suit."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int
    is_red: bool
    hidden: bool = False


class HandResponse(BaseModel):
    """Hand representation; score is None while a card is hidden."""

    cards: list[CardResponse]
    score: int | None


class GameStateResponse(BaseModel):
    """Current round state."""

    state: str
    round_id: int
    player_hand: HandResponse
    dealer_hand: HandResponse
    game_over: bool
    can_hit: bool
    can_stand: bool
    outcome: str | None = None
    message: str | None = None
    wins: int
    losses: int


class EventResponse(BaseModel):
    """One step of a command's event sequence."""

    event_type: str
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: str


class CommandResponse(BaseModel):
    """Result of a start_round/hit/stand command."""

    accepted: bool
    events: list[EventResponse]
    state: GameStateResponse


class SessionResponse(BaseModel):
    """A new session token."""

    session_id: str


class StatsResponse(BaseModel):
    """Cumulative statistics for a session."""

    wins: int = Field(..., ge=0)
    losses: int = Field(..., ge=0)
    games_decided: int = Field(..., ge=0)
    win_rate: float = Field(..., ge=0.0, le=1.0)


class ClientMessage(BaseModel):
    """Message sent by a WebSocket client."""

    type: Literal["new_round", "hit", "stand", "get_state"]
