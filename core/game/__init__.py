"""Round controller and state management."""

from core.game.events import GameEvent, EventType, EventEmitter
from core.game.state import RoundState
from core.game.cooldown import ActionCooldown
from core.game.engine import BlackjackGame, TactileCues, PLAYER, DEALER

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "RoundState",
    "ActionCooldown",
    "BlackjackGame",
    "TactileCues",
    "PLAYER",
    "DEALER",
]
