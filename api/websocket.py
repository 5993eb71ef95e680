"""WebSocket endpoint that streams game steps at presentation pace."""

import asyncio
import json
import logging
from typing import Any, Iterator

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from api.routes.game import game_state_response
from api.schemas import ClientMessage
from api.session import extract_session_id, registry
from config import config
from core.game import BlackjackGame, EventType, GameEvent

logger = logging.getLogger(__name__)

router = APIRouter()

# Pause after each step, in milliseconds
_STEP_DELAYS_MS: dict[EventType, int] = {
    EventType.CARD_DEALT: config.pacing.card_deal_delay_ms,
    EventType.PLAYER_STAND: config.pacing.dealer_reveal_delay_ms,
    EventType.DEALER_REVEALS: config.pacing.dealer_turn_delay_ms,
    EventType.DEALER_HITS: config.pacing.dealer_turn_delay_ms,
    EventType.PLAYER_BLACKJACK: config.pacing.dealer_turn_delay_ms,
    EventType.PENDING_BUST: config.pacing.auto_stand_delay_ms,
}


def step_delay(event: GameEvent) -> float:
    """Return the pause after an event, in seconds."""
    return _STEP_DELAYS_MS.get(event.event_type, 0) / 1000


def _state_message(game: BlackjackGame) -> dict[str, Any]:
    return {"type": "state_update", "state": game_state_response(game).model_dump()}


def _event_message(event: GameEvent, game: BlackjackGame) -> dict[str, Any]:
    return {
        "type": "event",
        **event.to_dict(),
        "state": game_state_response(game).model_dump(),
    }


async def stream_steps(websocket: WebSocket, game: BlackjackGame, steps: Iterator[GameEvent]) -> None:
    """Send each step to the client, pausing between steps."""
    for event in steps:
        await websocket.send_json(_event_message(event, game))
        delay = step_delay(event)
        if delay:
            await asyncio.sleep(delay)


def _stream_done(task: asyncio.Task, streams: set[asyncio.Task], session_id: str) -> None:
    streams.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Step stream for session %s failed: %r", session_id, exc)


@router.websocket("/game/{session_id}")
async def game_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for real-time game updates.

    Messages from client:
    - {"type": "new_round"}
    - {"type": "hit"}
    - {"type": "stand"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "state_update", "state": {...}}
    - {"type": "event", "event_type": "...", "data": {...}, "state": {...}}
    - {"type": "error", "message": "..."}

    Rejected commands produce no messages.
    """
    raw_id = extract_session_id(session_id)
    if raw_id is None:
        await websocket.close(code=1008)
        return

    await websocket.accept()
    game = registry.get_or_create(raw_id)
    await websocket.send_json(_state_message(game))

    commands = {
        "new_round": game.start_round,
        "hit": game.hit,
        "stand": game.stand,
    }
    streams: set[asyncio.Task] = set()

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = ClientMessage(**json.loads(data))
            except (json.JSONDecodeError, TypeError, ValidationError) as e:
                await websocket.send_json({"type": "error", "message": f"Invalid message: {e}"})
                continue

            if message.type == "get_state":
                await websocket.send_json(_state_message(game))
                continue

            # Steps are streamed in the background so new commands keep arriving
            task = asyncio.create_task(stream_steps(websocket, game, commands[message.type]()))
            streams.add(task)
            task.add_done_callback(lambda t: _stream_done(t, streams, raw_id))

    except WebSocketDisconnect:
        logger.debug("WebSocket for session %s disconnected", raw_id)
    finally:
        for task in list(streams):
            task.cancel()

        # Runs before any await so a cancelled handler still settles the round
        skipped = game.play_out()
        if skipped:
            logger.info("Played out %d unsent steps for session %s", len(skipped), raw_id)

        await asyncio.gather(*streams, return_exceptions=True)
