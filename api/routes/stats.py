"""Statistics API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Header

from api.routes.game import resolve_game
from api.schemas import StatsResponse

router = APIRouter()


@router.get("")
async def get_stats(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> StatsResponse:
    """Get the session's cumulative win/loss record."""
    _, game = resolve_game(session_id)
    stats = game.statistics
    return StatsResponse(
        wins=stats.wins,
        losses=stats.losses,
        games_decided=stats.games_decided,
        win_rate=stats.win_rate,
    )
