from typing import Optional

from fastapi import APIRouter

from core.exceptions import AriseError
from web.backend.deps import get_service, parse_day, raise_http

router = APIRouter()


@router.get("")
async def get_progress(user_id: str, day: Optional[str] = None):
    """Rank, journey, skills, achievements and today's completion."""
    try:
        return get_service().progress_summary(user_id, parse_day(day))
    except AriseError as e:
        raise_http(e)


@router.post("/streak/reset")
async def reset_streak(user_id: str):
    try:
        previous = get_service().reset_streak(user_id)
    except AriseError as e:
        raise_http(e)
    return {"streak": 0, "previousStreak": previous}
