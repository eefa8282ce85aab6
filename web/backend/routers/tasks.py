from typing import Optional

from fastapi import APIRouter

from core.exceptions import AriseError
from web.backend.deps import get_service, parse_day, raise_http

router = APIRouter()


@router.get("/today")
async def get_today(user_id: str, day: Optional[str] = None):
    """Today's tasks, regenerating them first if the date changed."""
    try:
        snapshot = get_service().today(user_id, parse_day(day))
    except AriseError as e:
        raise_http(e)
    return snapshot.to_dict()


@router.post("/{task_id}/complete")
async def complete_task(user_id: str, task_id: str, day: Optional[str] = None):
    """
    Complete one task. Unknown or already completed ids come back with
    changed=false rather than an error.
    """
    try:
        outcome = get_service().complete_task(user_id, task_id, parse_day(day))
    except AriseError as e:
        raise_http(e)
    return outcome.to_dict()
