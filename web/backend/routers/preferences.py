from typing import Dict, List, Optional, Union

from fastapi import APIRouter
from pydantic import BaseModel

from core.exceptions import AriseError, PreferenceError
from core.models import Preferences
from web.backend.deps import get_service, raise_http

router = APIRouter()


class PreferencesRequest(BaseModel):
    # 起床时间：military 整数 (700) 或 "07:00"
    wakeWeekday: Optional[Union[int, str]] = None
    wakeWeekend: Optional[Union[int, str]] = None
    sleepHoursWeekday: Optional[float] = None
    sleepHoursWeekend: Optional[float] = None
    workoutHoursPerDay: Optional[float] = None
    workoutDays: List[int] = []
    screenLimitHours: Optional[float] = None
    weightLbs: Optional[int] = None
    takeColdShowers: bool = False
    coldShowerDays: List[int] = []
    selectedActivities: Dict[str, List[int]] = {}
    majorFocus: str = ""
    addictionDaysPerWeek: Optional[int] = None


def _to_preferences(req: PreferencesRequest) -> Preferences:
    doc = req.model_dump(exclude_none=True)
    prefs = Preferences.from_document(doc)
    # 宽松解析会把非法时间当作缺失；写入边界必须显式拒绝
    parsed_wake = {"wakeWeekday": prefs.wake_weekday, "wakeWeekend": prefs.wake_weekend}
    for field_name, minutes in parsed_wake.items():
        if field_name in doc and minutes is None:
            raise PreferenceError(f"{field_name} is not a valid time of day: {doc[field_name]!r}", field_name)
    return prefs


@router.get("")
async def get_preferences(user_id: str):
    try:
        prefs = get_service().store.load_preferences(user_id, refresh=True)
    except AriseError as e:
        raise_http(e)
    return prefs.to_document()


@router.put("")
async def update_preferences(user_id: str, req: PreferencesRequest):
    """Validate and store preferences. Today's task list is rebuilt from them on the next read."""
    try:
        prefs = get_service().store.save_preferences(user_id, _to_preferences(req))
    except AriseError as e:
        raise_http(e)
    return prefs.to_document()
