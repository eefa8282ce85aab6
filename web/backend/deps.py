"""
Shared service instance for the API routers.
"""
from datetime import date
from typing import Optional

from fastapi import HTTPException

from core.clock import parse_date_key
from core.daily_service import DailyService
from core.exceptions import AriseError, PreferenceError, StateError

_service: Optional[DailyService] = None


def get_service() -> DailyService:
    global _service
    if _service is None:
        _service = DailyService()
    return _service


def set_service(service: Optional[DailyService]) -> None:
    """Swap the service (tests, alternative stores); None resets to the default."""
    global _service
    _service = service


def parse_day(raw: Optional[str]) -> Optional[date]:
    """Optional ``yyyy-MM-dd`` query parameter; malformed dates are a 400."""
    if not raw:
        return None
    try:
        return parse_date_key(raw)
    except StateError as e:
        raise HTTPException(status_code=400, detail=e.message)


def raise_http(error: AriseError) -> None:
    """Map a known error to an HTTP response."""
    status = 422 if isinstance(error, PreferenceError) else 400
    detail = {"message": error.message}
    if error.hint:
        detail["hint"] = error.hint
    raise HTTPException(status_code=status, detail=detail)
