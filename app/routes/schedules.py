"""
Schedule Routes
End-date resolution for the schedule form
"""

from datetime import date
from typing import Optional, Dict, Any
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, validator
from loguru import logger

from app.database import Database
from app.models import normalize_weekday_goals
from app.engines.schedule_resolver import (
    create_schedule_resolver, resolve_problem_count, weekday_goals_from_presets,
    UnresolvableScheduleError
)

router = APIRouter()


class ResolveScheduleRequest(BaseModel):
    """
    Request to derive a schedule's end date.
    Quotas come from weekday_goals, or from the weekday/weekend presets when no map is given.
    """
    start_date: date
    weekday_goals: Optional[Dict[int, int]] = None
    weekday_goal: Optional[int] = None
    weekend_goal: Optional[int] = None
    total_problems: Optional[int] = Field(default=None, ge=0)
    textbook_id: Optional[int] = None
    buffer_days: int = Field(default=0, ge=0)

    @validator("weekday_goals", pre=True)
    def parse_weekday_goals(cls, v: Any):
        if v is None:
            return v
        return normalize_weekday_goals(v)

    def resolved_goals(self) -> Optional[Dict[int, int]]:
        if self.weekday_goals is not None:
            return self.weekday_goals
        if self.weekday_goal is None and self.weekend_goal is None:
            return None
        return weekday_goals_from_presets(self.weekday_goal, self.weekend_goal)


@router.post("/resolve")
async def resolve_schedule(request: ResolveScheduleRequest):
    """
    Compute the end date from the weekly quota.
    Uses total_problems when given, otherwise the textbook's total.
    """
    logger.info(f"[SCHEDULES] POST /schedules/resolve - start: {request.start_date}, textbook_id: {request.textbook_id}")

    weekday_goals = request.resolved_goals()
    if weekday_goals is None:
        raise HTTPException(status_code=422, detail="Either weekday_goals or weekday/weekend presets are required")

    textbook_total = None
    if request.total_problems is None:
        if request.textbook_id is None:
            raise HTTPException(status_code=422, detail="Either total_problems or textbook_id is required")

        db = Database(use_admin=True)
        textbook = await db.get_textbook(request.textbook_id)
        if not textbook:
            raise HTTPException(status_code=404, detail="Textbook not found")
        textbook_total = textbook.get("total_problems")

    problem_count = resolve_problem_count(request.total_problems, textbook_total)

    resolver = create_schedule_resolver()
    try:
        resolution = resolver.resolve(
            request.start_date,
            weekday_goals,
            problem_count,
            request.buffer_days
        )
    except UnresolvableScheduleError as e:
        logger.warning(f"[SCHEDULES] Cannot resolve schedule: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "success": True,
        "data": resolution
    }
