"""
Progress Routes
Ideal-vs-actual progress per textbook
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from app.database import Database, rows_to_models
from app.models import Textbook, StudySchedule, StudyLog
from app.engines.progress_engine import create_progress_engine

router = APIRouter()


@router.get("/{textbook_id}")
async def get_progress(
    textbook_id: int,
    today: Optional[date] = Query(None)
):
    """Get progress for a textbook; has_schedule is false when no schedule exists"""
    logger.info(f"[PROGRESS] GET /progress/{textbook_id}")
    db = Database(use_admin=True)

    textbook_row = await db.get_textbook(textbook_id)
    if not textbook_row:
        raise HTTPException(status_code=404, detail="Textbook not found")

    textbooks = rows_to_models(Textbook, [textbook_row])
    if not textbooks:
        raise HTTPException(status_code=422, detail="Stored textbook record is invalid")
    textbook = textbooks[0]

    schedule = None
    schedule_row = await db.get_schedule_for_textbook(textbook_id)
    if schedule_row:
        schedules = rows_to_models(StudySchedule, [schedule_row])
        schedule = schedules[0] if schedules else None

    logs = rows_to_models(StudyLog, await db.get_study_logs(textbook_id=textbook_id))

    engine = create_progress_engine()
    progress = engine.compute(textbook, schedule, logs, today or date.today())

    return {
        "success": True,
        "data": progress
    }
