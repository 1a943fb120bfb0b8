"""
Timeline Routes
Merged schedule/exam timeline for the Gantt views
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from loguru import logger
import time

from app.database import Database, rows_to_models
from app.models import StudySchedule, Exam
from app.engines.timeline_engine import create_timeline_engine

router = APIRouter()


async def load_timeline_events(
    db: Database,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    subject: Optional[str] = None
) -> list:
    """Fetch schedules and exams and merge them into sorted events, windowed when a range is given"""
    engine = create_timeline_engine()

    schedule_rows = await db.get_schedules(
        start_date.isoformat() if start_date else None,
        end_date.isoformat() if end_date else None
    )
    # Exams are windowed in the engine so unparsable dates are dropped rather than failing the query
    exam_rows = await db.get_exams(is_mock=False)
    mock_rows = await db.get_exams(is_mock=True)

    events = engine.aggregate(
        rows_to_models(StudySchedule, schedule_rows),
        rows_to_models(Exam, exam_rows),
        rows_to_models(Exam, mock_rows)
    )

    if subject:
        events = engine.filter_by_subject(events, subject)

    if start_date and end_date:
        return engine.filter_events_in_range(events, start_date, end_date)

    sorted_events = engine.sort_events(events)
    if start_date:
        sorted_events = [e for e in sorted_events if (e.end_date or e.start_date) >= start_date]
    if end_date:
        sorted_events = [e for e in sorted_events if e.start_date <= end_date]
    return sorted_events


@router.get("/timeline-events")
async def get_timeline_events(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    subject: Optional[str] = Query(None)
):
    """Get schedules, exams and mock exams as one chronological list, optionally narrowed to a subject"""
    start_time = time.time()
    logger.info(f"[TIMELINE] GET /timeline-events - range: {start_date or 'all'} to {end_date or 'all'}, subject: {subject}")

    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date cannot be earlier than start_date")

    db = Database(use_admin=True)
    events = await load_timeline_events(db, start_date, end_date, subject)

    elapsed = (time.time() - start_time) * 1000
    logger.info(f"[TIMELINE] Returning {len(events)} events ({elapsed:.2f}ms)")

    return {
        "success": True,
        "data": events,
        "count": len(events)
    }
