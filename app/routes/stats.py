"""
Study Tracker Stats Routes
Yearly activity calendar (heat-map data)
"""

from fastapi import APIRouter, Query
from datetime import date
from typing import Optional
from loguru import logger
import time

from app.database import Database, rows_to_models
from app.models import StudyLog
from app.engines.stats_engine import create_stats_engine


router = APIRouter()


@router.get("/yearly")
async def get_yearly_activity(
    year: Optional[int] = Query(None, ge=1, le=9999),
    textbook_id: Optional[int] = Query(None),
    subject: Optional[str] = Query(None)
):
    """Per-day solved totals for a year, optionally narrowed to a textbook or subject"""
    start_time = time.time()
    if year is None:
        year = date.today().year

    logger.info(f"[STATS] GET /logs/yearly - year: {year}, textbook_id: {textbook_id}, subject: {subject}")

    db = Database(use_admin=True)
    rows = await db.get_study_logs(f"{year:04d}-01-01", f"{year:04d}-12-31", textbook_id)
    logs = rows_to_models(StudyLog, rows)

    if subject:
        logs = [log for log in logs if log.textbook_subject == subject]

    stats_engine = create_stats_engine()
    activity = stats_engine.compute_yearly_activity(logs, year)

    elapsed = (time.time() - start_time) * 1000
    logger.info(f"[STATS] Activity for {year} built from {len(logs)} logs ({elapsed:.2f}ms)")

    return {
        "success": True,
        "data": activity
    }
