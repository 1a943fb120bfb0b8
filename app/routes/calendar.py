"""
Calendar Layout Routes
Gantt geometry for the daily and yearly windows
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Query
from loguru import logger

from app.config import get_settings
from app.database import Database
from app.models import ViewMode
from app.engines.calendar_engine import create_calendar_layout_engine
from app.routes.timeline import load_timeline_events

router = APIRouter()


@router.get("/layout")
async def get_calendar_layout(
    view: ViewMode = Query(ViewMode.DAILY),
    width: float = Query(1200.0, gt=0),
    height: Optional[float] = Query(None, gt=0),
    today: Optional[date] = Query(None),
    subject: Optional[str] = Query(None)
):
    """Lay out the timeline on the daily (rolling) or yearly (academic year) window"""
    settings = get_settings()
    today = today or date.today()
    engine = create_calendar_layout_engine(settings)

    if view == ViewMode.DAILY:
        window_start, window_end = engine.daily_window(
            today,
            settings.daily_window_days_before,
            settings.daily_window_days_after
        )
    else:
        window_start, window_end = engine.yearly_window(
            settings.yearly_window_start,
            settings.yearly_window_end
        )

    logger.info(f"[CALENDAR] GET /calendar/layout - view: {view.value}, window: {window_start} to {window_end}, width: {width}")

    db = Database(use_admin=True)
    events = await load_timeline_events(db, window_start, window_end, subject)

    layout = engine.layout(
        view,
        window_start,
        window_end,
        width,
        events,
        today,
        container_height=height
    )

    return {
        "success": True,
        "data": layout
    }
