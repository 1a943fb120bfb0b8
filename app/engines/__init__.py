"""Study Tracker Engines Module - pure progress and timeline computations"""

from app.engines.calendar_engine import CalendarLayoutEngine, create_calendar_layout_engine
from app.engines.stats_engine import StatsEngine, create_stats_engine
from app.engines.timeline_engine import TimelineEngine, create_timeline_engine
from app.engines.progress_engine import ProgressEngine, create_progress_engine
from app.engines.schedule_resolver import (
    ScheduleResolver,
    UnresolvableScheduleError,
    create_schedule_resolver
)

__all__ = [
    "CalendarLayoutEngine",
    "create_calendar_layout_engine",
    "StatsEngine",
    "create_stats_engine",
    "TimelineEngine",
    "create_timeline_engine",
    "ProgressEngine",
    "create_progress_engine",
    "ScheduleResolver",
    "UnresolvableScheduleError",
    "create_schedule_resolver"
]
