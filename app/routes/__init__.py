"""Study Tracker Routes Module - read-only engine API"""

from app.routes import timeline, calendar, progress, stats, schedules

__all__ = [
    "timeline",
    "calendar",
    "progress",
    "stats",
    "schedules"
]
