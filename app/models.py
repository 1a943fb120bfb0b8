"""
Study Tracker Pydantic Models
Type-safe data structures for stored rows and derived engine output
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Literal
from pydantic import BaseModel, Field, validator
import json


# ==========================================
# ENUMS
# ==========================================

class EventType(str, Enum):
    SCHEDULE = "schedule"
    EXAM = "exam"
    MOCK_EXAM = "mock_exam"


class ProgressStatus(str, Enum):
    ON_TRACK = "on_track"
    BEHIND = "behind"


class ViewMode(str, Enum):
    DAILY = "daily"
    YEARLY = "yearly"


# Sunday=0 ... Saturday=6
WEEKDAY_INDICES = range(7)


def normalize_weekday_goals(value: Any) -> Dict[int, int]:
    """
    Coerce a weekday quota map into {0..6: int}.

    Accepts None, a dict with int or string keys, a 7-item list,
    or the JSON string form the storage layer keeps.
    Missing weekdays default to 0.
    """
    if value is None or value == "":
        return {i: 0 for i in WEEKDAY_INDICES}

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"weekday_goals is not valid JSON: {e}")

    if isinstance(value, (list, tuple)):
        value = dict(enumerate(value))

    if not isinstance(value, dict):
        raise ValueError("weekday_goals must be a mapping of weekday index to quota")

    goals = {i: 0 for i in WEEKDAY_INDICES}
    for key, quota in value.items():
        index = int(key)
        if index not in WEEKDAY_INDICES:
            raise ValueError(f"Invalid weekday index {key}; expected 0 (Sunday) to 6 (Saturday)")
        quota = int(quota or 0)
        if quota < 0:
            raise ValueError(f"Weekday quota for day {index} cannot be negative")
        goals[index] = quota

    return goals


# ==========================================
# TEXTBOOK MODELS
# ==========================================

class Textbook(BaseModel):
    """A unit of study material with a fixed problem count"""
    id: int
    title: str
    subject: str = ""
    total_problems: int = Field(default=0, ge=0)
    anki_deck_name: Optional[str] = None  # opaque flashcard deck key

    class Config:
        from_attributes = True


# ==========================================
# SCHEDULE MODELS
# ==========================================

class StudySchedule(BaseModel):
    """Planned date range and weekly quota for one textbook"""
    id: int
    textbook_id: int
    start_date: date
    end_date: date
    daily_goal: Optional[int] = None
    buffer_days: int = Field(default=0, ge=0)
    weekday_goals: Dict[int, int] = Field(default_factory=lambda: normalize_weekday_goals(None))
    total_problems: Optional[int] = Field(default=None, ge=0)

    # Joined from textbooks
    textbook_title: Optional[str] = None
    textbook_subject: Optional[str] = None

    @validator("weekday_goals", pre=True)
    def parse_weekday_goals(cls, v):
        return normalize_weekday_goals(v)

    @validator("end_date")
    def validate_end_date(cls, v, values):
        start = values.get("start_date")
        if start is not None and v < start:
            raise ValueError("End date cannot be earlier than start date")
        return v

    @property
    def weekly_total(self) -> int:
        return sum(self.weekday_goals.values())

    class Config:
        from_attributes = True


class ScheduleResolution(BaseModel):
    """End date derived from a weekly quota"""
    start_date: date
    end_date: date
    total_days: int
    weeks_needed: int
    weekly_total: int
    problem_count: int
    buffer_days: int = 0
    weekday_goals: Dict[int, int] = Field(default_factory=lambda: normalize_weekday_goals(None))


# ==========================================
# STUDY LOG MODELS
# ==========================================

class StudyLog(BaseModel):
    """Problems actually solved for one textbook on one date"""
    date: date
    textbook_id: int
    id: Optional[int] = None
    planned_amount: int = 0
    actual_amount: int = Field(default=0, ge=0)
    notes: Optional[str] = None
    textbook_title: Optional[str] = None
    textbook_subject: Optional[str] = None

    class Config:
        from_attributes = True


# ==========================================
# EXAM MODELS
# ==========================================

class Exam(BaseModel):
    """A real exam or a mock exam"""
    id: int
    name: str
    # Kept raw: rows with an unparsable date must not break a batch
    date: Optional[str] = None
    is_mock: bool = False
    exam_type: str = ""
    university_id: Optional[int] = None
    university_name: Optional[str] = None
    notes: Optional[str] = None

    @validator("date", pre=True)
    def stringify_date(cls, v):
        if isinstance(v, datetime):
            return v.date().isoformat()
        if isinstance(v, date):
            return v.isoformat()
        return v

    class Config:
        from_attributes = True


# ==========================================
# TIMELINE MODELS
# ==========================================

class TimelineEventBase(BaseModel):
    """Display-oriented projection shared by every event variant"""
    id: str
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    class Config:
        frozen = True


class ScheduleEvent(TimelineEventBase):
    type: Literal["schedule"] = "schedule"
    start_date: date
    end_date: date
    details: StudySchedule


class ExamEvent(TimelineEventBase):
    type: Literal["exam"] = "exam"
    details: Exam


class MockExamEvent(TimelineEventBase):
    type: Literal["mock_exam"] = "mock_exam"
    details: Exam


# ==========================================
# PROGRESS MODELS
# ==========================================

class ProgressSummary(BaseModel):
    total_problems: int
    solved_problems: int
    remaining_problems: int
    progress_percentage: int
    days_remaining: int
    daily_target: int


class DailyPoint(BaseModel):
    date: date
    actual: int
    planned: int


class CumulativePoint(BaseModel):
    date: date
    actual: int
    ideal: int


class Progress(BaseModel):
    """Ideal-vs-actual progress for a scheduled textbook"""
    has_schedule: Literal[True] = True
    textbook: Textbook
    schedule: StudySchedule
    progress: ProgressSummary
    total_days: int
    elapsed_days: int
    remaining_days: int
    ideal_solved: int
    actual_solved: int
    deviation: int
    status: ProgressStatus
    time_progress_percentage: int
    daily_data: List[DailyPoint] = Field(default_factory=list)
    cumulative_data: List[CumulativePoint] = Field(default_factory=list)
    logs: List[StudyLog] = Field(default_factory=list)

    class Config:
        frozen = True


class NoScheduleProgress(BaseModel):
    """Returned when a textbook has no schedule yet"""
    has_schedule: Literal[False] = False
    textbook: Textbook

    class Config:
        frozen = True


# ==========================================
# CALENDAR LAYOUT MODELS
# ==========================================

class DayColumn(BaseModel):
    date: date
    x: float
    width: float
    is_weekend: bool


class DayLabel(BaseModel):
    date: date
    x: float
    day_label: str
    year_label: str = ""


class MonthSegment(BaseModel):
    year: int
    month: int
    name: str
    x: float
    width: float


class EventBar(BaseModel):
    """Stacked horizontal bar for a schedule"""
    event_id: str
    title: str
    type: EventType
    row: int
    x: float
    y: float
    width: float
    height: float


class EventMarker(BaseModel):
    """Full-height vertical marker for an exam or mock exam"""
    event_id: str
    title: str
    type: EventType
    x: float
    width: float
    y1: float
    y2: float


class TodayMarker(BaseModel):
    date: date
    x: float
    y1: float
    y2: float


class ChartLayout(BaseModel):
    view: ViewMode
    window_start: date
    window_end: date
    container_width: float
    chart_height: float
    total_days: int
    day_width: float
    header_height: float
    event_height: float
    event_margin: float
    days: List[DayColumn] = Field(default_factory=list)
    day_labels: List[DayLabel] = Field(default_factory=list)
    month_segments: List[MonthSegment] = Field(default_factory=list)
    bars: List[EventBar] = Field(default_factory=list)
    markers: List[EventMarker] = Field(default_factory=list)
    today_marker: Optional[TodayMarker] = None


# ==========================================
# ACTIVITY MODELS
# ==========================================

class ActivityDay(BaseModel):
    date: date
    amount: int
    level: int
    weekday: int  # Sunday=0


class MonthlyActivity(BaseModel):
    month: str  # YYYY-MM
    total: int
    active_days: int


class ActivityStats(BaseModel):
    total: int
    active_days: int
    max_amount: int
    mean_per_day: float


class ActivityCalendar(BaseModel):
    year: int
    days: List[ActivityDay]
    weeks: List[List[Optional[ActivityDay]]]
    months: List[MonthlyActivity]
    stats: ActivityStats
