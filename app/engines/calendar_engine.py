"""
Study Tracker Calendar Layout Engine
Projects timeline events onto a bounded Gantt/calendar surface.
Handles window selection, day columns, month/day ticks, bar stacking and the today marker.
"""

from calendar import month_name
from datetime import date, timedelta
from typing import List, Optional, Tuple
from loguru import logger

from app.models import (
    ViewMode, EventType, ScheduleEvent, ExamEvent, MockExamEvent,
    ChartLayout, DayColumn, DayLabel, MonthSegment, EventBar, EventMarker, TodayMarker
)
from app.engines.date_utils import (
    inclusive_days, is_within, iter_days, is_weekend, ranges_overlap
)
from app.engines.timeline_engine import AnyTimelineEvent

# Space below the last stacked row
CHART_BOTTOM_PADDING = 20.0


class CalendarLayoutEngine:
    """
    The Calendar Layout Engine turns dates into x/y coordinates.
    It produces geometry only; drawing is left to the client.
    """

    def __init__(
        self,
        header_height: float = 65.0,
        event_height: float = 30.0,
        event_margin: float = 5.0,
        default_height: float = 400.0
    ):
        self.header_height = header_height
        self.event_height = event_height
        self.event_margin = event_margin
        self.default_height = default_height

    def daily_window(self, today: date, days_before: int = 7, days_after: int = 60) -> Tuple[date, date]:
        """Rolling window around today"""
        return today - timedelta(days=days_before), today + timedelta(days=days_after)

    def yearly_window(self, start: date, end: date) -> Tuple[date, date]:
        """Fixed academic-year window"""
        return start, end

    def layout(
        self,
        view: ViewMode,
        window_start: date,
        window_end: date,
        container_width: float,
        events: List[AnyTimelineEvent],
        today: date,
        container_height: Optional[float] = None
    ) -> ChartLayout:
        """
        Lay out events on a window.

        Args:
            view: DAILY emits one label per day, YEARLY one per first-of-month
            window_start: First day shown
            window_end: Last day shown (inclusive)
            container_width: Drawing surface width
            events: Timeline events in the order they should stack
            today: Reference date for the today marker
            container_height: Minimum chart height

        Returns:
            ChartLayout with columns, ticks, bars, markers and today marker
        """
        total_days = inclusive_days(window_start, window_end)
        if total_days <= 0:
            raise ValueError(f"Window end {window_end} is before start {window_start}")
        if container_width <= 0:
            raise ValueError("Container width must be positive")

        day_width = container_width / total_days

        bars, markers = self._place_events(events, window_start, window_end, day_width)
        chart_height = self._chart_height(len(bars), container_height)

        # Markers span the whole chart, so their bottom is known only now
        markers = [m.model_copy(update={"y2": chart_height}) for m in markers]

        day_labels, month_segments = self.generate_labels(
            view, window_start, window_end, container_width, day_width
        )

        layout = ChartLayout(
            view=view,
            window_start=window_start,
            window_end=window_end,
            container_width=container_width,
            chart_height=chart_height,
            total_days=total_days,
            day_width=day_width,
            header_height=self.header_height,
            event_height=self.event_height,
            event_margin=self.event_margin,
            days=self.generate_day_columns(window_start, window_end, day_width),
            day_labels=day_labels,
            month_segments=month_segments,
            bars=bars,
            markers=markers,
            today_marker=self._today_marker(today, window_start, window_end, day_width, chart_height)
        )

        logger.info(
            f"[LAYOUT] {view.value} layout {window_start} to {window_end}: "
            f"{total_days} days, {len(bars)} bars, {len(markers)} markers"
        )
        return layout

    def date_to_x(self, day: date, window_start: date, day_width: float) -> float:
        return (day - window_start).days * day_width

    def generate_day_columns(self, window_start: date, window_end: date, day_width: float) -> List[DayColumn]:
        return [
            DayColumn(
                date=day,
                x=self.date_to_x(day, window_start, day_width),
                width=day_width,
                is_weekend=is_weekend(day)
            )
            for day in iter_days(window_start, window_end)
        ]

    def generate_labels(
        self,
        view: ViewMode,
        window_start: date,
        window_end: date,
        container_width: float,
        day_width: float
    ) -> Tuple[List[DayLabel], List[MonthSegment]]:
        """
        Walk the window day by day.

        A month segment opens whenever the year-month pair changes and is
        closed at the next segment's x; the last one is closed against the
        container's right edge.
        """
        day_labels: List[DayLabel] = []
        segments: List[MonthSegment] = []
        prev_year = None
        prev_month = None

        for i, day in enumerate(iter_days(window_start, window_end)):
            x = i * day_width
            show_year = prev_year != day.year
            prev_year = day.year

            if prev_month != (day.year, day.month):
                if segments:
                    segments[-1].width = x - segments[-1].x
                segments.append(MonthSegment(
                    year=day.year,
                    month=day.month,
                    name=month_name[day.month],
                    x=x,
                    width=0.0
                ))
                prev_month = (day.year, day.month)

            if view == ViewMode.DAILY:
                day_labels.append(DayLabel(
                    date=day,
                    x=x,
                    day_label=f"{day.day:02d}",
                    year_label=str(day.year) if show_year else ""
                ))

        if segments:
            segments[-1].width = container_width - segments[-1].x

        if view == ViewMode.YEARLY:
            for segment in segments:
                first_of_month = date(segment.year, segment.month, 1)
                # A window opening mid-month gets no label for that month
                if first_of_month >= window_start:
                    day_labels.append(DayLabel(date=first_of_month, x=segment.x, day_label="01"))

        return day_labels, segments

    def _place_events(
        self,
        events: List[AnyTimelineEvent],
        window_start: date,
        window_end: date,
        day_width: float
    ) -> Tuple[List[EventBar], List[EventMarker]]:
        bars: List[EventBar] = []
        markers: List[EventMarker] = []

        for event in events:
            if event.start_date is None:
                continue

            end_date = event.end_date or event.start_date
            if not ranges_overlap(event.start_date, end_date, window_start, window_end):
                continue

            start_x = self.date_to_x(event.start_date, window_start, day_width)
            end_x = self.date_to_x(end_date + timedelta(days=1), window_start, day_width)
            width = max(end_x - start_x, day_width)

            if isinstance(event, ScheduleEvent):
                row = len(bars)
                bars.append(EventBar(
                    event_id=event.id,
                    title=event.title,
                    type=EventType.SCHEDULE,
                    row=row,
                    x=start_x,
                    y=self.header_height + row * (self.event_height + self.event_margin),
                    width=width,
                    height=self.event_height
                ))
            elif isinstance(event, ExamEvent):
                markers.append(self._marker(event, EventType.EXAM, start_x, width))
            elif isinstance(event, MockExamEvent):
                markers.append(self._marker(event, EventType.MOCK_EXAM, start_x, width))
            else:
                raise TypeError(f"Unknown timeline event: {type(event).__name__}")

        return bars, markers

    def _marker(self, event: AnyTimelineEvent, event_type: EventType, x: float, width: float) -> EventMarker:
        return EventMarker(
            event_id=event.id,
            title=event.title,
            type=event_type,
            x=x,
            width=width,
            y1=self.header_height,
            y2=self.header_height
        )

    def _chart_height(self, rows: int, container_height: Optional[float]) -> float:
        minimum = self.default_height if container_height is None else container_height
        stacked = self.header_height + rows * (self.event_height + self.event_margin) + CHART_BOTTOM_PADDING
        return max(minimum, stacked)

    def _today_marker(
        self,
        today: date,
        window_start: date,
        window_end: date,
        day_width: float,
        chart_height: float
    ) -> Optional[TodayMarker]:
        """Centered on today's column; omitted when today is outside the window"""
        if not is_within(today, window_start, window_end):
            return None

        return TodayMarker(
            date=today,
            x=self.date_to_x(today, window_start, day_width) + day_width / 2,
            y1=self.header_height,
            y2=chart_height
        )


def create_calendar_layout_engine(settings=None) -> CalendarLayoutEngine:
    """Factory function to create a CalendarLayoutEngine from settings"""
    if settings is None:
        return CalendarLayoutEngine()
    return CalendarLayoutEngine(
        header_height=settings.chart_header_height,
        event_height=settings.chart_event_height,
        event_margin=settings.chart_event_margin,
        default_height=settings.chart_default_height
    )
