"""
Timeline Aggregator
Merges study schedules, exams and mock exams into one list of timeline events.
"""

from datetime import date
from typing import List, Optional, Tuple, Union
from loguru import logger

from app.models import (
    StudySchedule, Exam, ScheduleEvent, ExamEvent, MockExamEvent
)
from app.engines.date_utils import parse_date, is_within, ranges_overlap

AnyTimelineEvent = Union[ScheduleEvent, ExamEvent, MockExamEvent]

UNKNOWN_TITLE = "N/A"


class TimelineEngine:
    """
    Projects stored rows onto timeline events.
    Every call allocates fresh events; nothing is cached or deduplicated.
    """

    def schedule_to_event(self, schedule: StudySchedule) -> ScheduleEvent:
        return ScheduleEvent(
            id=f"schedule-{schedule.id}",
            title=schedule.textbook_title or UNKNOWN_TITLE,
            start_date=schedule.start_date,
            end_date=schedule.end_date,
            details=schedule
        )

    def exam_to_event(self, exam: Exam) -> Union[ExamEvent, MockExamEvent]:
        """
        Point event on the exam date.
        An unparsable date leaves start/end empty; sorted and filtered views drop it.
        """
        exam_date = parse_date(exam.date)
        if exam_date is None:
            logger.debug(f"[TIMELINE] Exam {exam.id} has unparsable date {exam.date!r}")

        if exam.is_mock:
            return MockExamEvent(
                id=f"exam-{exam.id}",
                title=exam.name,
                start_date=exam_date,
                end_date=exam_date,
                details=exam
            )

        title = f"{exam.university_name} {exam.name}" if exam.university_name else exam.name
        return ExamEvent(
            id=f"exam-{exam.id}",
            title=title,
            start_date=exam_date,
            end_date=exam_date,
            details=exam
        )

    def aggregate(
        self,
        schedules: List[StudySchedule],
        exams: List[Exam],
        mock_exams: Optional[List[Exam]] = None
    ) -> List[AnyTimelineEvent]:
        """
        Merge the three sources in input order: schedules, exams, mock exams.

        Args:
            schedules: Study schedules with joined textbook titles
            exams: Exams (real or mock, selected by is_mock)
            mock_exams: Additional mock exams fetched separately

        Returns:
            Unsorted list of timeline events
        """
        events: List[AnyTimelineEvent] = []

        for schedule in schedules:
            events.append(self.schedule_to_event(schedule))

        for exam in list(exams) + list(mock_exams or []):
            events.append(self.exam_to_event(exam))

        logger.info(
            f"[TIMELINE] Aggregated {len(events)} events "
            f"({len(schedules)} schedules, {len(events) - len(schedules)} exams)"
        )
        return events

    def sort_events(self, events: List[AnyTimelineEvent]) -> List[AnyTimelineEvent]:
        """
        Chronological order by start date, then end date.
        Events without a parsable start date are excluded.
        """
        dated = [e for e in events if e.start_date is not None]
        dropped = len(events) - len(dated)
        if dropped:
            logger.debug(f"[TIMELINE] Excluded {dropped} events with unparsable dates from sort")

        return sorted(dated, key=self._sort_key)

    def filter_events_in_range(
        self,
        events: List[AnyTimelineEvent],
        start: date,
        end: date
    ) -> List[AnyTimelineEvent]:
        """
        Keep schedules overlapping [start, end] and exams dated inside it.
        Returns the result sorted.
        """
        kept = []
        for event in self.sort_events(events):
            if isinstance(event, ScheduleEvent):
                if ranges_overlap(event.start_date, event.end_date, start, end):
                    kept.append(event)
            elif isinstance(event, (ExamEvent, MockExamEvent)):
                if is_within(event.start_date, start, end):
                    kept.append(event)
            else:
                raise TypeError(f"Unknown timeline event: {type(event).__name__}")

        logger.debug(f"[TIMELINE] {len(kept)} of {len(events)} events within {start} to {end}")
        return kept

    def filter_by_subject(self, events: List[AnyTimelineEvent], subject: str) -> List[AnyTimelineEvent]:
        """Keep schedules for textbooks of `subject`; exams are not tied to a subject and always stay"""
        return [
            event for event in events
            if not isinstance(event, ScheduleEvent) or event.details.textbook_subject == subject
        ]

    def _sort_key(self, event: AnyTimelineEvent) -> Tuple[date, date]:
        return (event.start_date, event.end_date or event.start_date)


def create_timeline_engine() -> TimelineEngine:
    """Factory function to create a TimelineEngine instance"""
    return TimelineEngine()
