"""
Study Tracker Timeline Tests
Merging schedules and exams into timeline events, plus the timeline endpoint
"""

import pytest
from unittest.mock import patch
from datetime import date

from app.models import StudySchedule, Exam, ScheduleEvent, ExamEvent, MockExamEvent
from app.engines.timeline_engine import TimelineEngine, create_timeline_engine, UNKNOWN_TITLE


@pytest.fixture
def engine():
    return create_timeline_engine()


def make_schedule(schedule_id, start, end, title="Chart Formula"):
    return StudySchedule(
        id=schedule_id,
        textbook_id=schedule_id,
        start_date=start,
        end_date=end,
        textbook_title=title
    )


class TestProjection:
    """Tests for schedule/exam projection"""

    def test_factory_returns_engine(self, engine):
        assert isinstance(engine, TimelineEngine)

    def test_schedule_event(self, engine, schedule):
        event = engine.schedule_to_event(schedule)

        assert isinstance(event, ScheduleEvent)
        assert event.id == "schedule-10"
        assert event.type == "schedule"
        assert event.title == "Focus Gold Math IA"
        assert event.start_date == date(2025, 4, 1)
        assert event.end_date == date(2025, 4, 10)
        assert event.details.id == 10

    def test_schedule_without_title(self, engine):
        event = engine.schedule_to_event(make_schedule(3, date(2025, 4, 1), date(2025, 4, 2), title=None))
        assert event.title == UNKNOWN_TITLE

    def test_real_exam_title_includes_university(self, engine, exam):
        event = engine.exam_to_event(exam)

        assert isinstance(event, ExamEvent)
        assert event.id == "exam-5"
        assert event.title == "Kyoto University Second-stage Exam"
        assert event.start_date == event.end_date == date(2026, 2, 25)

    def test_real_exam_without_university(self, engine):
        event = engine.exam_to_event(Exam(id=8, name="Common Test", date="2026-01-17"))
        assert event.title == "Common Test"

    def test_mock_exam(self, engine, mock_exam):
        event = engine.exam_to_event(mock_exam)

        assert isinstance(event, MockExamEvent)
        assert event.type == "mock_exam"
        assert event.title == "Summer Mock"

    def test_unparsable_exam_date_still_emitted(self, engine, broken_exam):
        event = engine.exam_to_event(broken_exam)
        assert event.start_date is None
        assert event.end_date is None

    def test_exam_date_from_date_object(self, engine):
        event = engine.exam_to_event(Exam(id=9, name="Entrance", date=date(2026, 2, 1)))
        assert event.start_date == date(2026, 2, 1)


class TestAggregate:
    """Tests for aggregate"""

    def test_input_order(self, engine, schedule, exam, mock_exam):
        events = engine.aggregate([schedule], [exam], [mock_exam])
        assert [e.id for e in events] == ["schedule-10", "exam-5", "exam-6"]
        assert [e.type for e in events] == ["schedule", "exam", "mock_exam"]

    def test_no_deduplication(self, engine, exam):
        events = engine.aggregate([], [exam, exam])
        assert len(events) == 2

    def test_repeated_calls_are_independent(self, engine, schedule):
        first = engine.aggregate([schedule], [])
        second = engine.aggregate([schedule], [])
        assert first == second
        assert first[0] is not second[0]

    def test_empty(self, engine):
        assert engine.aggregate([], [], []) == []


class TestSortAndFilter:
    """Tests for sort_events and filter_events_in_range"""

    def test_sort_by_start_then_end(self, engine):
        long_one = make_schedule(1, date(2025, 4, 1), date(2025, 6, 30))
        short_one = make_schedule(2, date(2025, 4, 1), date(2025, 4, 15))
        early = make_schedule(3, date(2025, 3, 1), date(2025, 12, 31))

        events = engine.sort_events(engine.aggregate([long_one, short_one, early], []))
        assert [e.id for e in events] == ["schedule-3", "schedule-2", "schedule-1"]

    def test_sort_excludes_unparsable(self, engine, exam, broken_exam):
        events = engine.sort_events(engine.aggregate([], [exam, broken_exam]))
        assert [e.id for e in events] == ["exam-5"]

    def test_filter_drops_unparsable_without_raising(self, engine, schedule, exam, mock_exam, broken_exam):
        events = engine.aggregate([schedule], [exam, broken_exam], [mock_exam])
        kept = engine.filter_events_in_range(events, date(2025, 4, 1), date(2026, 3, 31))

        assert "exam-7" not in [e.id for e in kept]
        assert [e.id for e in kept] == ["schedule-10", "exam-6", "exam-5"]

    def test_filter_keeps_overlapping_schedules(self, engine):
        straddling = make_schedule(1, date(2025, 3, 1), date(2025, 4, 5))
        outside = make_schedule(2, date(2025, 1, 1), date(2025, 3, 31))
        events = engine.aggregate([straddling, outside], [])

        kept = engine.filter_events_in_range(events, date(2025, 4, 1), date(2025, 4, 30))
        assert [e.id for e in kept] == ["schedule-1"]

    def test_filter_by_subject_keeps_exams(self, engine, exam, mock_exam):
        math_book = make_schedule(1, date(2025, 4, 1), date(2025, 4, 30))
        english_book = make_schedule(2, date(2025, 4, 1), date(2025, 4, 30))
        math_book = math_book.model_copy(update={"textbook_subject": "Math"})
        english_book = english_book.model_copy(update={"textbook_subject": "English"})
        events = engine.aggregate([math_book, english_book], [exam], [mock_exam])

        kept = engine.filter_by_subject(events, "English")
        assert [e.id for e in kept] == ["schedule-2", "exam-5", "exam-6"]

    def test_filter_by_unknown_subject(self, engine, schedule, exam):
        kept = engine.filter_by_subject(engine.aggregate([schedule], [exam]), "Chemistry")
        assert [e.id for e in kept] == ["exam-5"]

    def test_filter_exam_boundaries_inclusive(self, engine):
        exams = [
            Exam(id=1, name="First", date="2025-04-01"),
            Exam(id=2, name="Last", date="2025-04-30"),
            Exam(id=3, name="After", date="2025-05-01"),
        ]
        kept = engine.filter_events_in_range(engine.aggregate([], exams), date(2025, 4, 1), date(2025, 4, 30))
        assert [e.id for e in kept] == ["exam-1", "exam-2"]


class TestTimelineEndpoint:
    """Tests for GET /api/timeline-events"""

    def test_all_events(self, client, mock_database, schedule, exam, mock_exam, broken_exam):
        mock_database.get_schedules.return_value = [schedule.model_dump(mode="json")]
        mock_database.get_exams.side_effect = [
            [exam.model_dump(), broken_exam.model_dump()],
            [mock_exam.model_dump()]
        ]

        with patch("app.routes.timeline.Database", return_value=mock_database):
            response = client.get("/api/timeline-events")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["count"] == 3
        assert [e["id"] for e in data["data"]] == ["schedule-10", "exam-6", "exam-5"]
        assert data["data"][0]["details"]["textbook_title"] == "Focus Gold Math IA"
        mock_database.get_schedules.assert_awaited_once_with(None, None)

    def test_windowed(self, client, mock_database, exam, mock_exam):
        mock_database.get_exams.side_effect = [[exam.model_dump()], [mock_exam.model_dump()]]

        with patch("app.routes.timeline.Database", return_value=mock_database):
            response = client.get("/api/timeline-events?start_date=2025-04-01&end_date=2025-12-31")

        data = response.json()
        assert [e["type"] for e in data["data"]] == ["mock_exam"]
        mock_database.get_schedules.assert_awaited_once_with("2025-04-01", "2025-12-31")

    def test_start_only(self, client, mock_database, exam, mock_exam):
        mock_database.get_exams.side_effect = [[exam.model_dump()], [mock_exam.model_dump()]]

        with patch("app.routes.timeline.Database", return_value=mock_database):
            response = client.get("/api/timeline-events?start_date=2026-01-01")

        assert [e["id"] for e in response.json()["data"]] == ["exam-5"]

    def test_filter_by_subject(self, client, mock_database, schedule, exam):
        english = schedule.model_copy(update={"id": 11, "textbook_subject": "English", "textbook_title": "Duo 3.0"})
        mock_database.get_schedules.return_value = [
            schedule.model_dump(mode="json"),
            english.model_dump(mode="json")
        ]
        mock_database.get_exams.side_effect = [[exam.model_dump()], []]

        with patch("app.routes.timeline.Database", return_value=mock_database):
            response = client.get("/api/timeline-events?subject=English")

        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["data"]] == ["schedule-11", "exam-5"]
        assert data["count"] == 2

    def test_end_before_start(self, client):
        response = client.get("/api/timeline-events?start_date=2025-12-31&end_date=2025-01-01")
        assert response.status_code == 400

    def test_invalid_date(self, client):
        response = client.get("/api/timeline-events?start_date=not-a-date")
        assert response.status_code == 422
