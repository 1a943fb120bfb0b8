"""
Study Tracker Test Configuration
Shared fixtures and mocks for all tests
"""

import pytest
from unittest.mock import MagicMock, AsyncMock, patch
from datetime import date
from fastapi.testclient import TestClient

from app.config import Settings
from app.models import Textbook, StudySchedule, StudyLog, Exam


# Mock settings before importing app
@pytest.fixture(scope="session", autouse=True)
def mock_settings():
    """Mock settings for all tests"""
    with patch("app.config.get_settings") as mock:
        mock.return_value = Settings(
            app_env="test",
            debug=True,
            supabase_url="https://test.supabase.co",
            supabase_anon_key="test-anon-key",
            supabase_service_key="test-service-key",
            cors_origins="http://localhost:3000",
            yearly_window_start=date(2025, 4, 1),
            yearly_window_end=date(2026, 3, 31)
        )
        yield mock


# ==========================================
# Mock Data Fixtures
# ==========================================

@pytest.fixture
def textbook():
    """Textbook with 100 problems"""
    return Textbook(id=1, title="Focus Gold Math IA", subject="Math", total_problems=100)


@pytest.fixture
def schedule():
    """Ten-day schedule, 2025-04-01 to 2025-04-10"""
    return StudySchedule(
        id=10,
        textbook_id=1,
        start_date=date(2025, 4, 1),
        end_date=date(2025, 4, 10),
        daily_goal=10,
        weekday_goals={i: 10 for i in range(7)},
        textbook_title="Focus Gold Math IA",
        textbook_subject="Math"
    )


@pytest.fixture
def logs():
    """Two logs totalling 50 problems, deliberately out of order"""
    return [
        StudyLog(id=2, date=date(2025, 4, 3), textbook_id=1, actual_amount=30),
        StudyLog(id=1, date=date(2025, 4, 1), textbook_id=1, actual_amount=20),
    ]


@pytest.fixture
def exam():
    """Real exam with a university"""
    return Exam(
        id=5,
        name="Second-stage Exam",
        date="2026-02-25",
        is_mock=False,
        exam_type="secondary",
        university_id=3,
        university_name="Kyoto University"
    )


@pytest.fixture
def mock_exam():
    """Mock exam"""
    return Exam(id=6, name="Summer Mock", date="2025-08-10", is_mock=True, exam_type="mock")


@pytest.fixture
def broken_exam():
    """Exam whose date cannot be parsed"""
    return Exam(id=7, name="Unknown Date Exam", date="not-a-date", is_mock=False, exam_type="common")


# ==========================================
# Database Mock Fixture
# ==========================================

@pytest.fixture
def mock_database():
    """Mock database with all read methods"""
    db = MagicMock()

    db.get_textbook = AsyncMock(return_value=None)
    db.get_schedules = AsyncMock(return_value=[])
    db.get_schedule_for_textbook = AsyncMock(return_value=None)
    db.get_study_logs = AsyncMock(return_value=[])
    db.get_exams = AsyncMock(return_value=[])

    return db


# ==========================================
# App Test Client Fixtures
# ==========================================

@pytest.fixture
def app():
    """Get the FastAPI app"""
    from app.main import create_app
    return create_app()


@pytest.fixture
def client(app):
    """Sync test client"""
    return TestClient(app)
