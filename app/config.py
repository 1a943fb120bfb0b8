"""
Study Tracker Server Configuration
Centralized settings management using Pydantic
"""

from datetime import date
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Supabase - storage for textbooks, schedules, logs and exams
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""  # Set via SUPABASE_ANON_KEY env var
    supabase_service_key: str = ""  # Set via SUPABASE_SERVICE_KEY env var

    # Application
    app_env: str = "development"
    debug: bool = True
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Daily window: rolling range around today
    daily_window_days_before: int = 7
    daily_window_days_after: int = 60

    # Yearly window: fixed academic year
    yearly_window_start: date = date(2025, 4, 1)
    yearly_window_end: date = date(2026, 3, 31)

    # Gantt chart geometry
    chart_header_height: float = 65.0
    chart_event_height: float = 30.0
    chart_event_margin: float = 5.0
    chart_default_height: float = 400.0

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
