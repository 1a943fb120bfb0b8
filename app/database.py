"""
Study Tracker Database Module
Supabase client initialization and read access for the progress engines
"""

from typing import Optional
from supabase import create_client, Client
from loguru import logger

from app.config import get_settings

_supabase_client: Optional[Client] = None
_supabase_admin_client: Optional[Client] = None


def init_supabase() -> None:
    """Initialize Supabase clients"""
    global _supabase_client, _supabase_admin_client

    settings = get_settings()

    # Regular client with anon key (respects RLS)
    _supabase_client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key
    )

    # Admin client with service role key (bypasses RLS)
    _supabase_admin_client = create_client(
        settings.supabase_url,
        settings.supabase_service_key
    )

    logger.info("Supabase clients initialized successfully")


def get_supabase() -> Client:
    """Get the regular Supabase client (with RLS)"""
    if _supabase_client is None:
        init_supabase()
    return _supabase_client


def get_supabase_admin() -> Client:
    """Get the admin Supabase client (bypasses RLS)"""
    if _supabase_admin_client is None:
        init_supabase()
    return _supabase_admin_client


def _flatten_join(row: dict, relation: str, fields: dict) -> dict:
    """Lift fields of an embedded relation onto the row (e.g. textbooks.title -> textbook_title)"""
    joined = row.pop(relation, None) or {}
    for source, target in fields.items():
        row[target] = joined.get(source)
    return row


def _flatten_schedule_or_log(row: dict) -> dict:
    return _flatten_join(row, "textbooks", {"title": "textbook_title", "subject": "textbook_subject"})


def _flatten_exam(row: dict) -> dict:
    return _flatten_join(row, "universities", {"name": "university_name"})


class Database:
    """Read operations wrapper for Supabase"""

    def __init__(self, use_admin: bool = False):
        self.client = get_supabase_admin() if use_admin else get_supabase()
        self.use_admin = use_admin
        logger.debug(f"[DB] Database instance created (admin: {use_admin})")

    # ==========================================
    # Textbooks
    # ==========================================

    async def get_textbook(self, textbook_id: int) -> Optional[dict]:
        """Get a textbook by ID"""
        logger.debug(f"[DB] get_textbook: {textbook_id}")
        try:
            result = self.client.table("textbooks").select("*").eq("id", textbook_id).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"[DB] Error getting textbook {textbook_id}: {e}")
            return None

    # ==========================================
    # Study Schedules
    # ==========================================

    async def get_schedules(self, start_date: str = None, end_date: str = None) -> list:
        """Get schedules overlapping an optional date range, with textbook title/subject"""
        logger.debug(f"[DB] get_schedules: {start_date or 'all'} to {end_date or 'all'}")
        try:
            query = self.client.table("study_schedules").select("*, textbooks(title, subject)")
            if start_date:
                query = query.gte("end_date", start_date)
            if end_date:
                query = query.lte("start_date", end_date)
            result = query.order("start_date").execute()
            logger.debug(f"[DB] Found {len(result.data or [])} schedules")
            return [_flatten_schedule_or_log(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"[DB] Error getting schedules: {e}")
            return []

    async def get_schedule_for_textbook(self, textbook_id: int) -> Optional[dict]:
        """Get the schedule linked to a textbook"""
        logger.debug(f"[DB] get_schedule_for_textbook: {textbook_id}")
        try:
            result = (
                self.client.table("study_schedules")
                .select("*, textbooks(title, subject)")
                .eq("textbook_id", textbook_id)
                .execute()
            )
            return _flatten_schedule_or_log(result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"[DB] Error getting schedule for textbook {textbook_id}: {e}")
            return None

    # ==========================================
    # Study Logs
    # ==========================================

    async def get_study_logs(
        self,
        start_date: str = None,
        end_date: str = None,
        textbook_id: int = None
    ) -> list:
        """Get study logs, optionally filtered by date range and textbook"""
        logger.debug(f"[DB] get_study_logs: textbook_id={textbook_id}, {start_date or 'all'} to {end_date or 'all'}")
        try:
            query = self.client.table("study_logs").select("*, textbooks(title, subject)")
            if start_date:
                query = query.gte("date", start_date)
            if end_date:
                query = query.lte("date", end_date)
            if textbook_id is not None:
                query = query.eq("textbook_id", textbook_id)
            result = query.order("date").execute()
            logger.debug(f"[DB] Found {len(result.data or [])} study logs")
            return [_flatten_schedule_or_log(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"[DB] Error getting study logs: {e}")
            return []

    # ==========================================
    # Exams
    # ==========================================

    async def get_exams(self, is_mock: bool = None) -> list:
        """Get exams with university name; filter by mock flag when given"""
        logger.debug(f"[DB] get_exams: is_mock={is_mock}")
        try:
            query = self.client.table("exams").select("*, universities(name)")
            if is_mock is not None:
                query = query.eq("is_mock", is_mock)
            result = query.order("date").execute()
            logger.debug(f"[DB] Found {len(result.data or [])} exams")
            return [_flatten_exam(row) for row in result.data or []]
        except Exception as e:
            logger.error(f"[DB] Error getting exams: {e}")
            return []


def rows_to_models(model, rows: list) -> list:
    """
    Validate storage rows into models.
    Rows that fail validation (e.g. a schedule whose textbook was deleted) are skipped.
    """
    models = []
    for row in rows:
        try:
            models.append(model(**row))
        except ValueError as e:
            logger.warning(f"[DB] Skipping invalid {model.__name__} row {row.get('id')}: {e}")
    return models
