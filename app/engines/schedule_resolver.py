"""
Schedule Resolver
Derives a schedule's end date from its weekly problem quota.
"""

from datetime import date, timedelta
from typing import Dict, Optional
from loguru import logger
import math

from app.models import ScheduleResolution, StudySchedule, normalize_weekday_goals
from app.engines.date_utils import sunday_index


class UnresolvableScheduleError(ValueError):
    """Raised when no end date can be derived (zero weekly quota or nothing to solve)"""


class ScheduleResolver:
    """
    Turns (start date, weekday quotas, problem count) into an end date.

    Whole calendar weeks are counted: a partially used final week still
    occupies seven days, and which weekdays absorb the remainder is not
    checked against the per-day quotas.
    """

    def resolve(
        self,
        start_date: date,
        weekday_goals: Dict[int, int],
        problem_count: int,
        buffer_days: int = 0
    ) -> ScheduleResolution:
        """
        Resolve the end date for a schedule.

        Args:
            start_date: First day of the schedule
            weekday_goals: Quota per weekday, Sunday=0 ... Saturday=6
            problem_count: Problems to cover (schedule override or textbook total)
            buffer_days: Stored with the schedule and echoed back; it does not move the end date

        Returns:
            ScheduleResolution with the inclusive end date

        Raises:
            UnresolvableScheduleError: if the weekly total or the problem count is not positive
        """
        goals = normalize_weekday_goals(weekday_goals)
        weekly_total = sum(goals.values())

        if weekly_total <= 0:
            logger.warning(f"[RESOLVER] Weekly quota is zero for schedule starting {start_date}")
            raise UnresolvableScheduleError("Weekly problem quota must be greater than zero")

        if problem_count <= 0:
            logger.warning(f"[RESOLVER] No problems to schedule (count={problem_count})")
            raise UnresolvableScheduleError("Problem count must be greater than zero")

        buffer_days = max(0, buffer_days or 0)
        weeks_needed = math.ceil(problem_count / weekly_total)
        days_to_add = weeks_needed * 7 - 1
        end_date = start_date + timedelta(days=days_to_add)

        logger.debug(
            f"[RESOLVER] {problem_count} problems at {weekly_total}/week -> "
            f"{weeks_needed} weeks, {start_date} to {end_date}"
        )

        return ScheduleResolution(
            start_date=start_date,
            end_date=end_date,
            total_days=days_to_add + 1,
            weeks_needed=weeks_needed,
            weekly_total=weekly_total,
            problem_count=problem_count,
            buffer_days=buffer_days,
            weekday_goals=goals
        )


def resolve_problem_count(schedule_total: Optional[int], textbook_total: Optional[int]) -> int:
    """Schedule override wins; otherwise the textbook's total"""
    if schedule_total is not None:
        return schedule_total
    return textbook_total or 0


def weekday_goals_from_presets(weekday: Optional[int], weekend: Optional[int]) -> Dict[int, int]:
    """Monday-Friday get `weekday`, Saturday/Sunday get `weekend`"""
    weekday_value = weekday if weekday is not None and weekday > 0 else 0
    weekend_value = weekend if weekend is not None and weekend > 0 else 0

    goals = {i: weekday_value for i in range(1, 6)}
    goals[0] = weekend_value
    goals[6] = weekend_value
    return dict(sorted(goals.items()))


def goal_for_date(schedule: StudySchedule, day: date) -> int:
    """Quota for a calendar day, falling back to the representative daily goal"""
    quota = schedule.weekday_goals.get(sunday_index(day))
    if quota:
        return quota
    if schedule.weekly_total > 0:
        return 0
    return schedule.daily_goal or 0


def create_schedule_resolver() -> ScheduleResolver:
    """Factory function to create a ScheduleResolver instance"""
    return ScheduleResolver()
