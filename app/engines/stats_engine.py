"""
Study Tracker Stats Engine
Computes the yearly activity calendar from study logs.
Provides: per-day totals, heat-map levels, week grid, monthly totals, summary stats.
"""

from datetime import date
from typing import List, Dict, Optional
from collections import defaultdict
from loguru import logger
import math

from app.models import StudyLog, ActivityDay, ActivityCalendar, ActivityStats, MonthlyActivity
from app.engines.date_utils import parse_date, iter_days, days_in_year, sunday_index

# Positive amounts map to 1..5; 0 is reserved for no activity
INTENSITY_STEPS = 4


class StatsEngine:
    """
    The Stats Engine provides derived views of study logs.
    Logs are data; the activity calendar is a view.
    """

    def compute_daily_totals(self, logs: List[StudyLog], year: int) -> Dict[date, int]:
        """Sum actual_amount per date for logs dated in `year`"""
        totals: Dict[date, int] = defaultdict(int)
        for log in logs:
            log_date = parse_date(log.date)
            if log_date is None or log_date.year != year:
                continue
            totals[log_date] += log.actual_amount or 0
        return dict(totals)

    def compute_yearly_activity(self, logs: List[StudyLog], year: int) -> ActivityCalendar:
        """
        Build one bucket per calendar day of the year plus summary statistics.

        Args:
            logs: Study logs, optionally pre-filtered by textbook or subject
            year: The year to bucket (365 or 366 days)

        Returns:
            ActivityCalendar
        """
        totals = self.compute_daily_totals(logs, year)
        max_amount = max(totals.values(), default=0)

        days = [
            ActivityDay(
                date=day,
                amount=totals.get(day, 0),
                level=self.intensity_level(totals.get(day, 0), max_amount),
                weekday=sunday_index(day)
            )
            for day in iter_days(date(year, 1, 1), date(year, 12, 31))
        ]

        total = sum(d.amount for d in days)
        active_days = sum(1 for d in days if d.amount > 0)
        day_count = days_in_year(year)

        stats = ActivityStats(
            total=total,
            active_days=active_days,
            max_amount=max_amount,
            mean_per_day=round(total / day_count, 2) if day_count else 0.0
        )

        logger.info(f"[ACTIVITY] {year}: {total} problems over {active_days} active days (max {max_amount})")

        return ActivityCalendar(
            year=year,
            days=days,
            weeks=self.group_into_weeks(days),
            months=self.compute_monthly_totals(days),
            stats=stats
        )

    def intensity_level(self, amount: int, max_amount: int) -> int:
        """Heat-map level: 0 for no activity, 1-5 scaled against the busiest day"""
        if amount <= 0 or max_amount <= 0:
            return 0
        return min(math.floor(amount / max_amount * INTENSITY_STEPS), INTENSITY_STEPS) + 1

    def group_into_weeks(self, days: List[ActivityDay]) -> List[List[Optional[ActivityDay]]]:
        """Sunday-first weeks, padded with None before Jan 1 and after Dec 31"""
        weeks: List[List[Optional[ActivityDay]]] = []
        if not days:
            return weeks

        week: List[Optional[ActivityDay]] = [None] * days[0].weekday

        for index, day in enumerate(days):
            week.append(day)
            if day.weekday == 6 or index == len(days) - 1:
                while len(week) < 7:
                    week.append(None)
                weeks.append(week)
                week = []

        return weeks

    def compute_monthly_totals(self, days: List[ActivityDay]) -> List[MonthlyActivity]:
        monthly = defaultdict(lambda: {"total": 0, "active_days": 0})

        for day in days:
            month_key = day.date.strftime("%Y-%m")
            monthly[month_key]["total"] += day.amount
            if day.amount > 0:
                monthly[month_key]["active_days"] += 1

        return [
            MonthlyActivity(month=month, **stats)
            for month, stats in sorted(monthly.items())
        ]


def create_stats_engine() -> StatsEngine:
    """Factory function to create a StatsEngine instance"""
    return StatsEngine()
