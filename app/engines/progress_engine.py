"""
Progress Calculator
Ideal-vs-actual progress, deviation and the forecast daily quota for one textbook.
"""

from datetime import date
from typing import List, Optional, Union
from loguru import logger
import math

from app.models import (
    Textbook, StudySchedule, StudyLog, Progress, NoScheduleProgress,
    ProgressSummary, ProgressStatus, DailyPoint, CumulativePoint
)
from app.engines.date_utils import (
    total_days as schedule_total_days, elapsed_days as schedule_elapsed_days,
    round_half_up
)
from app.engines.schedule_resolver import goal_for_date


class ProgressEngine:
    """
    Computes progress from a schedule and its log history.
    `today` is always passed in; the engine never reads the clock.
    """

    def compute(
        self,
        textbook: Textbook,
        schedule: Optional[StudySchedule],
        logs: List[StudyLog],
        today: date
    ) -> Union[Progress, NoScheduleProgress]:
        """
        Compute the progress record for a textbook.

        Args:
            textbook: The textbook; its total_problems is the denominator
            schedule: The textbook's schedule, if any
            logs: Every log for the textbook (not limited to the schedule window)
            today: Reference date

        Returns:
            Progress, or NoScheduleProgress when there is no schedule
        """
        if schedule is None:
            logger.debug(f"[PROGRESS] Textbook {textbook.id} has no schedule")
            return NoScheduleProgress(textbook=textbook)

        total_problems = textbook.total_problems or 0
        total_days = schedule_total_days(schedule.start_date, schedule.end_date)
        elapsed_days = schedule_elapsed_days(schedule.start_date, schedule.end_date, today)
        remaining_days = max(0, total_days - elapsed_days)

        daily_ideal_rate = self.daily_ideal_rate(total_problems, total_days)
        ideal_solved = min(round_half_up(daily_ideal_rate * elapsed_days), total_problems)

        actual_solved = sum(log.actual_amount or 0 for log in logs)
        deviation = actual_solved - ideal_solved
        status = ProgressStatus.ON_TRACK if deviation >= 0 else ProgressStatus.BEHIND

        remaining_problems = max(0, total_problems - actual_solved)
        daily_target = self.daily_target(remaining_problems, remaining_days)

        sorted_logs = sorted(logs, key=lambda log: log.date)
        daily_data = self.build_daily_series(sorted_logs, schedule)
        cumulative_data = self.build_cumulative_series(daily_data, daily_ideal_rate)

        logger.info(
            f"[PROGRESS] Textbook {textbook.id}: {actual_solved}/{total_problems} solved, "
            f"ideal {ideal_solved}, day {elapsed_days}/{total_days}, status={status.value}"
        )

        return Progress(
            textbook=textbook,
            schedule=schedule,
            progress=ProgressSummary(
                total_problems=total_problems,
                solved_problems=actual_solved,
                remaining_problems=remaining_problems,
                progress_percentage=self.progress_percentage(actual_solved, total_problems),
                days_remaining=remaining_days,
                daily_target=daily_target
            ),
            total_days=total_days,
            elapsed_days=elapsed_days,
            remaining_days=remaining_days,
            ideal_solved=ideal_solved,
            actual_solved=actual_solved,
            deviation=deviation,
            status=status,
            time_progress_percentage=min(100, round_half_up(elapsed_days / total_days * 100)),
            daily_data=daily_data,
            cumulative_data=cumulative_data,
            logs=sorted_logs
        )

    def daily_ideal_rate(self, total_problems: int, total_days: int) -> float:
        if total_days <= 0 or total_problems <= 0:
            return 0.0
        return total_problems / total_days

    def daily_target(self, remaining_problems: int, remaining_days: int) -> int:
        """
        Problems per remaining day needed to finish.
        With no days left the target is everything still outstanding.
        """
        outstanding = max(0, remaining_problems)
        if remaining_days > 0:
            return math.ceil(outstanding / remaining_days)
        return outstanding

    def progress_percentage(self, solved: int, total_problems: int) -> int:
        if total_problems <= 0:
            return 0
        return round_half_up(solved / total_problems * 100)

    def build_daily_series(self, sorted_logs: List[StudyLog], schedule: StudySchedule) -> List[DailyPoint]:
        """Actual per logged date against that weekday's quota"""
        return [
            DailyPoint(date=log.date, actual=log.actual_amount or 0, planned=goal_for_date(schedule, log.date))
            for log in sorted_logs
        ]

    def build_cumulative_series(self, daily_data: List[DailyPoint], daily_ideal_rate: float) -> List[CumulativePoint]:
        """Running totals of actual and ideal per logged date"""
        ideal_step = round_half_up(daily_ideal_rate)
        points = []
        cumulative_actual = 0
        cumulative_ideal = 0
        for day in daily_data:
            cumulative_actual += day.actual
            cumulative_ideal += ideal_step
            points.append(CumulativePoint(
                date=day.date,
                actual=cumulative_actual,
                ideal=cumulative_ideal
            ))
        return points


def create_progress_engine() -> ProgressEngine:
    """Factory function to create a ProgressEngine instance"""
    return ProgressEngine()
