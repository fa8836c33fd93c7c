from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from config import settings
from services.plan_config_service import PlanConfig
from utils.datetime_utils import days_between, days_in_month, parse_date, today_for_tz


GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_CELLS = GRID_ROWS * GRID_COLUMNS
DEFAULT_WEEK_CATEGORY = "general"


class PlanCalendarError(ValueError):
    """Raised when a calendar query falls outside what the plan can answer."""


@dataclass(frozen=True)
class WeekRange:
    week_number: int
    start: date
    end: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_number": self.week_number,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


@dataclass(frozen=True)
class StudyProgressSnapshot:
    has_started: bool
    week: int
    day_in_week: int
    total_days_elapsed: int
    percentage: int
    days_until_start: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_started": self.has_started,
            "week": self.week,
            "day_in_week": self.day_in_week,
            "total_days_elapsed": self.total_days_elapsed,
            "percentage": self.percentage,
            "days_until_start": self.days_until_start,
        }


@dataclass(frozen=True)
class CalendarCell:
    date: date
    day_of_month: int
    is_current_month: bool
    is_today: bool
    plan_day_number: int
    plan_week_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "day_of_month": self.day_of_month,
            "is_current_month": self.is_current_month,
            "is_today": self.is_today,
            "plan_day_number": self.plan_day_number,
            "plan_week_number": self.plan_week_number,
        }


def _today(today: date | None) -> date:
    if today is not None:
        return parse_date(today)
    return today_for_tz(settings.PLAN_TIMEZONE)


# ---------------------------------------------------------------------------
# Day / week mapping
# ---------------------------------------------------------------------------

def day_number(value: date | str, config: PlanConfig) -> int:
    """1-based plan day for a calendar date; 0 before the start, clamped at the horizon."""
    diff = days_between(config.start_date, parse_date(value)) + 1
    if diff < 1:
        return 0
    return min(diff, config.total_days)


def week_number(value: date | str, config: PlanConfig) -> int:
    d = day_number(value, config)
    if d == 0:
        return 0
    return (d + 6) // 7


def date_for_day_number(n: int, config: PlanConfig) -> date:
    """Calendar date of plan day n. Not clamped."""
    return config.start_date + timedelta(days=int(n) - 1)


def week_date_range(week: int, config: PlanConfig) -> WeekRange:
    if week < 1 or week > config.duration_weeks:
        raise PlanCalendarError(f"Week {week} is outside the plan (1-{config.duration_weeks})")
    start_day = (week - 1) * 7 + 1
    end_day = min(week * 7, config.total_days)
    return WeekRange(
        week_number=week,
        start=date_for_day_number(start_day, config),
        end=date_for_day_number(end_day, config),
    )


def plan_end_date(config: PlanConfig) -> date:
    return date_for_day_number(config.total_days, config)


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

def has_plan_started(config: PlanConfig, today: date | None = None) -> bool:
    return _today(today) >= config.start_date


def has_plan_ended(config: PlanConfig, today: date | None = None) -> bool:
    return _today(today) > plan_end_date(config)


def days_until_start(config: PlanConfig, today: date | None = None) -> int:
    current = _today(today)
    if current >= config.start_date:
        return 0
    return days_between(current, config.start_date)


def days_remaining(target: date | str, today: date | None = None) -> int:
    """Signed whole days from today to target; negative once target has passed."""
    return days_between(_today(today), parse_date(target))


def study_progress(config: PlanConfig, today: date | None = None) -> StudyProgressSnapshot:
    current = _today(today)
    if not has_plan_started(config, current):
        return StudyProgressSnapshot(
            has_started=False,
            week=0,
            day_in_week=0,
            total_days_elapsed=0,
            percentage=0,
            days_until_start=days_until_start(config, current),
        )

    elapsed = day_number(current, config)
    # Round half up.
    percentage = int((elapsed * 100 * 2 + config.total_days) // (config.total_days * 2))
    return StudyProgressSnapshot(
        has_started=True,
        week=week_number(current, config),
        day_in_week=((elapsed - 1) % 7) + 1,
        total_days_elapsed=elapsed,
        percentage=min(percentage, 100),
        days_until_start=0,
    )


def plan_weeks_overview(config: PlanConfig, today: date | None = None) -> list[dict[str, Any]]:
    current = _today(today)
    current_week = week_number(current, config) if not has_plan_ended(config, current) else 0
    rows: list[dict[str, Any]] = []
    for week in range(1, config.duration_weeks + 1):
        span = week_date_range(week, config)
        rows.append(
            {
                **span.to_dict(),
                "is_current": week == current_week,
                "is_past": current > span.end,
            }
        )
    return rows


def week_theme(week: int) -> dict[str, Any]:
    """Placeholder theme; the label itself is localized by the date formatter."""
    return {"week_number": week, "category": DEFAULT_WEEK_CATEGORY}


# ---------------------------------------------------------------------------
# Month grid
# ---------------------------------------------------------------------------

def _cell(d: date, *, in_month: bool, today: date, config: PlanConfig) -> CalendarCell:
    return CalendarCell(
        date=d,
        day_of_month=d.day,
        is_current_month=in_month,
        is_today=d == today,
        plan_day_number=day_number(d, config),
        plan_week_number=week_number(d, config),
    )


def month_grid(year: int, month: int, config: PlanConfig, today: date | None = None) -> list[CalendarCell]:
    """Six Monday-first rows of seven cells covering the given month."""
    if not 1 <= int(month) <= 12:
        raise PlanCalendarError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= int(year) <= 9999:
        raise PlanCalendarError(f"Year must be between 1 and 9999, got {year}")
    # Trailing spill-over past 9999-12-31 is not representable.
    if int(year) == 9999 and int(month) == 12:
        raise PlanCalendarError("December 9999 cannot be shown as a full grid")

    current = _today(today)
    first = date(year, month, 1)
    leading = first.isoweekday() - 1
    month_len = days_in_month(year, month)

    cells: list[CalendarCell] = []
    for offset in range(leading, 0, -1):
        cells.append(_cell(first - timedelta(days=offset), in_month=False, today=current, config=config))
    for day in range(1, month_len + 1):
        cells.append(_cell(date(year, month, day), in_month=True, today=current, config=config))
    last = date(year, month, month_len)
    for offset in range(1, GRID_CELLS - len(cells) + 1):
        cells.append(_cell(last + timedelta(days=offset), in_month=False, today=current, config=config))
    return cells
