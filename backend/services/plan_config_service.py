from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping

from config import settings
from utils.datetime_utils import parse_date


logger = logging.getLogger(__name__)

START_DATE_KEY = "study_start_date"
PLAN_WEEKS_KEY = "plan_duration_weeks"
PLAN_SETTING_KEYS = (START_DATE_KEY, PLAN_WEEKS_KEY)


@dataclass(frozen=True)
class PlanConfig:
    start_date: date
    duration_weeks: int

    def __post_init__(self) -> None:
        if int(self.duration_weeks) < 1:
            raise ValueError("duration_weeks must be at least 1")

    @property
    def total_days(self) -> int:
        return self.duration_weeks * 7

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.total_days - 1)

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "duration_weeks": self.duration_weeks,
            "total_days": self.total_days,
        }


def _override(overrides: Mapping[str, str | None] | None, key: str) -> str | None:
    if not overrides:
        return None
    raw = overrides.get(key)
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def parse_plan_weeks(raw: str | int) -> int:
    """Strictly parse a week count in 1..MAX_PLAN_WEEKS; raises ValueError otherwise."""
    if isinstance(raw, bool):
        raise ValueError("Plan weeks must be an integer")
    if isinstance(raw, int):
        weeks = raw
    else:
        text = str(raw).strip()
        if not text.isdecimal():
            raise ValueError(f"Plan weeks must be a positive integer, got {raw!r}")
        weeks = int(text)
    if weeks < 1:
        raise ValueError("Plan weeks must be at least 1")
    if weeks > settings.MAX_PLAN_WEEKS:
        raise ValueError(f"Plan weeks must be at most {settings.MAX_PLAN_WEEKS}")
    return weeks


def resolve_start_date(
    overrides: Mapping[str, str | None] | None = None,
    default: str | None = None,
) -> date:
    raw = _override(overrides, START_DATE_KEY)
    if raw is not None:
        try:
            return parse_date(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed {START_DATE_KEY} override {raw!r}, using default")
    return parse_date(default or settings.DEFAULT_STUDY_START_DATE)


def resolve_plan_weeks(
    overrides: Mapping[str, str | None] | None = None,
    default: int | None = None,
) -> int:
    raw = _override(overrides, PLAN_WEEKS_KEY)
    if raw is not None:
        try:
            return parse_plan_weeks(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed {PLAN_WEEKS_KEY} override {raw!r}, using default")
    return int(default if default is not None else settings.DEFAULT_PLAN_WEEKS)


def resolve_plan_config(overrides: Mapping[str, str | None] | None = None) -> PlanConfig:
    """Read both plan scalars once so a caller works against a single snapshot."""
    config = PlanConfig(
        start_date=resolve_start_date(overrides),
        duration_weeks=resolve_plan_weeks(overrides),
    )
    try:
        config.end_date
    except OverflowError:
        logger.warning(
            f"Plan starting {config.start_date.isoformat()} runs past the last representable date, using default start"
        )
        config = PlanConfig(start_date=resolve_start_date(None), duration_weeks=config.duration_weeks)
    return config
