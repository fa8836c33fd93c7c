from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config import settings
from db.database import get_db
from services.date_label_service import DateLabelFormatter, default_formatter
from services.plan_calendar_service import (
    PlanCalendarError,
    date_for_day_number,
    day_number,
    days_until_start,
    has_plan_ended,
    has_plan_started,
    month_grid,
    plan_weeks_overview,
    study_progress,
    week_date_range,
    week_number,
    week_theme,
)
from services.settings_store import load_plan_config
from utils.datetime_utils import parse_date, today_for_tz


router = APIRouter(prefix="/plan", tags=["plan"])


def get_formatter() -> DateLabelFormatter:
    return default_formatter()


@router.get("/config")
def plan_config(db: Session = Depends(get_db)):
    config = load_plan_config(db)
    today = today_for_tz(settings.PLAN_TIMEZONE)
    return {
        **config.to_dict(),
        "has_started": has_plan_started(config, today),
        "has_ended": has_plan_ended(config, today),
        "days_until_start": days_until_start(config, today),
    }


@router.get("/progress")
def plan_progress(db: Session = Depends(get_db)):
    config = load_plan_config(db)
    return study_progress(config).to_dict()


@router.get("/calendar")
def plan_calendar(
    year: Optional[int] = None,
    month: Optional[int] = None,
    db: Session = Depends(get_db),
    formatter: DateLabelFormatter = Depends(get_formatter),
):
    config = load_plan_config(db)
    today = today_for_tz(settings.PLAN_TIMEZONE)
    target_year = year if year is not None else today.year
    target_month = month if month is not None else today.month
    try:
        cells = month_grid(target_year, target_month, config, today)
    except PlanCalendarError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {
        "year": target_year,
        "month": target_month,
        "title": formatter.month_title(target_year, target_month),
        "weekday_headers": formatter.weekday_headers(),
        "cells": [cell.to_dict() for cell in cells],
    }


@router.get("/days/number/{n}")
def plan_day_date(
    n: int,
    db: Session = Depends(get_db),
    formatter: DateLabelFormatter = Depends(get_formatter),
):
    config = load_plan_config(db)
    if n < 1 or n > config.total_days:
        raise HTTPException(status_code=400, detail=f"Day {n} is outside the plan (1-{config.total_days})")
    d = date_for_day_number(n, config)
    return {
        "day_number": n,
        "week_number": week_number(d, config),
        "date": d.isoformat(),
        "label": formatter.friendly_label(d),
    }


@router.get("/days/{value}")
def plan_day(
    value: str,
    db: Session = Depends(get_db),
    formatter: DateLabelFormatter = Depends(get_formatter),
):
    try:
        d = parse_date(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    config = load_plan_config(db)
    return {
        "date": d.isoformat(),
        "day_number": day_number(d, config),
        "week_number": week_number(d, config),
        "label": formatter.friendly_label(d),
    }


@router.get("/weeks")
def plan_weeks(db: Session = Depends(get_db)):
    config = load_plan_config(db)
    return {"duration_weeks": config.duration_weeks, "weeks": plan_weeks_overview(config)}


@router.get("/weeks/{week}")
def plan_week(
    week: int,
    db: Session = Depends(get_db),
    formatter: DateLabelFormatter = Depends(get_formatter),
):
    config = load_plan_config(db)
    try:
        span = week_date_range(week, config)
    except PlanCalendarError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return {
        **span.to_dict(),
        **week_theme(week),
        "theme": formatter.week_theme(week),
    }
