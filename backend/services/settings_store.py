from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from db.models import AppSetting
from services.plan_config_service import (
    PLAN_SETTING_KEYS,
    PLAN_WEEKS_KEY,
    START_DATE_KEY,
    PlanConfig,
    parse_plan_weeks,
    resolve_plan_config,
)
from utils.datetime_utils import parse_date


logger = logging.getLogger(__name__)


def get_setting(db: Session, key: str) -> str | None:
    row = db.query(AppSetting).filter(AppSetting.key == key).first()
    return row.value if row else None


def set_setting(db: Session, key: str, value: str | None) -> AppSetting:
    row = db.query(AppSetting).filter(AppSetting.key == key).first()
    if row is None:
        row = AppSetting(key=key, value=value)
        db.add(row)
    else:
        row.value = value
    db.flush()
    return row


def load_overrides(db: Session) -> dict[str, str]:
    rows = db.query(AppSetting).filter(AppSetting.key.in_(PLAN_SETTING_KEYS)).all()
    return {row.key: row.value for row in rows if row.value is not None}


def load_plan_config(db: Session) -> PlanConfig:
    return resolve_plan_config(load_overrides(db))


def save_plan_settings(
    db: Session,
    *,
    start_date: date | str | None = None,
    duration_weeks: int | str | None = None,
) -> PlanConfig:
    """Validate and persist plan overrides; None leaves a value untouched."""
    updates: dict[str, str] = {}
    if start_date is not None:
        updates[START_DATE_KEY] = parse_date(start_date).isoformat()
    if duration_weeks is not None:
        weeks = parse_plan_weeks(duration_weeks)
        updates[PLAN_WEEKS_KEY] = str(weeks)

    for key, value in updates.items():
        set_setting(db, key, value)
    if updates:
        logger.info(f"Plan settings updated: {updates}")
    return load_plan_config(db)


def clear_plan_settings(db: Session) -> int:
    removed = (
        db.query(AppSetting)
        .filter(AppSetting.key.in_(PLAN_SETTING_KEYS))
        .delete(synchronize_session=False)
    )
    db.flush()
    if removed:
        logger.info(f"Plan settings reset to defaults ({removed} override(s) removed)")
    return int(removed or 0)
