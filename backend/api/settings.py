import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from config import settings as app_settings
from db.database import get_db
from services.plan_config_service import PLAN_WEEKS_KEY, START_DATE_KEY
from services.settings_store import (
    clear_plan_settings,
    load_overrides,
    load_plan_config,
    save_plan_settings,
)

router = APIRouter(prefix="/settings", tags=["settings"])
logger = logging.getLogger(__name__)


class PlanSettingsUpdate(BaseModel):
    start_date: Optional[str] = None  # YYYY-MM-DD
    duration_weeks: Optional[int] = None


def _plan_settings_payload(db: Session) -> dict:
    config = load_plan_config(db)
    overrides = load_overrides(db)
    return {
        **config.to_dict(),
        "overrides": {
            "start_date": overrides.get(START_DATE_KEY),
            "duration_weeks": overrides.get(PLAN_WEEKS_KEY),
        },
        "defaults": {
            "start_date": app_settings.DEFAULT_STUDY_START_DATE,
            "duration_weeks": app_settings.DEFAULT_PLAN_WEEKS,
        },
        "locale": app_settings.PLAN_LOCALE,
    }


@router.get("/plan")
def get_plan_settings(db: Session = Depends(get_db)):
    return _plan_settings_payload(db)


@router.put("/plan")
def update_plan_settings(payload: PlanSettingsUpdate, db: Session = Depends(get_db)):
    try:
        save_plan_settings(
            db,
            start_date=payload.start_date,
            duration_weeks=payload.duration_weeks,
        )
    except ValueError as exc:
        db.rollback()
        logger.warning(f"Rejected plan settings update: {exc}")
        raise HTTPException(status_code=400, detail=str(exc))
    db.commit()
    return {"status": "ok", **_plan_settings_payload(db)}


@router.delete("/plan")
def reset_plan_settings(db: Session = Depends(get_db)):
    removed = clear_plan_settings(db)
    db.commit()
    return {"status": "ok", "removed": removed, **_plan_settings_payload(db)}
