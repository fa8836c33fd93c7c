from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db.database import Base  # noqa: E402
from db.models import AppSetting  # noqa: E402
from services.plan_calendar_service import day_number, has_plan_ended  # noqa: E402
from services.settings_store import (  # noqa: E402
    clear_plan_settings,
    get_setting,
    load_overrides,
    load_plan_config,
    save_plan_settings,
    set_setting,
)


def _new_db():
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def test_empty_store_resolves_to_defaults():
    db = _new_db()
    assert load_overrides(db) == {}
    config = load_plan_config(db)
    assert config.start_date == date(2025, 12, 16)
    assert config.duration_weeks == 12


def test_set_setting_upserts_single_row():
    db = _new_db()
    set_setting(db, "plan_duration_weeks", "6")
    set_setting(db, "plan_duration_weeks", "9")
    db.commit()
    assert get_setting(db, "plan_duration_weeks") == "9"
    assert db.query(AppSetting).count() == 1


def test_save_plan_settings_persists_and_reloads():
    db = _new_db()
    config = save_plan_settings(db, start_date="2026-01-05", duration_weeks=4)
    db.commit()
    assert config.start_date == date(2026, 1, 5)
    assert config.duration_weeks == 4
    assert load_overrides(db) == {"study_start_date": "2026-01-05", "plan_duration_weeks": "4"}
    assert day_number(date(2099, 1, 1), load_plan_config(db)) == 28


def test_save_plan_settings_keeps_untouched_values():
    db = _new_db()
    save_plan_settings(db, duration_weeks=8)
    save_plan_settings(db, start_date=date(2026, 2, 2))
    db.commit()
    config = load_plan_config(db)
    assert config.duration_weeks == 8
    assert config.start_date == date(2026, 2, 2)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"duration_weeks": 0},
        {"duration_weeks": "abc"},
        {"duration_weeks": 10_000},
        {"start_date": "2026-13-01"},
    ],
)
def test_save_plan_settings_rejects_invalid_values(kwargs):
    db = _new_db()
    with pytest.raises(ValueError):
        save_plan_settings(db, **kwargs)
    assert load_overrides(db) == {}


def test_malformed_stored_value_falls_back_to_default():
    db = _new_db()
    set_setting(db, "plan_duration_weeks", "twelve")
    db.commit()
    assert load_plan_config(db).duration_weeks == 12


def test_clear_plan_settings_restores_defaults():
    db = _new_db()
    save_plan_settings(db, start_date="2026-01-05", duration_weeks=4)
    set_setting(db, "unrelated", "keep")
    db.commit()
    assert clear_plan_settings(db) == 2
    db.commit()
    assert load_overrides(db) == {}
    assert get_setting(db, "unrelated") == "keep"
    assert load_plan_config(db).duration_weeks == 12


def test_oversized_stored_week_count_falls_back_without_overflow():
    db = _new_db()
    set_setting(db, "plan_duration_weeks", "1000000")
    db.commit()
    config = load_plan_config(db)
    assert config.duration_weeks == 12
    assert has_plan_ended(config, today=date(2026, 1, 1)) is False
    assert config.to_dict()["end_date"] == "2026-03-09"
