from datetime import date
from pathlib import Path

from pydantic_settings import BaseSettings


SUPPORTED_LOCALES = ("zh-CN", "en-US")


class Settings(BaseSettings):
    APP_NAME: str = "Study Plan Tracker"
    DATABASE_URL: str = "sqlite:///data/study_plan.db"
    DATA_DIR: Path = Path("data")
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    DEFAULT_STUDY_START_DATE: str = "2025-12-16"
    DEFAULT_PLAN_WEEKS: int = 12
    MAX_PLAN_WEEKS: int = 104
    PLAN_LOCALE: str = "zh-CN"  # zh-CN | en-US
    PLAN_TIMEZONE: str | None = None  # IANA name; unset uses the host zone
    SECURITY_HEADERS_ENABLED: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def validate_plan_configuration(self) -> None:
        errors: list[str] = []
        try:
            date.fromisoformat((self.DEFAULT_STUDY_START_DATE or "").strip())
        except ValueError:
            errors.append("DEFAULT_STUDY_START_DATE must be a YYYY-MM-DD date")
        if self.DEFAULT_PLAN_WEEKS < 1:
            errors.append("DEFAULT_PLAN_WEEKS must be at least 1")
        if self.MAX_PLAN_WEEKS < self.DEFAULT_PLAN_WEEKS:
            errors.append("MAX_PLAN_WEEKS must not be below DEFAULT_PLAN_WEEKS")
        if self.PLAN_LOCALE not in SUPPORTED_LOCALES:
            errors.append(f"PLAN_LOCALE must be one of {', '.join(SUPPORTED_LOCALES)}")
        if errors:
            joined = "; ".join(errors)
            raise RuntimeError(f"Invalid plan configuration: {joined}")


settings = Settings()
settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
