from datetime import datetime
from sqlalchemy import Column, Integer, Text, DateTime
from db.database import Base


class AppSetting(Base):
    """Persisted key/value override, e.g. study_start_date or plan_duration_weeks."""

    __tablename__ = "app_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(Text, unique=True, nullable=False)
    value = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
