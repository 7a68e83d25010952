"""
성장 기록 테이블 (Achievement)
"""
from sqlalchemy import Column, String, Text, Date, DateTime, Integer, JSON, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from datetime import datetime, timezone
import uuid

from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Achievement(Base):
    """성장 기록 테이블 - 날짜, 제목, 당시 월령(년/월/일), 태그, 사진 URL"""
    __tablename__ = "achievements"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    date = Column(Date, nullable=False, comment="이벤트 날짜")
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    age_years = Column(Integer, nullable=True, comment="이벤트 당시 나이 (년)")
    age_months = Column(Integer, nullable=True, comment="이벤트 당시 나이 (개월, 0-11)")
    age_days = Column(Integer, nullable=True, comment="이벤트 당시 나이 (일)")
    tags = Column(JSON().with_variant(JSONB(), "postgresql"), default=list, nullable=True, comment="태그 리스트 (입력 순서 유지)")
    photo_url = Column(Text, nullable=True, comment="S3에 저장된 사진의 공개 URL")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("age_years IS NULL OR age_years >= 0", name="check_age_years"),
        CheckConstraint("age_months IS NULL OR (age_months >= 0 AND age_months <= 11)", name="check_age_months"),
        CheckConstraint("age_days IS NULL OR age_days >= 0", name="check_age_days"),
        Index("idx_achievements_date_created_at", "date", "created_at"),
    )

    def __repr__(self):
        return f"<Achievement(id={self.id}, date={self.date}, title={self.title})>"
