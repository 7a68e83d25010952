"""
아이 프로필 테이블 (ChildProfile)
"""
from sqlalchemy import Column, String, Date, DateTime, CheckConstraint
from sqlalchemy.sql import func

from app.core.database import Base
from app.models.achievement import utcnow

# 단일 행 테이블의 고정 식별자
PROFILE_ID = "child-profile"

GENDERS = ("male", "female", "other")


class ChildProfile(Base):
    """아이 프로필 테이블 - 모든 월령 계산의 기준이 되는 생일을 보관 (단일 행)"""
    __tablename__ = "child_profiles"

    id = Column(String(36), primary_key=True, default=PROFILE_ID)
    nickname = Column(String(50), nullable=False)
    gender = Column(String(10), nullable=False, comment="성별: male, female, other")
    birthday = Column(Date, nullable=False, comment="생일 (월령 계산 기준)")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("gender IN ('male', 'female', 'other')", name="check_gender"),
    )

    def __repr__(self):
        return f"<ChildProfile(id={self.id}, nickname={self.nickname}, birthday={self.birthday})>"
