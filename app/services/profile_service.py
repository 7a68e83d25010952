"""
아이 프로필 서비스 (단일 행)
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException, status
from app.models.profile import ChildProfile, PROFILE_ID, GENDERS
from app.models.achievement import utcnow
from app.dto.profile import ProfileUpdateRequest
import logging

logger = logging.getLogger(__name__)


def get_profile(db: Session) -> ChildProfile:
    """프로필 조회 (혹시 여러 행이 있으면 가장 최근 생성된 행)"""
    try:
        profile = db.query(ChildProfile).order_by(ChildProfile.created_at.desc()).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"프로필 조회 중 DB 오류: {e}", exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while fetching profile",
        )

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )

    return profile


def upsert_profile(db: Session, request: ProfileUpdateRequest) -> ChildProfile:
    """프로필 저장 (고정 ID 행을 조회해서 있으면 수정, 없으면 생성)"""
    nickname = (request.nickname or "").strip()
    if not nickname or not request.gender or not request.birthday:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nickname, gender, and birthday are required",
        )
    if request.gender not in GENDERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Gender must be one of: {', '.join(GENDERS)}",
        )

    try:
        profile = db.get(ChildProfile, PROFILE_ID)
        if profile is None:
            profile = ChildProfile(id=PROFILE_ID)
            db.add(profile)

        profile.nickname = nickname
        profile.gender = request.gender
        profile.birthday = request.birthday
        profile.updated_at = utcnow()

        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"프로필 저장 중 DB 오류: {e}", exc_info=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error while updating profile",
        )

    return profile
