"""
성장 기록 서비스 (생성, 조회, 수정, 삭제, 사진 연결)
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import HTTPException, status
from app.models.achievement import Achievement, utcnow
from app.dto.achievement import AchievementRequest
from app.services.s3_service import PhotoStorage
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


def _server_error(db: Session, operation: str, error: Exception) -> HTTPException:
    """DB 오류 로깅 후 상세 내용을 숨긴 500 에러 생성"""
    db.rollback()
    logger.error(f"{operation} 중 DB 오류: {error}", exc_info=error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal server error while {operation}",
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Achievement not found",
    )


def _validate_request(request: AchievementRequest) -> None:
    """필수 필드 검증 (date, title, ageAtEvent)"""
    if not request.date or not (request.title or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Date and title are required",
        )
    if request.age_at_event is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Age at event is required",
        )


def _apply_request(achievement: Achievement, request: AchievementRequest) -> None:
    """요청 값으로 변경 가능한 필드 전체를 교체"""
    achievement.date = request.date
    achievement.title = request.title.strip()
    achievement.description = request.description or None
    achievement.age_years = request.age_at_event.years
    achievement.age_months = request.age_at_event.months
    achievement.age_days = request.age_at_event.days
    achievement.tags = list(request.tags)
    achievement.photo_url = request.photo_url or None


def list_achievements(db: Session) -> List[Achievement]:
    """전체 성장 기록 조회 (날짜 내림차순, 같은 날짜는 생성일 내림차순)"""
    try:
        return db.query(Achievement).order_by(
            Achievement.date.desc(),
            Achievement.created_at.desc(),
        ).all()
    except SQLAlchemyError as e:
        raise _server_error(db, "fetching achievements", e)


def get_achievement(db: Session, achievement_id: str) -> Achievement:
    """성장 기록 단건 조회"""
    try:
        achievement = db.get(Achievement, achievement_id)
    except SQLAlchemyError as e:
        raise _server_error(db, "fetching achievement", e)

    if not achievement:
        raise _not_found()

    return achievement


def create_achievement(db: Session, request: AchievementRequest) -> Achievement:
    """성장 기록 생성"""
    _validate_request(request)

    new_achievement = Achievement()
    _apply_request(new_achievement, request)

    try:
        db.add(new_achievement)
        db.commit()
        db.refresh(new_achievement)
    except SQLAlchemyError as e:
        raise _server_error(db, "creating achievement", e)

    logger.info(f"성장 기록 생성: id={new_achievement.id}, date={new_achievement.date}")
    return new_achievement


def update_achievement(db: Session, achievement_id: str, request: AchievementRequest) -> Achievement:
    """성장 기록 수정 (전체 필드 교체)"""
    _validate_request(request)
    achievement = get_achievement(db, achievement_id)

    _apply_request(achievement, request)
    achievement.updated_at = utcnow()

    try:
        db.commit()
        db.refresh(achievement)
    except SQLAlchemyError as e:
        raise _server_error(db, "updating achievement", e)

    return achievement


def delete_achievement(db: Session, achievement_id: str, storage: Optional[PhotoStorage] = None) -> str:
    """
    성장 기록 삭제

    연결된 사진이 있으면 레코드 삭제 후 S3 객체도 best-effort로 삭제한다.

    Returns:
        삭제된 성장 기록 ID
    """
    achievement = get_achievement(db, achievement_id)
    photo_url = achievement.photo_url

    try:
        db.delete(achievement)
        db.commit()
    except SQLAlchemyError as e:
        raise _server_error(db, "deleting achievement", e)

    if photo_url and storage is not None:
        storage.delete(photo_url)

    logger.info(f"성장 기록 삭제: id={achievement_id}")
    return achievement_id


def attach_photo(db: Session, achievement_id: str, photo_url: str) -> Achievement:
    """사진 URL 연결 (기존 사진 객체는 삭제하지 않음)"""
    achievement = get_achievement(db, achievement_id)

    achievement.photo_url = photo_url
    achievement.updated_at = utcnow()

    try:
        db.commit()
        db.refresh(achievement)
    except SQLAlchemyError as e:
        raise _server_error(db, "uploading photo", e)

    return achievement


def detach_photo(db: Session, achievement_id: str) -> tuple[Achievement, str]:
    """
    사진 연결 해제

    Returns:
        (수정된 성장 기록, 삭제해야 할 기존 사진 URL)
    """
    achievement = get_achievement(db, achievement_id)
    photo_url = achievement.photo_url

    if not photo_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Photo not found",
        )

    achievement.photo_url = None
    achievement.updated_at = utcnow()

    try:
        db.commit()
        db.refresh(achievement)
    except SQLAlchemyError as e:
        raise _server_error(db, "deleting photo", e)

    return achievement, photo_url
