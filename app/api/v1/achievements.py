"""
성장 기록 API
"""
from fastapi import APIRouter, Depends, status, UploadFile, File, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.database import get_db
from app.dto.achievement import AchievementRequest, AchievementResponse, AchievementDeleteResponse
from app.services import achievement_service
from app.services.s3_service import PhotoStorage, get_photo_storage

router = APIRouter()


@router.get(
    "/achievements",
    response_model=List[AchievementResponse],
)
def get_achievements(db: Session = Depends(get_db)):
    """성장 기록 목록 조회 (최근 날짜 순)"""
    achievements = achievement_service.list_achievements(db)
    return [AchievementResponse.from_model(achievement) for achievement in achievements]


@router.post(
    "/achievements",
    response_model=AchievementResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_achievement(
    request: AchievementRequest,
    db: Session = Depends(get_db)
):
    """
    성장 기록 등록

    - **date**: 이벤트 날짜 (YYYY-MM-DD)
    - **title**: 제목
    - **description**: 상세 내용 (선택)
    - **ageAtEvent**: 당시 월령 `{years, months, days}` (클라이언트에서 계산)
    - **tags**: 태그 리스트 (선택)
    - **photoUrl**: 사진 URL (선택)
    """
    achievement = achievement_service.create_achievement(db, request)
    return AchievementResponse.from_model(achievement)


@router.put(
    "/achievements/{achievement_id}",
    response_model=AchievementResponse,
)
def update_achievement(
    achievement_id: str,
    request: AchievementRequest,
    db: Session = Depends(get_db)
):
    """성장 기록 수정 (전체 필드 교체)"""
    achievement = achievement_service.update_achievement(db, achievement_id, request)
    return AchievementResponse.from_model(achievement)


@router.delete(
    "/achievements/{achievement_id}",
    response_model=AchievementDeleteResponse,
)
def delete_achievement(
    achievement_id: str,
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage)
):
    """성장 기록 삭제 (연결된 사진도 함께 삭제)"""
    deleted_id = achievement_service.delete_achievement(db, achievement_id, storage)
    return AchievementDeleteResponse(message="Achievement deleted successfully", id=deleted_id)


@router.post(
    "/achievements/{achievement_id}/photo",
    response_model=AchievementResponse,
)
def upload_photo(
    achievement_id: str,
    photo: Optional[UploadFile] = File(None, description="업로드할 사진 (최대 5MB)"),
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage)
):
    """
    성장 기록에 사진 업로드

    업로드 후 레코드 갱신이 실패해도 S3 객체는 되돌리지 않는다.
    """
    if photo is None or not photo.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    # 존재하지 않는 기록이면 업로드 전에 404
    achievement_service.get_achievement(db, achievement_id)

    # 제한 크기 + 1 바이트까지만 읽어서 초과 여부 판단
    content = photo.file.read(storage.max_size + 1)
    photo_url = storage.upload(content, photo.filename)

    achievement = achievement_service.attach_photo(db, achievement_id, photo_url)
    return AchievementResponse.from_model(achievement)


@router.delete(
    "/achievements/{achievement_id}/photo",
    response_model=AchievementResponse,
)
def delete_photo(
    achievement_id: str,
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage)
):
    """성장 기록의 사진 삭제"""
    achievement, photo_url = achievement_service.detach_photo(db, achievement_id)
    storage.delete(photo_url)
    return AchievementResponse.from_model(achievement)
