"""
아이 프로필 API
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dto.profile import ProfileUpdateRequest, ProfileResponse
from app.services import profile_service

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
def get_profile(db: Session = Depends(get_db)):
    """아이 프로필 조회"""
    profile = profile_service.get_profile(db)
    return ProfileResponse.from_model(profile)


@router.put("/profile", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    아이 프로필 저장 (없으면 생성)

    - **nickname**: 이름/애칭
    - **gender**: male, female, other
    - **birthday**: 생일 (YYYY-MM-DD)
    """
    profile = profile_service.upsert_profile(db, request)
    return ProfileResponse.from_model(profile)
