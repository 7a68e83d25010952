"""
아이 프로필 요청/응답 양식
"""
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import date as DateType, datetime
from typing import Optional


class ProfileUpdateRequest(BaseModel):
    """아이 프로필 저장 요청 (세 필드 모두 필수, 서비스에서 검증)"""
    nickname: Optional[str] = Field(None, max_length=50, description="아이 이름/애칭")
    gender: Optional[str] = Field(None, description="성별: male, female, other")
    birthday: Optional[DateType] = Field(None, description="생일 (YYYY-MM-DD)")


class ProfileResponse(BaseModel):
    """아이 프로필 응답 (camelCase)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    nickname: str
    gender: str
    birthday: DateType
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            nickname=profile.nickname,
            gender=profile.gender,
            birthday=profile.birthday,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )
