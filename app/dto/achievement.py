"""
성장 기록 요청/응답 양식
"""
from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator
from pydantic.alias_generators import to_camel
from datetime import date as DateType, datetime
from typing import List, Optional


class AgeSchema(BaseModel):
    """이벤트 당시 나이 (년/월/일, 세 값 모두 필수, 정수만 허용)"""
    model_config = ConfigDict(strict=True)

    years: int = Field(..., ge=0, description="년")
    months: int = Field(..., ge=0, le=11, description="개월 (0-11)")
    days: int = Field(..., ge=0, le=30, description="일 (0-30)")


class AchievementRequest(BaseModel):
    """성장 기록 생성/수정 요청 (수정 시 전체 필드 교체)"""
    model_config = ConfigDict(populate_by_name=True)

    date: Optional[DateType] = Field(None, description="이벤트 날짜 (YYYY-MM-DD)")
    title: Optional[str] = Field(None, description="제목")
    description: Optional[str] = Field(None, description="상세 내용")
    age_at_event: Optional[AgeSchema] = Field(None, alias="ageAtEvent", description="클라이언트에서 계산한 당시 월령")
    tags: List[str] = Field(default_factory=list, description="태그 리스트")
    photo_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("photoUrl", "photo", "photo_url"),
        description="사진 URL",
    )

    @field_validator('tags', mode='before')
    @classmethod
    def default_tags(cls, v):
        return [] if v is None else v

    @field_validator('tags')
    @classmethod
    def drop_empty_tags(cls, v: List[str]) -> List[str]:
        return [tag.strip() for tag in v if tag and tag.strip()]


class AchievementResponse(BaseModel):
    """성장 기록 응답 (camelCase)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    date: DateType
    title: str
    description: Optional[str] = None
    age_at_event: Optional[AgeSchema] = None
    tags: List[str] = Field(default_factory=list)
    photo: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, achievement) -> "AchievementResponse":
        """
        DB 행을 응답 형식으로 변환

        모든 조회 경로(목록/생성/수정/사진)에서 이 함수만 사용한다.
        - age_years/age_months/age_days 중 하나라도 NULL이면 ageAtEvent는 null
        - tags가 없으면 빈 리스트, description/photo가 없으면 null
        """
        components = (achievement.age_years, achievement.age_months, achievement.age_days)
        age = None
        if all(value is not None for value in components):
            age = AgeSchema(years=components[0], months=components[1], days=components[2])

        return cls(
            id=achievement.id,
            date=achievement.date,
            title=achievement.title,
            description=achievement.description or None,
            age_at_event=age,
            tags=list(achievement.tags or []),
            photo=achievement.photo_url or None,
            created_at=achievement.created_at,
            updated_at=achievement.updated_at,
        )


class AchievementDeleteResponse(BaseModel):
    """성장 기록 삭제 응답"""
    message: str
    id: str
