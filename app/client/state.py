"""
클라이언트 상태 컨테이너 (요청 상태별 순수 리듀서)
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional, Tuple
import httpx
import logging

from app.client.api_client import GrowthLogClient

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
SUCCEEDED = "succeeded"
FAILED = "failed"

# 성장 기록 액션 접두사
FETCH_ACHIEVEMENTS = "achievements/fetch"
ADD_ACHIEVEMENT = "achievements/add"
UPDATE_ACHIEVEMENT = "achievements/update"
DELETE_ACHIEVEMENT = "achievements/delete"
UPLOAD_PHOTO = "achievements/uploadPhoto"
DELETE_PHOTO = "achievements/deletePhoto"

# 프로필 액션 접두사
FETCH_PROFILE = "profile/fetch"
SAVE_PROFILE = "profile/save"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None
    error: Optional[str] = None


@dataclass(frozen=True)
class AchievementsState:
    items: Tuple[Dict[str, Any], ...] = ()
    status: str = IDLE
    error: Optional[str] = None


@dataclass(frozen=True)
class ProfileState:
    profile: Optional[Dict[str, Any]] = None
    status: str = IDLE
    error: Optional[str] = None

    @property
    def birthday(self) -> Optional[str]:
        return self.profile.get("birthday") if self.profile else None


def _sort_items(items) -> Tuple[Dict[str, Any], ...]:
    """서버와 같은 순서 (날짜 내림차순, 같은 날짜는 생성일 내림차순)"""
    return tuple(sorted(
        items,
        key=lambda item: (item.get("date") or "", item.get("createdAt") or ""),
        reverse=True,
    ))


def _replace_item(items, updated: Dict[str, Any]) -> Tuple[Dict[str, Any], ...]:
    return _sort_items(updated if item.get("id") == updated.get("id") else item for item in items)


def achievements_reducer(state: AchievementsState, action: Action) -> AchievementsState:
    """성장 기록 상태 전이"""
    prefix, _, phase = action.type.rpartition("/")
    if not prefix.startswith("achievements/"):
        return state

    if phase == "pending":
        return replace(state, status=LOADING, error=None)
    if phase == "rejected":
        return replace(state, status=FAILED, error=action.error or "Request failed")
    if phase != "fulfilled":
        return state

    if prefix == FETCH_ACHIEVEMENTS:
        items = _sort_items(action.payload)
    elif prefix == ADD_ACHIEVEMENT:
        items = _sort_items(state.items + (action.payload,))
    elif prefix in (UPDATE_ACHIEVEMENT, UPLOAD_PHOTO, DELETE_PHOTO):
        items = _replace_item(state.items, action.payload)
    elif prefix == DELETE_ACHIEVEMENT:
        deleted_id = action.payload.get("id")
        items = tuple(item for item in state.items if item.get("id") != deleted_id)
    else:
        return state

    return replace(state, items=items, status=SUCCEEDED, error=None)


def profile_reducer(state: ProfileState, action: Action) -> ProfileState:
    """프로필 상태 전이"""
    prefix, _, phase = action.type.rpartition("/")
    if prefix not in (FETCH_PROFILE, SAVE_PROFILE):
        return state

    if phase == "pending":
        return replace(state, status=LOADING, error=None)
    if phase == "rejected":
        return replace(state, status=FAILED, error=action.error or "Request failed")
    if phase == "fulfilled":
        return replace(state, profile=action.payload, status=SUCCEEDED, error=None)
    return state


def _error_message(error: Exception) -> str:
    """API 오류 응답의 detail 추출"""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            detail = error.response.json().get("detail")
        except ValueError:
            detail = None
        return detail or f"Request failed with status {error.response.status_code}"
    return str(error) or type(error).__name__


@dataclass
class Store:
    """
    API 호출 1건마다 pending → fulfilled/rejected 액션을 발행하는 상태 저장소

    실패는 상태(status=failed, error)로만 남기고 호출자에게는 None을 반환한다.
    """
    client: GrowthLogClient
    achievements: AchievementsState = field(default_factory=AchievementsState)
    profile: ProfileState = field(default_factory=ProfileState)

    def dispatch(self, action: Action) -> None:
        self.achievements = achievements_reducer(self.achievements, action)
        self.profile = profile_reducer(self.profile, action)

    def _run(self, prefix: str, call: Callable[..., Any], *args) -> Any:
        self.dispatch(Action(f"{prefix}/pending"))
        try:
            result = call(*args)
        except (httpx.HTTPError, ValueError) as e:
            message = _error_message(e)
            logger.warning(f"{prefix} 실패: {message}")
            self.dispatch(Action(f"{prefix}/rejected", error=message))
            return None
        self.dispatch(Action(f"{prefix}/fulfilled", payload=result))
        return result

    def fetch_achievements(self):
        return self._run(FETCH_ACHIEVEMENTS, self.client.fetch_achievements)

    def add_achievement(self, payload: Dict[str, Any]):
        return self._run(ADD_ACHIEVEMENT, self.client.create_achievement, payload)

    def update_achievement(self, achievement_id: str, payload: Dict[str, Any]):
        return self._run(UPDATE_ACHIEVEMENT, self.client.update_achievement, achievement_id, payload)

    def delete_achievement(self, achievement_id: str):
        return self._run(DELETE_ACHIEVEMENT, self.client.delete_achievement, achievement_id)

    def upload_photo(self, achievement_id: str, filename: str, content: bytes):
        return self._run(UPLOAD_PHOTO, self.client.upload_photo, achievement_id, filename, content)

    def delete_photo(self, achievement_id: str):
        return self._run(DELETE_PHOTO, self.client.delete_photo, achievement_id)

    def fetch_profile(self):
        return self._run(FETCH_PROFILE, self.client.fetch_profile)

    def save_profile(self, nickname: str, gender: str, birthday: str):
        return self._run(SAVE_PROFILE, self.client.update_profile, nickname, gender, birthday)
