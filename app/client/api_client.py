"""
성장 기록 API 클라이언트 (httpx)
"""
from datetime import date
from typing import Any, BinaryIO, Dict, List, Optional, Union
import httpx
import logging

from app.core.config import settings
from app.utils.date_utils import calculate_age_at_event, parse_tags

logger = logging.getLogger(__name__)


def build_achievement_payload(
    birthday: Optional[Union[str, date]],
    event_date: Optional[Union[str, date]],
    title: Optional[str],
    description: str = "",
    tags_text: str = "",
    photo_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    입력 폼 값으로 성장 기록 요청 본문 생성

    생일과 이벤트 날짜로 월령을 계산하고 태그 문자열을 쉼표로 나눈다.
    월령을 계산할 수 없으면 ValueError로 저장을 막는다.
    """
    if not birthday:
        raise ValueError("Child's birthday is not set. Set the birthday first.")
    if not event_date or not (title or "").strip():
        raise ValueError("Date and title are required.")

    age = calculate_age_at_event(birthday, event_date)
    if age is None:
        raise ValueError("Invalid date, or the event date is before the birthday.")

    payload: Dict[str, Any] = {
        "date": str(event_date),
        "title": title.strip(),
        "description": description,
        "ageAtEvent": age.to_dict(),
        "tags": parse_tags(tags_text),
    }
    if photo_url:
        payload["photoUrl"] = photo_url
    return payload


class GrowthLogClient:
    """엔드포인트별 요청 메서드 (2xx 이외 응답은 httpx.HTTPStatusError)"""

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GrowthLogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._client.request(method, path, **kwargs)
        if response.is_error:
            logger.warning(f"API 요청 실패: {method} {path} -> {response.status_code}")
        response.raise_for_status()
        return response.json()

    def fetch_achievements(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/achievements")

    def create_achievement(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/achievements", json=payload)

    def update_achievement(self, achievement_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/achievements/{achievement_id}", json=payload)

    def delete_achievement(self, achievement_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/achievements/{achievement_id}")

    def upload_photo(self, achievement_id: str, filename: str, content: Union[bytes, BinaryIO]) -> Dict[str, Any]:
        files = {"photo": (filename, content)}
        return self._request("POST", f"/achievements/{achievement_id}/photo", files=files)

    def delete_photo(self, achievement_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/achievements/{achievement_id}/photo")

    def fetch_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/profile")

    def update_profile(self, nickname: str, gender: str, birthday: str) -> Dict[str, Any]:
        return self._request("PUT", "/profile", json={
            "nickname": nickname,
            "gender": gender,
            "birthday": birthday,
        })
