"""
월령 계산 유틸리티
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union
from dateutil.relativedelta import relativedelta
import logging
import re

logger = logging.getLogger(__name__)

DateLike = Union[str, date]

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class Age:
    """이벤트 당시 나이 (년/월/일)"""
    years: int
    months: int
    days: int

    def to_dict(self) -> dict:
        return {"years": self.years, "months": self.months, "days": self.days}


def parse_date(value: DateLike) -> date:
    """YYYY-MM-DD 문자열을 date로 변환 (datetime은 날짜 부분만 사용)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if not _DATE_PATTERN.fullmatch(text):
        raise ValueError(f"YYYY-MM-DD 형식이 아닙니다: {value!r}")
    return datetime.strptime(text, "%Y-%m-%d").date()


def _whole_years(start: date, end: date) -> int:
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def _whole_months(start: date, end: date) -> int:
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def calculate_age_at_event(birth_date: DateLike, event_date: DateLike) -> Optional[Age]:
    """
    생일과 이벤트 날짜로부터 월령(년, 월, 일)을 계산

    년 → 월 → 일 순서로 이벤트 날짜에서 역산하며, 월/년 이동은
    relativedelta의 달력 연산(월말 보정 포함)을 사용한다.

    Args:
        birth_date: 생일 (YYYY-MM-DD 문자열 또는 date)
        event_date: 이벤트 날짜 (YYYY-MM-DD 문자열 또는 date)

    Returns:
        Age, 날짜 형식이 잘못되었거나 이벤트가 생일보다 이전이면 None
    """
    try:
        birth = parse_date(birth_date)
        event = parse_date(event_date)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"날짜 형식이 올바르지 않습니다: birth={birth_date!r}, event={event_date!r} ({e})")
        return None

    if event < birth:
        logger.warning(f"이벤트 날짜가 생일보다 이전입니다: birth={birth}, event={event}")
        return None

    years = _whole_years(birth, event)
    date_after_years = event - relativedelta(years=years)

    months = _whole_months(birth, date_after_years)
    date_after_months = date_after_years - relativedelta(months=months)

    days = (date_after_months - birth).days

    return Age(years=years, months=months, days=days)


def parse_tags(text: Optional[str]) -> list[str]:
    """쉼표로 구분된 태그 입력을 리스트로 변환 (공백 제거, 빈 값 제외, 순서 유지)"""
    if not text:
        return []
    return [tag.strip() for tag in text.split(",") if tag.strip()]
