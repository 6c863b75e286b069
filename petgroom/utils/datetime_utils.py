# petgroom/utils/datetime_utils.py
"""
예약/통계에서 공통으로 사용하는 날짜·시간 유틸리티 모듈

- 예약일(scheduled_date)은 'YYYY-MM-DD' 문자열로 저장되므로 문자열 비교가 곧 날짜 비교입니다.
- '오늘'은 UTC 기준으로 계산합니다. (클라이언트가 현지 시간으로 변환)
- 월 단위 통계를 위해 월의 첫째 날/마지막 날 범위를 계산합니다.
"""

import logging
from datetime import datetime, date, timezone, time
from enum import Enum
from typing import Any, Tuple

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d'

# date.weekday() 인덱스 -> 영업시간 설정 키
WEEKDAY_KEYS = ('mon', 'tue', 'wed', 'thu', 'fri', 'sat', 'sun')


class DateTimeUtils:
    """날짜/시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def today() -> date:
        """오늘 날짜(UTC)를 반환"""
        return datetime.now(timezone.utc).date()

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """
        날짜 문자열을 date 객체로 파싱

        지원 포맷:
        - 2024-01-15
        - 2024/01/15
        - 2024-01-15T10:30:00Z (날짜 부분만 사용)
        """
        try:
            if not date_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")
            return dateutil_parser.parse(date_string).date()
        except Exception as e:
            logger.error(f"날짜 문자열 파싱 실패: {date_string} - {e}")
            raise ValueError(f"잘못된 날짜 형식입니다: {date_string}")

    @staticmethod
    def to_date_string(d: date) -> str:
        """date 객체를 YYYY-MM-DD 형식 문자열로 변환"""
        try:
            return d.strftime(DATE_FORMAT)
        except Exception as e:
            logger.error(f"날짜 문자열 변환 실패: {d} - {e}")
            raise ValueError(f"date 객체를 문자열로 변환할 수 없습니다: {d}")

    @staticmethod
    def validate_date_field(value: Any, field_name: str = "date") -> date:
        """
        요청/DB에서 받은 date 값을 검증하고 date 객체로 변환

        Raises:
            ValueError: 잘못된 형식이거나 파싱할 수 없는 경우
        """
        if value is None:
            raise ValueError(f"{field_name}은 필수 필드입니다")
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return DateTimeUtils.parse_date_string(value)
        raise ValueError(f"{field_name}은 문자열 또는 date/datetime 객체여야 합니다")

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> 'YYYY-MM-DD' 문자열 (예약일 범위 쿼리를 문자열 비교로 수행)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - Enum -> value
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return DateTimeUtils.to_date_string(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore_timestamp(value: Any) -> datetime:
        """Firestore Timestamp / datetime / ISO 문자열을 UTC datetime으로 변환"""
        if value is None:
            return DateTimeUtils.now()
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        if isinstance(value, str):
            dt = dateutil_parser.isoparse(value)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)
        if hasattr(value, 'timestamp'):
            return datetime.fromtimestamp(value.timestamp(), tz=timezone.utc)
        raise ValueError(f"datetime으로 변환할 수 없는 값입니다: {value!r}")

    @staticmethod
    def get_month_range(year: int, month: int) -> Tuple[date, date]:
        """특정 년월의 첫째 날과 마지막 날을 반환"""
        try:
            start_date = date(year, month, 1)
            end_date = start_date + relativedelta(months=1) - relativedelta(days=1)
            return start_date, end_date
        except Exception as e:
            logger.error(f"월 범위 계산 실패: {year}-{month} - {e}")
            raise ValueError(f"월 범위를 계산할 수 없습니다: {year}-{month}")

    @staticmethod
    def current_and_previous_month(today: date) -> Tuple[Tuple[date, date], Tuple[date, date]]:
        """기준일이 속한 달과 그 이전 달의 (첫째 날, 마지막 날) 범위를 반환"""
        previous = today.replace(day=1) - relativedelta(months=1)
        return (
            DateTimeUtils.get_month_range(today.year, today.month),
            DateTimeUtils.get_month_range(previous.year, previous.month),
        )

    @staticmethod
    def weekday_key(d: date) -> str:
        """영업시간 설정에서 사용하는 요일 키 ('mon' ~ 'sun')"""
        return WEEKDAY_KEYS[d.weekday()]

    @staticmethod
    def parse_hhmm(value: str) -> time:
        """'HH:MM' 문자열을 time 객체로 변환"""
        try:
            return datetime.strptime(value, '%H:%M').time()
        except (TypeError, ValueError):
            raise ValueError(f"잘못된 시간 형식입니다: {value}")
