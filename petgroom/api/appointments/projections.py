# petgroom/api/appointments/projections.py
"""
예약 목록 스냅샷에 대한 순수 변환 함수 모음.

데이터 조회 계층과 분리되어 있어 Firestore 없이 단위 테스트할 수 있습니다.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from petgroom.models.appointment import Appointment, AppointmentStatus
from petgroom.utils.datetime_utils import DateTimeUtils

# 관리자 아젠다 상태 필터
STATUS_FILTER_ALL = "ALL"
AGENDA_STATUS_FILTERS = (STATUS_FILTER_ALL, AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value)


def sort_key(appointment: Appointment) -> Tuple[date, str]:
    return appointment.scheduled_date, appointment.scheduled_time


def partition_by_date(appointments: Iterable[Appointment], today: date) -> Tuple[List[Appointment], List[Appointment]]:
    """
    예약을 '예정(오늘 포함)'과 '지난 예약'으로 나눕니다.
    모든 예약은 정확히 한쪽에만 들어가며, 각 목록 내 순서는 입력 순서를 유지합니다.
    """
    upcoming, history = [], []
    for appointment in appointments:
        if appointment.scheduled_date >= today:
            upcoming.append(appointment)
        else:
            history.append(appointment)
    return upcoming, history


def modifiable(appointments: Iterable[Appointment]) -> List[Appointment]:
    """수정/삭제 가능한(PENDING, CONFIRMED) 예약만 반환합니다."""
    return [a for a in appointments if a.is_modifiable]


def filter_by_status(appointments: Iterable[Appointment], status_filter: str = STATUS_FILTER_ALL) -> List[Appointment]:
    if status_filter not in AGENDA_STATUS_FILTERS:
        raise ValueError(f"지원하지 않는 상태 필터입니다: {status_filter}")
    if status_filter == STATUS_FILTER_ALL:
        return list(appointments)
    return [a for a in appointments if a.status.value == status_filter]


def count_pending(appointments: Iterable[Appointment]) -> int:
    return sum(1 for a in appointments if a.status == AppointmentStatus.PENDING)


def attach_details(appointments: Sequence[Appointment],
                   pets: Mapping[str, Any],
                   services: Mapping[str, Any],
                   profiles: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    조회용 맵을 이용해 예약에 반려동물/서비스/(선택)소유자 프로필 정보를 붙입니다.
    참조 대상이 삭제되었거나 조회되지 않은 경우 해당 항목은 None입니다.
    """
    enriched = []
    for appointment in appointments:
        item = {
            "appointment": appointment,
            "pet": pets.get(appointment.pet_id),
            "service": services.get(appointment.service_id),
        }
        if profiles is not None:
            item["profile"] = profiles.get(appointment.user_id)
        enriched.append(item)
    return enriched


def available_time_slots(day: date, business_hours: Mapping[str, Mapping[str, Any]], slots: Sequence[str]) -> List[str]:
    """
    해당 요일의 영업시간 안에 시작하는 기본 예약 시간대를 반환합니다.
    휴무일이거나 영업시간 설정이 없으면 빈 목록입니다.
    """
    hours = business_hours.get(DateTimeUtils.weekday_key(day))
    if not hours or not hours.get('enabled'):
        return []

    open_at = DateTimeUtils.parse_hhmm(hours['open'])
    close_at = DateTimeUtils.parse_hhmm(hours['close'])
    return [slot for slot in slots if open_at <= DateTimeUtils.parse_hhmm(slot) < close_at]
