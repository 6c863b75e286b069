# petgroom/api/admin/stats.py
"""
관리자 대시보드/재무 통계 계산.

조회된 예약 스냅샷과 서비스 조회용 맵만으로 계산하는 순수 함수입니다.
금액은 예약 시점이 아닌 '현재' 서비스 가격 기준입니다.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping

from petgroom.models.appointment import Appointment, AppointmentStatus
from petgroom.utils.datetime_utils import DateTimeUtils

TOP_SERVICES_LIMIT = 5


def _price_of(appointment: Appointment, services_by_id: Mapping[str, Any]) -> float:
    service = services_by_id.get(appointment.service_id)
    return float(service.price or 0) if service else 0.0


def _revenue(appointments: Iterable[Appointment], services_by_id: Mapping[str, Any]) -> float:
    return sum(_price_of(a, services_by_id) for a in appointments)


def _in_range(appointment: Appointment, start: date, end: date) -> bool:
    return start <= appointment.scheduled_date <= end


def daily_stats(appointments: Iterable[Appointment], services_by_id: Mapping[str, Any], today: date) -> Dict[str, Any]:
    """
    오늘 예약 수, 승인 대기(오늘 이후 PENDING) 수, 오늘 매출을 계산합니다.

    오늘 매출은 상태와 관계없이 오늘 날짜의 모든 예약 서비스 가격의 합입니다.
    (완료 여부를 따지지 않는 예상 매출 기준)
    """
    appointments = list(appointments)
    todays = [a for a in appointments if a.scheduled_date == today]
    pending = [a for a in appointments
               if a.status == AppointmentStatus.PENDING and a.scheduled_date >= today]
    return {
        "today_count": len(todays),
        "pending_count": len(pending),
        "today_revenue": _revenue(todays, services_by_id),
    }


def top_services(appointments: Iterable[Appointment], services_by_id: Mapping[str, Any],
                 limit: int = TOP_SERVICES_LIMIT) -> List[Dict[str, Any]]:
    """
    예약 건수 기준 상위 서비스. 건수가 같으면 먼저 집계된 서비스가 앞에 옵니다.
    삭제되어 조회되지 않는 서비스는 제외합니다.
    """
    ranking: Dict[str, Dict[str, Any]] = {}
    for appointment in appointments:
        service = services_by_id.get(appointment.service_id)
        if not service or not service.name:
            continue
        entry = ranking.setdefault(service.service_id, {"name": service.name, "count": 0, "revenue": 0.0})
        entry["count"] += 1
        entry["revenue"] += float(service.price or 0)
    # sorted()는 안정 정렬
    return sorted(ranking.values(), key=lambda e: e["count"], reverse=True)[:limit]


def financial_stats(appointments: Iterable[Appointment], services_by_id: Mapping[str, Any], today: date) -> Dict[str, Any]:
    """이번 달/지난 달 매출, 이번 달 예약 수, 완료 수, 평균 객단가, 인기 서비스 TOP 5."""
    (cur_start, cur_end), (prev_start, prev_end) = DateTimeUtils.current_and_previous_month(today)
    appointments = list(appointments)
    current = [a for a in appointments if _in_range(a, cur_start, cur_end)]
    previous = [a for a in appointments if _in_range(a, prev_start, prev_end)]

    current_revenue = _revenue(current, services_by_id)
    current_count = len(current)
    return {
        "current_month_revenue": current_revenue,
        "last_month_revenue": _revenue(previous, services_by_id),
        "current_month_appointments": current_count,
        "completed_appointments": sum(1 for a in current if a.status == AppointmentStatus.COMPLETED),
        "average_ticket": current_revenue / current_count if current_count > 0 else 0.0,
        "top_services": top_services(current, services_by_id),
    }
