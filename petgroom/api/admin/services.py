# petgroom/api/admin/services.py
import logging
from datetime import date
from typing import Dict, Any, Optional

from petgroom.utils.datetime_utils import DateTimeUtils
from petgroom.api.appointments.projections import filter_by_status, count_pending, STATUS_FILTER_ALL
from .stats import daily_stats, financial_stats

UPCOMING_LIMIT = 5


class AdminService:
    """관리자 아젠다/대시보드/재무 화면용 조회 서비스. 예약 조회는 AppointmentService에 위임합니다."""

    def __init__(self, appointment_service, catalog_service):
        self.appointment_service = appointment_service
        self.catalog_service = catalog_service

    def get_agenda(self, date_filter: Optional[date] = None, status_filter: str = STATUS_FILTER_ALL) -> Dict[str, Any]:
        """
        전체 예약을 (선택) 날짜와 상태로 필터링하여 반려동물/서비스/고객 프로필과 함께 반환합니다.
        pending_count는 상태 필터와 관계없이 조회된 날짜 범위 안의 승인 대기 건수입니다.
        """
        appointments = self.appointment_service.get_all_appointments(date_filter=date_filter)
        filtered = filter_by_status(appointments, status_filter)
        return {
            "items": self.appointment_service.with_details(filtered, include_profiles=True),
            "pending_count": count_pending(appointments),
        }

    def get_dashboard(self, today: Optional[date] = None) -> Dict[str, Any]:
        """오늘 통계와 다가오는 예약 5건."""
        today = today or DateTimeUtils.today()
        upcoming = self.appointment_service.get_all_appointments(start_date=today)
        services = self.catalog_service.get_services_by_ids(a.service_id for a in upcoming)
        stats = daily_stats(upcoming, services, today)
        logging.info(f"Dashboard stats computed for {today}: {stats}")
        return {
            "stats": stats,
            "upcoming": self.appointment_service.with_details(upcoming[:UPCOMING_LIMIT], include_profiles=True),
        }

    def get_financial(self, today: Optional[date] = None) -> Dict[str, Any]:
        """지난 달 1일부터 이번 달 말일까지의 예약으로 재무 통계를 계산합니다."""
        today = today or DateTimeUtils.today()
        (_, current_end), (previous_start, _) = DateTimeUtils.current_and_previous_month(today)
        appointments = self.appointment_service.get_all_appointments(start_date=previous_start, end_date=current_end)
        services = self.catalog_service.get_services_by_ids(a.service_id for a in appointments)
        return financial_stats(appointments, services, today)
