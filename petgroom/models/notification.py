# petgroom/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from petgroom.utils.datetime_utils import DateTimeUtils


class NotificationType(Enum):
    """알림 유형을 정의하는 Enum 클래스"""
    NEW_APPOINTMENT = "NEW_APPOINTMENT"
    APPOINTMENT_CANCELED_BY_CLIENT = "APPOINTMENT_CANCELED_BY_CLIENT"
    APPOINTMENT_CONFIRMED = "APPOINTMENT_CONFIRMED"
    APPOINTMENT_REJECTED = "APPOINTMENT_REJECTED"
    APPOINTMENT_COMPLETED = "APPOINTMENT_COMPLETED"


@dataclass
class Notification:
    """
    Firestore 'notifications' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    notification_id: str
    recipient_id: str      # 알림을 받는 사용자 ID
    sender_id: str         # 알림을 유발한 사용자 ID
    type: NotificationType
    target_id: str         # 대상 예약 ID
    target_summary: Optional[str] = None  # "Rex - 목욕 (2024-01-15 09:00)"
    is_read: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
