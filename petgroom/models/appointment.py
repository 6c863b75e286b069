# petgroom/models/appointment.py
import logging
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import Optional, Dict, Any, FrozenSet

from petgroom.models.profile import UserRole
from petgroom.utils.datetime_utils import DateTimeUtils


class AppointmentStatus(Enum):
    """예약 상태. 생성 시 항상 PENDING에서 시작합니다."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED)

    @property
    def is_modifiable(self) -> bool:
        """고객 수정/삭제 및 관리자 삭제가 허용되는 상태인지 여부."""
        return self in (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)


# 과거 샘플 데이터에만 존재하는 상태값. 읽을 때 CONFIRMED로 취급합니다.
LEGACY_IN_PROGRESS = "IN_PROGRESS"

# 관리자 전용 상태 전이표. 여기에 없는 전이는 모두 거부됩니다.
ADMIN_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.COMPLETED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELED: frozenset(),
}

ADMIN_SETTABLE_STATUSES = frozenset({
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.CANCELED,
    AppointmentStatus.COMPLETED,
})


class InvalidStatusTransition(ValueError):
    """현재 상태에서 허용되지 않는 상태 변경 요청."""

    def __init__(self, current: AppointmentStatus, target: AppointmentStatus):
        self.current = current
        self.target = target
        super().__init__(f"'{current.value}' 상태의 예약은 '{target.value}' 상태로 변경할 수 없습니다.")


class AppointmentLockedError(ValueError):
    """완료/취소된 예약에 대한 수정·삭제 요청."""

    def __init__(self, status: AppointmentStatus):
        self.status = status
        super().__init__(f"'{status.value}' 상태의 예약은 수정하거나 삭제할 수 없습니다.")


def parse_status(value: Any) -> AppointmentStatus:
    """저장된 상태 문자열을 AppointmentStatus로 변환합니다."""
    if isinstance(value, AppointmentStatus):
        return value
    if value == LEGACY_IN_PROGRESS:
        logging.warning("Legacy appointment status 'IN_PROGRESS' read as CONFIRMED.")
        return AppointmentStatus.CONFIRMED
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise ValueError(f"알 수 없는 예약 상태입니다: {value}")


def check_transition(current: AppointmentStatus, target: AppointmentStatus, actor_role: UserRole) -> None:
    """
    상태 전이 가능 여부를 검사합니다.

    :raises PermissionError: 관리자가 아닌 사용자가 상태를 변경하려는 경우
    :raises InvalidStatusTransition: 전이표에 없는 전이인 경우 (종료 상태 포함)
    """
    if actor_role != UserRole.ADMIN:
        raise PermissionError("예약 상태는 관리자만 변경할 수 있습니다.")
    if target not in ADMIN_TRANSITIONS[current]:
        raise InvalidStatusTransition(current, target)


@dataclass
class Appointment:
    """
    Firestore 'appointments' 컬렉션 문서 구조.
    프로필(user_id), 반려동물(pet_id), 서비스(service_id)를 예약 일시와 연결합니다.
    """
    appointment_id: str
    user_id: str
    pet_id: str
    service_id: str
    scheduled_date: date
    scheduled_time: str  # 'HH:MM'
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def is_modifiable(self) -> bool:
        return self.status.is_modifiable

    def ensure_modifiable(self) -> None:
        if not self.is_modifiable:
            raise AppointmentLockedError(self.status)

    def transition_to(self, target: AppointmentStatus, actor_role: UserRole) -> "Appointment":
        """전이 규칙을 통과한 경우에만 상태를 변경합니다."""
        check_transition(self.status, target, actor_role)
        self.status = target
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Appointment":
        processed = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        processed['status'] = parse_status(processed.get('status', AppointmentStatus.PENDING.value))
        processed['scheduled_date'] = DateTimeUtils.validate_date_field(processed.get('scheduled_date'), 'scheduled_date')
        processed['created_at'] = DateTimeUtils.from_firestore_timestamp(processed.get('created_at'))
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리 (status는 문자열, 예약일은 'YYYY-MM-DD')."""
        return DateTimeUtils.for_firestore(asdict(self))
