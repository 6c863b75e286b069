# petgroom/api/appointments/services.py
import logging
import uuid
from datetime import date
from typing import Dict, Any, List, Optional, Sequence

from firebase_admin import firestore

from petgroom.core.security import SessionContext
from petgroom.models.appointment import Appointment, AppointmentStatus
from petgroom.models.notification import NotificationType
from petgroom.models.pet import Pet
from petgroom.models.profile import Profile
from petgroom.services.firestore_service import fetch_documents_by_ids
from petgroom.utils.datetime_utils import DateTimeUtils
from .projections import attach_details, partition_by_date, sort_key, available_time_slots, modifiable

# 관리자 상태 변경 시 소유자에게 보내는 알림 유형
STATUS_NOTIFICATIONS = {
    AppointmentStatus.CONFIRMED: NotificationType.APPOINTMENT_CONFIRMED,
    AppointmentStatus.CANCELED: NotificationType.APPOINTMENT_REJECTED,
    AppointmentStatus.COMPLETED: NotificationType.APPOINTMENT_COMPLETED,
}

VIEW_UPCOMING = "upcoming"
VIEW_HISTORY = "history"
VIEW_MODIFIABLE = "modifiable"
VIEW_ALL = "all"
LIST_VIEWS = (VIEW_UPCOMING, VIEW_HISTORY, VIEW_MODIFIABLE, VIEW_ALL)


class AppointmentService:
    """
    예약 생성/조회/수정/삭제와 상태 변경(관리자)을 담당하는 서비스.
    상태 전이 규칙은 Appointment 모델에 있으며, 이 서비스는 저장소 입출력과 권한 검사를 담당합니다.
    동시 수정은 조정하지 않습니다. (마지막 쓰기가 반영)
    """

    def __init__(self, pet_service, catalog_service, notification_service, settings_service, time_slots: Sequence[str]):
        self.db = firestore.client()
        self.appointments_ref = self.db.collection('appointments')
        self.profiles_ref = self.db.collection('profiles')
        self.pet_service = pet_service
        self.catalog_service = catalog_service
        self.notification_service = notification_service
        self.settings_service = settings_service
        self.time_slots = list(time_slots)
        logging.info("AppointmentService initialized with dependencies.")

    # --- 조회 ---
    def get_appointment(self, appointment_id: str) -> Appointment:
        doc = self.appointments_ref.document(appointment_id).get()
        if not doc.exists:
            raise FileNotFoundError("해당 ID의 예약을 찾을 수 없습니다.")
        return Appointment.from_dict(doc.to_dict())

    def get_user_appointments(self, user_id: str) -> List[Appointment]:
        """사용자의 예약을 예약일/시간 오름차순으로 조회합니다."""
        docs = self.appointments_ref.where('user_id', '==', user_id).stream()
        return sorted((Appointment.from_dict(doc.to_dict()) for doc in docs), key=sort_key)

    def get_user_appointments_detailed(self, user_id: str, view: str = VIEW_ALL, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """
        '내 예약' 화면용 목록. view에 따라 예정(오늘 포함) / 지난 예약 / 수정 가능 / 전체를 반환하고
        반려동물과 서비스 정보를 붙입니다.
        """
        appointments = self.get_user_appointments(user_id)
        if view == VIEW_MODIFIABLE:
            appointments = modifiable(appointments)
        elif view != VIEW_ALL:
            upcoming, history = partition_by_date(appointments, today or DateTimeUtils.today())
            if view == VIEW_UPCOMING:
                appointments = upcoming
            elif view == VIEW_HISTORY:
                appointments = history
            else:
                raise ValueError(f"지원하지 않는 조회 방식입니다: {view}")
        return self.with_details(appointments)

    def get_all_appointments(self, date_filter: Optional[date] = None,
                             start_date: Optional[date] = None,
                             end_date: Optional[date] = None) -> List[Appointment]:
        """
        [관리자] 전체 고객의 예약을 예약일/시간 순으로 조회합니다.

        :param date_filter: 특정 날짜의 예약만 조회
        :param start_date: 이 날짜 이후(포함) 예약만 조회
        :param end_date: 이 날짜 이전(포함) 예약만 조회
        """
        query = self.appointments_ref
        if date_filter:
            query = query.where('scheduled_date', '==', DateTimeUtils.to_date_string(date_filter))
        if start_date:
            query = query.where('scheduled_date', '>=', DateTimeUtils.to_date_string(start_date))
        if end_date:
            query = query.where('scheduled_date', '<=', DateTimeUtils.to_date_string(end_date))
        try:
            docs = query.stream()
            return sorted((Appointment.from_dict(doc.to_dict()) for doc in docs), key=sort_key)
        except Exception as e:
            logging.error(f"전체 예약 조회 실패: {e}", exc_info=True)
            raise

    def with_details(self, appointments: Sequence[Appointment], include_profiles: bool = False) -> List[Dict[str, Any]]:
        """예약 목록에 반려동물/서비스/(선택)프로필 정보를 조회용 맵으로 붙입니다."""
        pet_docs = fetch_documents_by_ids(self.pet_service.pets_ref, 'pet_id', (a.pet_id for a in appointments))
        pets = {pet_id: Pet.from_dict(data) for pet_id, data in pet_docs.items()}
        services = self.catalog_service.get_services_by_ids(a.service_id for a in appointments)

        profiles = None
        if include_profiles:
            try:
                profile_docs = fetch_documents_by_ids(self.profiles_ref, 'user_id', (a.user_id for a in appointments))
                profiles = {user_id: Profile.from_dict(data) for user_id, data in profile_docs.items()}
            except Exception as e:
                # 프로필 조회 실패 시에도 예약 목록 자체는 반환합니다.
                logging.error(f"예약 소유자 프로필 조회 실패: {e}", exc_info=True)
                profiles = {}
        return attach_details(appointments, pets, services, profiles)

    def get_time_slots(self, day: date) -> List[str]:
        """해당 날짜에 예약 가능한 기본 시간대 (영업시간 설정 반영)."""
        return available_time_slots(day, self.settings_service.get_business_hours(), self.time_slots)

    # --- 생성/수정/삭제 ---
    def _validate_references(self, owner_id: str, pet_id: str, service_id: str):
        pet = self.pet_service.get_pet_by_id_and_owner(pet_id, owner_id)
        if not pet:
            raise PermissionError("선택한 반려동물을 찾을 수 없거나 소유자가 아닙니다.")
        service = self.catalog_service.get_service(service_id)
        return pet, service

    def _validate_schedule(self, scheduled_date: date, scheduled_time: str) -> None:
        """지난 날짜, 휴무일, 영업시간 내 기본 시간대가 아닌 시간은 거부합니다."""
        if scheduled_date < DateTimeUtils.today():
            raise ValueError("지난 날짜로는 예약할 수 없습니다.")
        if scheduled_time not in self.get_time_slots(scheduled_date):
            raise ValueError(f"예약할 수 없는 시간대입니다: {DateTimeUtils.to_date_string(scheduled_date)} {scheduled_time}")

    def create_appointment(self, session: SessionContext, data: Dict[str, Any]) -> Appointment:
        """새 예약을 PENDING 상태로 생성하고 관리자에게 알립니다."""
        pet, service = self._validate_references(session.user_id, data['pet_id'], data['service_id'])
        self._validate_schedule(data['scheduled_date'], data['scheduled_time'])

        appointment = Appointment(
            appointment_id=str(uuid.uuid4()),
            user_id=session.user_id,
            pet_id=pet.pet_id,
            service_id=service.service_id,
            scheduled_date=data['scheduled_date'],
            scheduled_time=data['scheduled_time'],
            notes=data.get('notes'),
        )
        try:
            self.appointments_ref.document(appointment.appointment_id).set(appointment.to_dict())
        except Exception as e:
            logging.error(f"Appointment creation failed for user {session.user_id}: {e}", exc_info=True)
            raise
        logging.info(f"Appointment {appointment.appointment_id} created (PENDING) by {session.user_id}")

        self.notification_service.notify_admins(
            session.user_id, NotificationType.NEW_APPOINTMENT, appointment.appointment_id,
            self._summary(appointment, pet.name, service.name), setting_key='new_appointment'
        )
        return appointment

    def _get_for_actor(self, session: SessionContext, appointment_id: str) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if not session.is_admin and appointment.user_id != session.user_id:
            raise PermissionError("해당 예약에 대한 권한이 없습니다.")
        return appointment

    def update_appointment(self, session: SessionContext, appointment_id: str, update_data: Dict[str, Any]) -> Appointment:
        """예약 정보(반려동물, 서비스, 일시, 메모)를 수정합니다. PENDING/CONFIRMED 상태에서만 가능합니다."""
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")
        appointment = self._get_for_actor(session, appointment_id)
        appointment.ensure_modifiable()

        if 'pet_id' in update_data or 'service_id' in update_data:
            self._validate_references(
                appointment.user_id,
                update_data.get('pet_id', appointment.pet_id),
                update_data.get('service_id', appointment.service_id),
            )
        if 'scheduled_date' in update_data or 'scheduled_time' in update_data:
            self._validate_schedule(
                update_data.get('scheduled_date', appointment.scheduled_date),
                update_data.get('scheduled_time', appointment.scheduled_time),
            )

        self.appointments_ref.document(appointment_id).update(DateTimeUtils.for_firestore(update_data))
        logging.info(f"Appointment {appointment_id} updated with fields: {list(update_data.keys())}")
        return self.get_appointment(appointment_id)

    def delete_appointment(self, session: SessionContext, appointment_id: str) -> None:
        """
        예약을 삭제합니다. (소유자 또는 관리자, PENDING/CONFIRMED 상태에서만)
        고객이 직접 취소한 경우 관리자에게 알립니다.
        """
        appointment = self._get_for_actor(session, appointment_id)
        appointment.ensure_modifiable()

        self.appointments_ref.document(appointment_id).delete()
        logging.info(f"Appointment {appointment_id} deleted by {session.user_id} (role: {session.role.value})")

        if not session.is_admin:
            self.notification_service.notify_admins(
                session.user_id, NotificationType.APPOINTMENT_CANCELED_BY_CLIENT, appointment_id,
                self._summary(appointment), setting_key='cancel'
            )

    def change_status(self, session: SessionContext, appointment_id: str, target: AppointmentStatus) -> Appointment:
        """[관리자] 상태 전이표에 따라 예약 상태를 변경하고 소유자에게 알립니다."""
        appointment = self.get_appointment(appointment_id)
        previous = appointment.status
        appointment.transition_to(target, session.role)

        self.appointments_ref.document(appointment_id).update({'status': target.value})
        logging.info(f"Appointment {appointment_id} status {previous.value} -> {target.value} by {session.user_id}")

        self.notification_service.create_notification(
            appointment.user_id, session.user_id, STATUS_NOTIFICATIONS[target],
            appointment_id, self._summary(appointment)
        )
        return appointment

    @staticmethod
    def _summary(appointment: Appointment, pet_name: Optional[str] = None, service_name: Optional[str] = None) -> str:
        when = f"{DateTimeUtils.to_date_string(appointment.scheduled_date)} {appointment.scheduled_time}"
        if pet_name and service_name:
            return f"{pet_name} - {service_name} ({when})"
        return when
