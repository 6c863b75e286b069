# petgroom/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, List, Dict, Any

from firebase_admin import firestore

from petgroom.models.notification import Notification, NotificationType
from petgroom.models.profile import UserRole
from petgroom.utils.datetime_utils import DateTimeUtils


class NotificationService:
    """
    예약 관련 인앱 알림을 담당하는 공용 서비스 클래스.
    알림 생성 실패는 로그만 남기고, 알림을 유발한 작업(예약 생성/상태 변경 등)을 중단시키지 않습니다.
    """
    def __init__(self, settings_service=None):
        self.db = firestore.client()
        self.notifications_ref = self.db.collection('notifications')
        self.profiles_ref = self.db.collection('profiles')
        self.settings_service = settings_service

    def create_notification(self, recipient_id: str, sender_id: str, n_type: NotificationType, target_id: str, target_summary: Optional[str] = None):
        """
        알림을 생성하여 Firestore에 저장합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.

        :param recipient_id: 알림을 받을 사용자 ID
        :param sender_id: 알림을 유발한 사용자 ID
        :param n_type: 알림 유형 (NotificationType Enum)
        :param target_id: 알림 대상 예약 ID
        :param target_summary: 알림에 표시될 요약 텍스트
        """
        if not recipient_id or recipient_id == sender_id:
            return

        try:
            notification = Notification(
                notification_id=str(uuid.uuid4()),
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=n_type,
                target_id=target_id,
                target_summary=target_summary
            )
            notification_dict = DateTimeUtils.for_firestore(asdict(notification))
            self.notifications_ref.document(notification.notification_id).set(notification_dict)
            logging.info(f"{n_type.value} 알림 생성 완료: {sender_id} -> {recipient_id}")
        except Exception as e:
            logging.error(f"알림 생성 중 오류 발생: {e}", exc_info=True)

    def notify_admins(self, sender_id: str, n_type: NotificationType, target_id: str, target_summary: Optional[str], setting_key: str):
        """
        관리자 알림 설정('notifications' 카테고리)이 허용하는 경우 모든 관리자에게 알림을 보냅니다.

        :param setting_key: 확인할 세부 설정 키 (예: 'new_appointment', 'cancel')
        """
        try:
            if self.settings_service is not None:
                prefs = self.settings_service.get_notification_preferences()
                if not prefs.get('enabled', True) or not prefs.get(setting_key, True):
                    logging.info(f"관리자 알림 비활성화로 {n_type.value} 알림을 건너뜁니다.")
                    return

            admin_docs = self.profiles_ref.where('role', '==', UserRole.ADMIN.value).stream()
            admin_ids = [doc.to_dict().get('user_id') for doc in admin_docs]
        except Exception as e:
            logging.error(f"관리자 알림 대상 조회 실패: {e}", exc_info=True)
            return

        for admin_id in admin_ids:
            self.create_notification(admin_id, sender_id, n_type, target_id, target_summary)

    def get_notifications(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """사용자의 최근 알림 목록을 최신순으로 조회합니다."""
        query = (self.notifications_ref
                 .where('recipient_id', '==', user_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING)
                 .limit(limit))
        return [doc.to_dict() for doc in query.stream()]

    def mark_as_read(self, notification_id: str, user_id: str) -> None:
        """알림을 읽음 처리합니다. (수신자 본인만 가능)"""
        ref = self.notifications_ref.document(notification_id)
        doc = ref.get()
        if not doc.exists:
            raise FileNotFoundError("알림을 찾을 수 없습니다.")
        if doc.to_dict().get('recipient_id') != user_id:
            raise PermissionError("알림을 수정할 권한이 없습니다.")
        ref.update({'is_read': True})
