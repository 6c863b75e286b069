# petgroom/api/settings/services.py
import logging
from typing import Dict, Any

from firebase_admin import firestore

from petgroom.models.admin_setting import AdminSetting, SettingCategory, default_value

logger = logging.getLogger(__name__)


class AdminSettingService:
    """
    영업 설정(알림, 영업시간, 결제수단)을 관리하는 서비스 클래스.
    카테고리마다 'admin_settings' 컬렉션에 문서 하나를 두고 upsert합니다.
    """

    def __init__(self):
        self.db = firestore.client()
        self.settings_ref = self.db.collection('admin_settings')

    def get_setting(self, category: SettingCategory) -> Dict[str, Any]:
        """
        카테고리 설정값을 조회합니다.
        저장된 문서가 없으면 오류가 아니라 기본값을 반환합니다.
        """
        doc = self.settings_ref.document(category.value).get()
        if not doc.exists:
            logger.info(f"설정 '{category.value}'이(가) 없어 기본값을 사용합니다.")
            return default_value(category)

        value = default_value(category)
        value.update(doc.to_dict().get('value') or {})
        return value

    def get_all_settings(self) -> Dict[str, Dict[str, Any]]:
        return {category.value: self.get_setting(category) for category in SettingCategory}

    def upsert_setting(self, category: SettingCategory, value: Dict[str, Any]) -> Dict[str, Any]:
        """카테고리 설정값을 저장(덮어쓰기)합니다."""
        setting = AdminSetting(category=category, value=value)
        try:
            self.settings_ref.document(category.value).set(setting.to_dict())
        except Exception as e:
            logger.error(f"설정 저장 실패 ({category.value}): {e}", exc_info=True)
            raise
        logger.info(f"Admin setting '{category.value}' saved")
        return value

    def get_notification_preferences(self) -> Dict[str, Any]:
        return self.get_setting(SettingCategory.NOTIFICATIONS)

    def get_business_hours(self) -> Dict[str, Any]:
        return self.get_setting(SettingCategory.BUSINESS_HOURS)
