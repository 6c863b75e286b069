# petgroom/models/admin_setting.py
import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any

from petgroom.utils.datetime_utils import DateTimeUtils


class SettingCategory(Enum):
    """'admin_settings' 컬렉션의 문서 ID로 사용되는 설정 카테고리"""
    NOTIFICATIONS = "notifications"
    BUSINESS_HOURS = "business_hours"
    PAYMENT_METHODS = "payment_methods"


DEFAULT_SETTINGS: Dict[SettingCategory, Dict[str, Any]] = {
    SettingCategory.NOTIFICATIONS: {
        "enabled": True,
        "new_appointment": True,
        "cancel": True,
        "reminder": True,
    },
    SettingCategory.BUSINESS_HOURS: {
        "mon": {"open": "08:00", "close": "18:00", "enabled": True},
        "tue": {"open": "08:00", "close": "18:00", "enabled": True},
        "wed": {"open": "08:00", "close": "18:00", "enabled": True},
        "thu": {"open": "08:00", "close": "18:00", "enabled": True},
        "fri": {"open": "08:00", "close": "18:00", "enabled": True},
        "sat": {"open": "08:00", "close": "12:00", "enabled": True},
        "sun": {"open": "08:00", "close": "12:00", "enabled": False},
    },
    SettingCategory.PAYMENT_METHODS: {
        "pix": True,
        "cash": True,
        "credit_card": True,
        "debit_card": True,
    },
}


def default_value(category: SettingCategory) -> Dict[str, Any]:
    return copy.deepcopy(DEFAULT_SETTINGS[category])


@dataclass
class AdminSetting:
    """
    Firestore 'admin_settings' 컬렉션 문서 구조.
    카테고리별로 하나의 문서만 존재하며 upsert로 덮어씁니다.
    """
    category: SettingCategory
    value: Dict[str, Any]
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore({
            "category": self.category.value,
            "value": self.value,
            "updated_at": self.updated_at,
        })
