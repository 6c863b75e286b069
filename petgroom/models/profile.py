# petgroom/models/profile.py
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from petgroom.utils.datetime_utils import DateTimeUtils


class UserRole(Enum):
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


@dataclass
class Profile:
    """
    Firestore 'profiles' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID는 Firebase Auth uid(user_id)와 동일하며, 사용자당 하나만 존재합니다.
    """
    user_id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.CLIENT
    address: Optional[str] = None
    neighborhood: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Firestore 문서 딕셔너리로부터 Profile을 생성합니다. 알 수 없는 role은 CLIENT로 취급합니다."""
        processed = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}

        role = processed.get('role')
        if not isinstance(role, UserRole):
            try:
                processed['role'] = UserRole(role) if role else UserRole.CLIENT
            except ValueError:
                logging.warning(f"Invalid role '{role}' for profile {processed.get('user_id')}. Defaulting to CLIENT.")
                processed['role'] = UserRole.CLIENT

        processed['created_at'] = DateTimeUtils.from_firestore_timestamp(processed.get('created_at'))
        return cls(**processed)

    def to_dict(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))
