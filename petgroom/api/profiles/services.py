# petgroom/api/profiles/services.py
import logging
from typing import Dict, Any, Optional, Tuple

from firebase_admin import firestore

from petgroom.models.profile import Profile, UserRole
from petgroom.services.storage_service import StorageService


class ProfileService:
    """사용자 프로필(이름, 연락처, 주소, 아바타) 관리를 담당하는 서비스."""

    def __init__(self, storage_service: StorageService):
        self.db = firestore.client()
        self.profiles_ref = self.db.collection('profiles')
        self.storage_service = storage_service

    def get_profile(self, user_id: str) -> Optional[Profile]:
        """
        프로필을 조회합니다.
        문서가 없는 것은 정상 상태(아직 프로필 미작성)이므로 예외 없이 None을 반환합니다.
        """
        doc = self.profiles_ref.document(user_id).get()
        if not doc.exists:
            return None
        return Profile.from_dict(doc.to_dict())

    def get_or_create_profile(self, user_id: str, claims: Dict[str, Any]) -> Tuple[Profile, bool]:
        """최초 로그인 시 토큰 정보로 CLIENT 프로필을 생성합니다."""
        profile = self.get_profile(user_id)
        if profile:
            return profile, False

        new_profile = Profile(
            user_id=user_id,
            full_name=claims.get('name'),
            phone=claims.get('phone_number'),
            avatar_url=claims.get('picture'),
            role=UserRole.CLIENT,
        )
        self.profiles_ref.document(user_id).set(new_profile.to_dict())
        logging.info(f"New profile created for user {user_id}")
        return new_profile, True

    def upsert_profile(self, user_id: str, update_data: Dict[str, Any]) -> Profile:
        """
        프로필 필드를 저장합니다 (문서가 없으면 생성).
        role은 이 경로로 변경할 수 없습니다.
        """
        data = {k: v for k, v in update_data.items() if k not in ('role', 'user_id', 'created_at')}
        if not data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")

        profile = self.get_profile(user_id) or Profile(user_id=user_id)
        stored = profile.to_dict()
        stored.update(data)
        self.profiles_ref.document(user_id).set(stored)
        logging.info(f"Profile upserted for {user_id} with fields: {list(data.keys())}")
        return Profile.from_dict(stored)

    def update_avatar(self, user_id: str, data: bytes, filename: str, content_type: str) -> Profile:
        """아바타 이미지를 업로드하고 프로필의 avatar_url을 갱신합니다."""
        avatar_url = self.storage_service.upload_image(
            "avatar", data, filename, content_type, user_id=user_id
        )
        return self.upsert_profile(user_id, {'avatar_url': avatar_url})
