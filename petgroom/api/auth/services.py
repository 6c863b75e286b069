# petgroom/api/auth/services.py
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Tuple, Optional

from firebase_admin import firestore, auth as firebase_auth
from flask import Flask

from petgroom.models.profile import Profile
from petgroom.utils.datetime_utils import DateTimeUtils


class AuthService:
    """
    Firebase ID 토큰 검증, 최초 로그인 시 프로필 생성, 토큰 무효화(blocklist)를 담당합니다.
    세션(JWT) 발급 자체는 라우트에서 flask_jwt_extended로 처리합니다.
    """
    def __init__(self):
        self.db = None
        self.revoked_tokens_ref = None
        self.profile_service = None
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask, profile_service):
        """앱 초기화 과정에서 호출되어 DB 연결 및 앱 컨텍스트를 설정합니다."""
        self.db = firestore.client()
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.profile_service = profile_service
        self.app = app

    def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        """
        클라이언트가 Firebase Authentication으로 로그인한 뒤 받은 ID 토큰을 검증합니다.

        :raises PermissionError: 토큰이 유효하지 않거나 만료된 경우
        """
        try:
            return firebase_auth.verify_id_token(id_token)
        except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError) as e:
            logging.warning(f"Firebase ID 토큰 검증 실패: {e}")
            raise PermissionError("유효하지 않은 인증 토큰입니다.")

    def sign_in(self, id_token: str) -> Tuple[Profile, bool]:
        """ID 토큰을 검증하고 (프로필, 신규 여부)를 반환합니다."""
        claims = self.verify_id_token(id_token)
        user_id = claims.get('uid') or claims.get('sub')
        if not user_id:
            raise PermissionError("토큰에 사용자 식별자가 없습니다.")
        profile, is_new_user = self.profile_service.get_or_create_profile(user_id, claims)
        logging.info(f"User {user_id} signed in (new: {is_new_user}, role: {profile.role.value})")
        return profile, is_new_user

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        try:
            token_data = DateTimeUtils.for_firestore({
                'revoked_at': DateTimeUtils.now(),
                'expires_at': expires
            })
            self.revoked_tokens_ref.document(jti).set(token_data)
        except Exception as e:
            logging.error(f"Blocklist 토큰 추가 실패 (jti: {jti}): {e}")

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        doc = self.revoked_tokens_ref.document(jti).get()
        return doc.exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다. (세션 종료)"""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")


auth_service = AuthService()
