# petgroom/core/security.py
"""
요청 단위 세션 컨텍스트와 관리자 권한 검사.

로그인 시 발급된 JWT의 identity(user_id)와 'role' 클레임으로부터
SessionContext를 만들어 서비스 호출에 명시적으로 전달합니다.
로그아웃 시 토큰이 blocklist에 등록되면 해당 세션은 더 이상 만들어지지 않습니다.
"""
from dataclasses import dataclass
from functools import wraps

from flask import jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity, get_jwt

from petgroom.models.profile import UserRole

ROLE_CLAIM = "role"


@dataclass(frozen=True)
class SessionContext:
    """현재 요청을 보낸 사용자(user_id)와 역할(role)."""
    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def role_claims(role: UserRole) -> dict:
    """토큰 발급 시 함께 담을 추가 클레임."""
    return {ROLE_CLAIM: role.value}


def current_session() -> SessionContext:
    """@jwt_required()로 검증된 요청에서 SessionContext를 생성합니다."""
    claims = get_jwt()
    try:
        role = UserRole(claims.get(ROLE_CLAIM, UserRole.CLIENT.value))
    except ValueError:
        role = UserRole.CLIENT
    return SessionContext(user_id=get_jwt_identity(), role=role)


def admin_required(f):
    """관리자(ADMIN) 역할의 Access Token만 허용하는 데코레이터."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        verify_jwt_in_request()
        if not current_session().is_admin:
            return jsonify({"error_code": "FORBIDDEN", "message": "관리자만 접근할 수 있습니다."}), 403
        return f(*args, **kwargs)

    return decorated_function
