# petgroom/api/auth/routes.py
import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, create_refresh_token, jwt_required, get_jwt_identity
from marshmallow import ValidationError

from petgroom.core.screens import Navigation, Screen, home_screen, resolve, screens_for
from petgroom.core.security import current_session, role_claims
from petgroom.models.profile import UserRole
from petgroom.api.profiles.schemas import ProfileResponseSchema
from .schemas import SessionRequestSchema, LogoutRequestSchema, NavigationRequestSchema
from .services import auth_service

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/session', methods=['POST'])
def create_session():
    """
    로그인(세션 시작) 엔드포인트.
    Firebase ID 토큰을 검증하고, 최초 로그인이면 CLIENT 프로필을 만든 뒤 토큰을 발급합니다.
    """
    try:
        validated_data = SessionRequestSchema().load(request.get_json())
        profile, is_new_user = auth_service.sign_in(validated_data['id_token'])

        claims = role_claims(profile.role)
        return jsonify({
            "access_token": create_access_token(identity=profile.user_id, additional_claims=claims),
            "refresh_token": create_refresh_token(identity=profile.user_id, additional_claims=claims),
            "user_id": profile.user_id,
            "is_new_user": is_new_user,
            "profile": ProfileResponseSchema().dump(profile),
            "home_screen": home_screen(profile.role).value,
            "screens": [s.value for s in screens_for(profile.role)],
        }), 200
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "INVALID_ID_TOKEN", "message": str(e)}), 401
    except Exception as e:
        logging.error(f"로그인 처리 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부 오류가 발생했습니다."}), 500


@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """
    유효한 Refresh Token으로 새로운 Access Token을 발급합니다.
    역할은 토큰이 아닌 현재 프로필에서 다시 읽습니다. (관리자 지정/해제 반영)
    """
    current_user_id = get_jwt_identity()
    profile = current_app.services['profiles'].get_profile(current_user_id)
    role = profile.role if profile else UserRole.CLIENT
    new_access_token = create_access_token(identity=current_user_id, additional_claims=role_claims(role))
    return jsonify(access_token=new_access_token, home_screen=home_screen(role).value), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃(세션 종료). 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    try:
        data = LogoutRequestSchema().load(request.get_json())

        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 만료된 토큰도 무효화할 수 있도록 만료 검사는 생략합니다.
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(
            decoded_access['jti'], decoded_access['exp'],
            decoded_refresh['jti'], decoded_refresh['exp']
        )
        return jsonify({"message": "로그아웃 되었습니다."}), 200

    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "로그아웃 처리 중 오류가 발생했습니다."}), 500


@auth_bp.route('/navigation', methods=['POST'])
@jwt_required(optional=True)
def resolve_navigation():
    """
    화면 이동 요청을 현재 세션에 맞게 보정합니다.
    로그인하지 않았으면 LOGIN, 역할의 화면 집합 밖이면 역할의 홈 화면으로 바뀝니다.
    """
    try:
        data = NavigationRequestSchema().load(request.get_json())
        session = current_session() if get_jwt_identity() else None
        navigation = resolve(session, Navigation(Screen(data['screen']), data['payload']))
        return jsonify({"screen": navigation.screen.value, "payload": navigation.payload}), 200
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
