# petgroom/api/profiles/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from petgroom.core.security import current_session
from petgroom.utils.upload_utils import read_image_upload
from .schemas import ProfileUpdateSchema, ProfileResponseSchema

profiles_bp = Blueprint('profiles_bp', __name__)


@profiles_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """내 프로필을 조회합니다. 아직 프로필이 없으면 null을 반환합니다."""
    session = current_session()
    profile_service = current_app.services['profiles']
    try:
        profile = profile_service.get_profile(session.user_id)
        if profile is None:
            return jsonify(None), 200
        return jsonify(ProfileResponseSchema().dump(profile)), 200
    except Exception as e:
        logging.error(f"프로필 조회 중 오류 발생 (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500


@profiles_bp.route('/me', methods=['PUT'])
@jwt_required()
def upsert_my_profile():
    """내 프로필 정보(이름, 연락처, 주소, 동네)를 저장합니다."""
    session = current_session()
    profile_service = current_app.services['profiles']
    try:
        update_data = ProfileUpdateSchema().load(request.get_json())
        profile = profile_service.upsert_profile(session.user_id, update_data)
        return jsonify(ProfileResponseSchema().dump(profile)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "INVALID_PAYLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"프로필 저장 중 오류 발생 (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_SAVE_FAILED", "message": "프로필 저장 중 오류가 발생했습니다."}), 500


@profiles_bp.route('/me/avatar', methods=['POST'])
@jwt_required()
def upload_my_avatar():
    """
    아바타 이미지를 업로드합니다. (multipart/form-data, 필드명 'file')
    같은 사용자의 기존 아바타는 덮어씁니다.
    """
    session = current_session()
    profile_service = current_app.services['profiles']
    try:
        data, filename, content_type = read_image_upload(request)
        profile = profile_service.update_avatar(session.user_id, data, filename, content_type)
        return jsonify(ProfileResponseSchema().dump(profile)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "INVALID_UPLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"아바타 업로드 중 오류 발생 (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPLOAD_FAILED", "message": "아바타 업로드 중 오류가 발생했습니다."}), 500
