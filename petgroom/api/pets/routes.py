# petgroom/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from petgroom.core.security import current_session
from petgroom.utils.upload_utils import read_image_upload
from .schemas import PetRegistrationSchema, PetUpdateSchema, PetResponseSchema

pets_bp = Blueprint('pets_bp', __name__)


@pets_bp.route('/', methods=['GET'])
@jwt_required()
def list_my_pets():
    """내 반려동물 목록을 최근 등록순으로 조회합니다."""
    session = current_session()
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.get_pets(session.user_id)
        return jsonify(PetResponseSchema(many=True).dump(pets)), 200
    except Exception as e:
        logging.error(f"Pet list API error (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 목록 조회 중 오류가 발생했습니다."}), 500


@pets_bp.route('/', methods=['POST'])
@jwt_required()
def register_pet():
    """반려동물 등록 API."""
    session = current_session()
    pet_service = current_app.services['pets']
    try:
        validated_data = PetRegistrationSchema().load(request.get_json())
        new_pet = pet_service.register_pet(session.user_id, validated_data)
        return jsonify(PetResponseSchema().dump(new_pet)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Pet registration API error: {e}", exc_info=True)
        return jsonify({"error_code": "PET_REGISTRATION_FAILED", "message": "반려동물 등록 중 오류가 발생했습니다."}), 500


@pets_bp.route('/<string:pet_id>', methods=['GET'])
@jwt_required()
def get_pet(pet_id: str):
    """[소유자 전용] 특정 반려동물 정보를 조회합니다."""
    session = current_session()
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.get_pet_profile(pet_id, session.user_id)
        return jsonify(PetResponseSchema().dump(pet)), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Get pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 조회 중 오류가 발생했습니다."}), 500


@pets_bp.route('/<string:pet_id>', methods=['PATCH'])
@jwt_required()
def update_pet(pet_id: str):
    """[소유자 전용] 반려동물 정보를 수정합니다 (부분 업데이트)."""
    session = current_session()
    pet_service = current_app.services['pets']
    try:
        update_data = PetUpdateSchema().load(request.get_json())
        updated_pet = pet_service.update_pet(pet_id, session.user_id, update_data)
        return jsonify(PetResponseSchema().dump(updated_pet)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except (PermissionError, ValueError) as e:
        return jsonify({"error_code": "UPDATE_FAILED_FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Update pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "반려동물 수정 중 오류가 발생했습니다."}), 500


@pets_bp.route('/<string:pet_id>', methods=['DELETE'])
@jwt_required()
def delete_pet(pet_id: str):
    """[소유자 전용] 반려동물을 삭제합니다."""
    session = current_session()
    pet_service = current_app.services['pets']
    try:
        pet_service.delete_pet(pet_id, session.user_id)
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "DELETE_FAILED", "message": "반려동물 삭제 중 오류가 발생했습니다."}), 500


@pets_bp.route('/<string:pet_id>/image', methods=['POST'])
@jwt_required()
def upload_pet_image(pet_id: str):
    """반려동물 이미지를 업로드합니다. (multipart/form-data, 필드명 'file')"""
    session = current_session()
    pet_service = current_app.services['pets']
    try:
        data, filename, content_type = read_image_upload(request)
        pet = pet_service.update_pet_image(pet_id, session.user_id, data, filename, content_type)
        return jsonify(PetResponseSchema().dump(pet)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "INVALID_UPLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Pet image upload API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPLOAD_FAILED", "message": "이미지 업로드 중 오류가 발생했습니다."}), 500
