# petgroom/api/catalog/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from petgroom.core.security import admin_required
from petgroom.utils.upload_utils import read_image_upload
from .schemas import ServiceCreateSchema, ServiceUpdateSchema, ServiceResponseSchema

catalog_bp = Blueprint('catalog_bp', __name__)


@catalog_bp.route('/', methods=['GET'])
@jwt_required()
def list_services():
    """예약 가능한 서비스 목록을 이름순으로 조회합니다."""
    catalog_service = current_app.services['catalog']
    try:
        services = catalog_service.get_services()
        return jsonify(ServiceResponseSchema(many=True).dump(services)), 200
    except Exception as e:
        logging.error(f"서비스 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "서비스 목록 조회 중 오류가 발생했습니다."}), 500


@catalog_bp.route('/<string:service_id>', methods=['GET'])
@jwt_required()
def get_service(service_id: str):
    catalog_service = current_app.services['catalog']
    try:
        service = catalog_service.get_service(service_id)
        return jsonify(ServiceResponseSchema().dump(service)), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "SERVICE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"서비스 조회 중 오류 발생 (service_id: {service_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "서비스 조회 중 오류가 발생했습니다."}), 500


@catalog_bp.route('/', methods=['POST'])
@admin_required
def create_service():
    """[관리자] 새 서비스를 등록합니다. 평점은 지정하지 않으면 5.0입니다."""
    catalog_service = current_app.services['catalog']
    try:
        data = ServiceCreateSchema().load(request.get_json())
        service = catalog_service.create_service(data)
        return jsonify(ServiceResponseSchema().dump(service)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"서비스 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "SERVICE_CREATION_FAILED", "message": "서비스 생성 중 오류가 발생했습니다."}), 500


@catalog_bp.route('/<string:service_id>', methods=['PATCH'])
@admin_required
def update_service(service_id: str):
    catalog_service = current_app.services['catalog']
    try:
        data = ServiceUpdateSchema().load(request.get_json())
        service = catalog_service.update_service(service_id, data)
        return jsonify(ServiceResponseSchema().dump(service)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "SERVICE_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"error_code": "INVALID_PAYLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"서비스 수정 중 오류 발생 (service_id: {service_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SERVICE_UPDATE_FAILED", "message": "서비스 수정 중 오류가 발생했습니다."}), 500


@catalog_bp.route('/<string:service_id>', methods=['DELETE'])
@admin_required
def delete_service(service_id: str):
    catalog_service = current_app.services['catalog']
    try:
        catalog_service.delete_service(service_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "SERVICE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"서비스 삭제 중 오류 발생 (service_id: {service_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SERVICE_DELETE_FAILED", "message": "서비스 삭제 중 오류가 발생했습니다."}), 500


@catalog_bp.route('/<string:service_id>/image', methods=['POST'])
@admin_required
def upload_service_image(service_id: str):
    """[관리자] 서비스 대표 이미지를 업로드합니다. (multipart/form-data, 필드명 'file')"""
    catalog_service = current_app.services['catalog']
    try:
        data, filename, content_type = read_image_upload(request)
        service = catalog_service.update_service_image(service_id, data, filename, content_type)
        return jsonify(ServiceResponseSchema().dump(service)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "SERVICE_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"error_code": "INVALID_UPLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"서비스 이미지 업로드 중 오류 발생 (service_id: {service_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPLOAD_FAILED", "message": "이미지 업로드 중 오류가 발생했습니다."}), 500
