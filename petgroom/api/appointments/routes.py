# petgroom/api/appointments/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from petgroom.core.security import current_session
from petgroom.models.appointment import AppointmentLockedError
from .schemas import (
    AppointmentCreateSchema, AppointmentUpdateSchema, AppointmentResponseSchema,
    AppointmentDetailSchema, AppointmentListQuerySchema, TimeSlotQuerySchema,
)

appointments_bp = Blueprint('appointments_bp', __name__)


@appointments_bp.route('/', methods=['GET'])
@jwt_required()
def list_my_appointments():
    """
    내 예약 목록 조회 API.
    ?view=upcoming (오늘 포함 이후) | history (어제 이전) | modifiable (수정/취소 가능) | all (기본값)
    """
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        query = AppointmentListQuerySchema().load(request.args)
        items = appointment_service.get_user_appointments_detailed(session.user_id, query['view'])
        return jsonify(AppointmentDetailSchema(many=True).dump(items)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"예약 목록 조회 중 오류 발생 (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "예약 목록 조회 중 오류가 발생했습니다."}), 500


@appointments_bp.route('/time-slots', methods=['GET'])
@jwt_required()
def list_time_slots():
    """선택한 날짜에 예약 가능한 기본 시간대 목록."""
    appointment_service = current_app.services['appointments']
    try:
        query = TimeSlotQuerySchema().load(request.args)
        slots = appointment_service.get_time_slots(query['date'])
        return jsonify({"date": query['date'].isoformat(), "time_slots": slots}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Time slot API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "예약 시간대 조회 중 오류가 발생했습니다."}), 500


@appointments_bp.route('/', methods=['POST'])
@jwt_required()
def create_appointment():
    """예약 생성 API. 본인 반려동물만 예약할 수 있으며 상태는 PENDING으로 시작합니다."""
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        validated_data = AppointmentCreateSchema().load(request.get_json())
        appointment = appointment_service.create_appointment(session, validated_data)
        return jsonify(AppointmentResponseSchema().dump(appointment)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN_OR_NOT_FOUND", "message": str(e)}), 403
    except FileNotFoundError as e:
        return jsonify({"error_code": "SERVICE_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"error_code": "INVALID_SCHEDULE", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Appointment creation API error (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "APPOINTMENT_CREATION_FAILED", "message": "예약 생성 중 오류가 발생했습니다."}), 500


@appointments_bp.route('/<string:appointment_id>', methods=['GET'])
@jwt_required()
def get_appointment(appointment_id: str):
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        appointment = appointment_service.get_appointment(appointment_id)
        if not session.is_admin and appointment.user_id != session.user_id:
            return jsonify({"error_code": "FORBIDDEN", "message": "해당 예약에 대한 권한이 없습니다."}), 403
        return jsonify(AppointmentResponseSchema().dump(appointment)), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "APPOINTMENT_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"예약 조회 중 오류 발생 (appointment_id: {appointment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "예약 조회 중 오류가 발생했습니다."}), 500


@appointments_bp.route('/<string:appointment_id>', methods=['PATCH'])
@jwt_required()
def update_appointment(appointment_id: str):
    """[소유자/관리자] 예약 정보 수정. 완료/취소된 예약은 수정할 수 없습니다."""
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        update_data = AppointmentUpdateSchema().load(request.get_json())
        appointment = appointment_service.update_appointment(session, appointment_id, update_data)
        return jsonify(AppointmentResponseSchema().dump(appointment)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except AppointmentLockedError as e:
        return jsonify({"error_code": "APPOINTMENT_LOCKED", "message": str(e)}), 409
    except ValueError as e:
        return jsonify({"error_code": "INVALID_PAYLOAD", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"예약 수정 중 오류 발생 (appointment_id: {appointment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "APPOINTMENT_UPDATE_FAILED", "message": "예약 수정 중 오류가 발생했습니다."}), 500


@appointments_bp.route('/<string:appointment_id>', methods=['DELETE'])
@jwt_required()
def delete_appointment(appointment_id: str):
    """[소유자/관리자] 예약 취소(삭제). 완료/취소된 예약은 삭제할 수 없습니다."""
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        appointment_service.delete_appointment(session, appointment_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "APPOINTMENT_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except AppointmentLockedError as e:
        return jsonify({"error_code": "APPOINTMENT_LOCKED", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"예약 삭제 중 오류 발생 (appointment_id: {appointment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "APPOINTMENT_DELETE_FAILED", "message": "예약 삭제 중 오류가 발생했습니다."}), 500
