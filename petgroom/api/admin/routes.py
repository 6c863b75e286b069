# petgroom/api/admin/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from petgroom.core.security import admin_required, current_session
from petgroom.models.appointment import AppointmentStatus, InvalidStatusTransition, AppointmentLockedError
from petgroom.api.appointments.schemas import AppointmentResponseSchema
from .schemas import (
    AgendaQuerySchema, StatusChangeSchema, AgendaResponseSchema,
    DashboardResponseSchema, FinancialStatsSchema,
)

admin_bp = Blueprint('admin_bp', __name__)


@admin_bp.route('/agenda', methods=['GET'])
@admin_required
def get_agenda():
    """
    [관리자] 전체 예약 아젠다.
    ?date=YYYY-MM-DD (선택), ?status=ALL|PENDING|CONFIRMED
    """
    admin_service = current_app.services['admin']
    try:
        query = AgendaQuerySchema().load(request.args)
        agenda = admin_service.get_agenda(query['date'], query['status'])
        return jsonify(AgendaResponseSchema().dump(agenda)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Agenda API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "예약 목록 조회 중 오류가 발생했습니다."}), 500


@admin_bp.route('/appointments/<string:appointment_id>/status', methods=['PATCH'])
@admin_required
def change_appointment_status(appointment_id: str):
    """[관리자] 예약 상태 변경 (승인, 거절, 완료)."""
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        data = StatusChangeSchema().load(request.get_json())
        appointment = appointment_service.change_status(session, appointment_id, AppointmentStatus(data['status']))
        return jsonify(AppointmentResponseSchema().dump(appointment)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "APPOINTMENT_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except InvalidStatusTransition as e:
        return jsonify({"error_code": "INVALID_STATUS_TRANSITION", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"예약 상태 변경 중 오류 발생 (appointment_id: {appointment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "STATUS_UPDATE_FAILED", "message": "예약 상태 변경 중 오류가 발생했습니다."}), 500


@admin_bp.route('/appointments/<string:appointment_id>', methods=['DELETE'])
@admin_required
def delete_appointment(appointment_id: str):
    session = current_session()
    appointment_service = current_app.services['appointments']
    try:
        appointment_service.delete_appointment(session, appointment_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "APPOINTMENT_NOT_FOUND", "message": str(e)}), 404
    except AppointmentLockedError as e:
        return jsonify({"error_code": "APPOINTMENT_LOCKED", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"관리자 예약 삭제 중 오류 발생 (appointment_id: {appointment_id}): {e}", exc_info=True)
        return jsonify({"error_code": "APPOINTMENT_DELETE_FAILED", "message": "예약 삭제 중 오류가 발생했습니다."}), 500


@admin_bp.route('/dashboard', methods=['GET'])
@admin_required
def get_dashboard():
    """[관리자] 오늘 예약 수, 승인 대기 수, 오늘 매출과 다가오는 예약 5건."""
    admin_service = current_app.services['admin']
    try:
        dashboard = admin_service.get_dashboard()
        return jsonify(DashboardResponseSchema().dump(dashboard)), 200
    except Exception as e:
        logging.error(f"Dashboard API error: {e}", exc_info=True)
        return jsonify({"error_code": "STATS_FAILED", "message": "통계 조회 중 오류가 발생했습니다."}), 500


@admin_bp.route('/financial', methods=['GET'])
@admin_required
def get_financial():
    admin_service = current_app.services['admin']
    try:
        stats = admin_service.get_financial()
        return jsonify(FinancialStatsSchema().dump(stats)), 200
    except Exception as e:
        logging.error(f"Financial stats API error: {e}", exc_info=True)
        return jsonify({"error_code": "STATS_FAILED", "message": "재무 통계 조회 중 오류가 발생했습니다."}), 500
