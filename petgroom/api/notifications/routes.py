# petgroom/api/notifications/routes.py
import logging
from flask import Blueprint, jsonify, current_app, request
from flask_jwt_extended import jwt_required

from petgroom.core.security import current_session

notifications_bp = Blueprint('notifications_bp', __name__)


@notifications_bp.route('/', methods=['GET'])
@jwt_required()
def list_notifications():
    """내 알림 목록 (최신순). ?limit= 로 개수 지정 (1 ~ 100)."""
    session = current_session()
    notification_service = current_app.services['notifications']
    limit = max(1, min(request.args.get('limit', 50, type=int), 100))
    try:
        notifications = notification_service.get_notifications(session.user_id, limit=limit)
        return jsonify(notifications), 200
    except Exception as e:
        logging.error(f"알림 목록 조회 중 오류 발생 (user_id: {session.user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "알림 목록 조회 중 오류가 발생했습니다."}), 500


@notifications_bp.route('/<string:notification_id>/read', methods=['PATCH'])
@jwt_required()
def mark_notification_read(notification_id: str):
    session = current_session()
    notification_service = current_app.services['notifications']
    try:
        notification_service.mark_as_read(notification_id, session.user_id)
        return jsonify({"message": "알림을 읽음 처리했습니다."}), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"알림 읽음 처리 중 오류 발생 (notification_id: {notification_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "알림 읽음 처리 중 오류가 발생했습니다."}), 500
