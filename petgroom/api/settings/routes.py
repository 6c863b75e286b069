# petgroom/api/settings/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from petgroom.core.security import admin_required
from petgroom.models.admin_setting import SettingCategory
from .schemas import SCHEMA_BY_CATEGORY

settings_bp = Blueprint('settings_bp', __name__)


def _parse_category(category: str):
    try:
        return SettingCategory(category)
    except ValueError:
        return None


@settings_bp.route('/', methods=['GET'])
@admin_required
def get_all_settings():
    """모든 설정 카테고리를 기본값을 적용하여 조회합니다."""
    settings_service = current_app.services['settings']
    try:
        return jsonify(settings_service.get_all_settings()), 200
    except Exception as e:
        logging.error(f"설정 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "설정을 불러오는 중 오류가 발생했습니다."}), 500


@settings_bp.route('/<string:category>', methods=['GET'])
@admin_required
def get_setting(category: str):
    settings_service = current_app.services['settings']
    setting_category = _parse_category(category)
    if not setting_category:
        return jsonify({"error_code": "UNKNOWN_CATEGORY", "message": f"'{category}'은(는) 알 수 없는 설정입니다."}), 404
    try:
        return jsonify(settings_service.get_setting(setting_category)), 200
    except Exception as e:
        logging.error(f"설정 조회 중 오류 발생 ({category}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "설정을 불러오는 중 오류가 발생했습니다."}), 500


@settings_bp.route('/<string:category>', methods=['PUT'])
@admin_required
def upsert_setting(category: str):
    """카테고리 설정을 저장합니다. 요청 본문 전체가 새 값이 됩니다."""
    settings_service = current_app.services['settings']
    setting_category = _parse_category(category)
    if not setting_category:
        return jsonify({"error_code": "UNKNOWN_CATEGORY", "message": f"'{category}'은(는) 알 수 없는 설정입니다."}), 404
    try:
        value = SCHEMA_BY_CATEGORY[setting_category]().load(request.get_json())
        saved = settings_service.upsert_setting(setting_category, value)
        return jsonify(saved), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"설정 저장 중 오류 발생 ({category}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_FAILED", "message": "설정 저장 중 오류가 발생했습니다."}), 500
