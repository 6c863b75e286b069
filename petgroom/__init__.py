# petgroom/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from petgroom.core.config import config_by_name

# - API 블루프린트
from petgroom.api.auth.routes import auth_bp
from petgroom.api.profiles.routes import profiles_bp
from petgroom.api.pets.routes import pets_bp
from petgroom.api.catalog.routes import catalog_bp
from petgroom.api.appointments.routes import appointments_bp
from petgroom.api.admin.routes import admin_bp
from petgroom.api.settings.routes import settings_bp
from petgroom.api.notifications.routes import notifications_bp

# - 서비스 모듈
from petgroom.services.storage_service import StorageService
from petgroom.services.notification_service import NotificationService
from petgroom.api.auth.services import auth_service
from petgroom.api.settings.services import AdminSettingService
from petgroom.api.profiles.services import ProfileService
from petgroom.api.pets.services import PetService
from petgroom.api.catalog.services import CatalogService
from petgroom.api.appointments.services import AppointmentService
from petgroom.api.admin.services import AdminService


def create_app(config_name=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' | 'testing' | 'production'. 없으면 FLASK_ENV 사용
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt_manager = JWTManager(app)

    if not firebase_admin._apps:
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred, {
            'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
        })

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스 먼저 생성
    try:
        storage_instance = StorageService()
        storage_instance.init_app(app)
        app.services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    app.services['settings'] = AdminSettingService()
    app.services['notifications'] = NotificationService(settings_service=app.services['settings'])

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['profiles'] = ProfileService(storage_service=app.services['storage'])
    app.services['pets'] = PetService(storage_service=app.services['storage'])
    app.services['catalog'] = CatalogService(storage_service=app.services['storage'])
    app.services['appointments'] = AppointmentService(
        pet_service=app.services['pets'],
        catalog_service=app.services['catalog'],
        notification_service=app.services['notifications'],
        settings_service=app.services['settings'],
        time_slots=app.config['BOOKING_TIME_SLOTS'],
    )
    app.services['admin'] = AdminService(
        appointment_service=app.services['appointments'],
        catalog_service=app.services['catalog'],
    )
    logging.info("Domain services initialized successfully")

    # - 인증 서비스 (앱 컨텍스트 필요)
    auth_service.init_app(app, profile_service=app.services['profiles'])

    @jwt_manager.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return auth_service.is_token_revoked(jwt_payload)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(profiles_bp, url_prefix='/api/profiles')
    app.register_blueprint(pets_bp, url_prefix='/api/pets')
    app.register_blueprint(catalog_bp, url_prefix='/api/catalog')
    app.register_blueprint(appointments_bp, url_prefix='/api/appointments')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
    app.register_blueprint(settings_bp, url_prefix='/api/admin/settings')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 404/405/413 등은 원래 상태 코드를 유지합니다.
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
