# petgroom/conftest.py
"""
테스트 공용 픽스처.

Firestore/Storage/Firebase Auth 호출은 메모리 기반 대역(FakeFirestore, FakeBucket)으로 대체합니다.
"""
import copy
from datetime import timedelta

import pytest
import firebase_admin
from firebase_admin import firestore, storage, auth as firebase_auth
from flask_jwt_extended import create_access_token, create_refresh_token
from google.api_core.exceptions import NotFound

from petgroom import create_app
from petgroom.core.security import role_claims
from petgroom.models.profile import Profile, UserRole
from petgroom.models.pet import Pet
from petgroom.models.service import Service
from petgroom.utils.datetime_utils import DateTimeUtils

_OPERATORS = {
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
    '<': lambda a, b: a < b,
    '<=': lambda a, b: a <= b,
    '>': lambda a, b: a > b,
    '>=': lambda a, b: a >= b,
    'in': lambda a, b: a in b,
}


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._store.get(self.id))

    def set(self, data):
        self._store[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._store:
            raise NotFound(f"No document to update: {self.id}")
        self._store[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._store.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, filters=(), orders=(), limit_count=None):
        self._store = store
        self._filters = list(filters)
        self._orders = list(orders)
        self._limit = limit_count

    def where(self, field_path, op_string, value):
        return FakeQuery(self._store, self._filters + [(field_path, op_string, value)], self._orders, self._limit)

    def order_by(self, field_path, direction="ASCENDING"):
        return FakeQuery(self._store, self._filters, self._orders + [(field_path, direction)], self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._filters, self._orders, count)

    def _matches(self, data):
        for field_path, op_string, value in self._filters:
            # 필드가 없는 문서는 Firestore와 마찬가지로 결과에서 제외
            if field_path not in data:
                return False
            if not _OPERATORS[op_string](data[field_path], value):
                return False
        return True

    def stream(self):
        docs = [(doc_id, data) for doc_id, data in self._store.items() if self._matches(data)]
        for field_path, direction in reversed(self._orders):
            docs.sort(key=lambda item: item[1].get(field_path), reverse=(direction == "DESCENDING"))
        if self._limit is not None:
            docs = docs[:self._limit]
        return iter([FakeSnapshot(doc_id, data) for doc_id, data in docs])


class FakeCollection(FakeQuery):
    def __init__(self, store):
        super().__init__(store)

    def document(self, doc_id):
        return FakeDocumentRef(self._store, doc_id)


class FakeFirestore:
    """firestore.client()를 대신하는 메모리 저장소. collections[name][doc_id] = dict"""

    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))

    def docs(self, name):
        return self.collections.get(name, {})


class FakeBlob:
    def __init__(self, bucket, path):
        self.bucket = bucket
        self.name = path

    def upload_from_string(self, data, content_type=None):
        self.bucket.files[self.name] = (data, content_type)

    def make_public(self):
        self.bucket.public.add(self.name)

    @property
    def public_url(self):
        return f"https://storage.googleapis.com/{self.bucket.name}/{self.name}"


class FakeBucket:
    def __init__(self, name):
        self.name = name
        self.files = {}
        self.public = set()

    def blob(self, path):
        return FakeBlob(self, path)


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeFirestore()
    monkeypatch.setattr(firestore, 'client', lambda *args, **kwargs: db)
    return db


@pytest.fixture
def fake_bucket(monkeypatch):
    bucket = FakeBucket('petgroom-test.appspot.com')
    monkeypatch.setattr(storage, 'bucket', lambda *args, **kwargs: bucket)
    return bucket


@pytest.fixture
def id_tokens(monkeypatch):
    """
    Firebase ID 토큰 검증 대역.
    id_tokens['token-string'] = {'uid': ..., 'name': ...} 로 등록하면 해당 클레임을 반환합니다.
    """
    registry = {}

    def verify_id_token(id_token, *args, **kwargs):
        if id_token not in registry:
            raise ValueError("Invalid ID token")
        return registry[id_token]

    monkeypatch.setattr(firebase_auth, 'verify_id_token', verify_id_token)
    return registry


@pytest.fixture
def app(monkeypatch, fake_db, fake_bucket, id_tokens):
    monkeypatch.setattr(firebase_admin, '_apps', {'[DEFAULT]': object()})
    application = create_app('testing')
    yield application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """역할 클레임이 담긴 Access Token 헤더를 만듭니다."""
    def _make(user_id, role=UserRole.CLIENT, refresh=False):
        with app.app_context():
            if refresh:
                token = create_refresh_token(identity=user_id, additional_claims=role_claims(role))
            else:
                token = create_access_token(identity=user_id, additional_claims=role_claims(role))
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def booking_day():
    """내일 이후 첫 평일 (기본 영업시간에서 모든 기본 시간대 예약 가능)"""
    day = DateTimeUtils.today() + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


@pytest.fixture
def seed(fake_db):
    """테스트 데이터 저장 헬퍼 (모델의 to_dict 형식 그대로 저장)."""
    class Seeder:
        def profile(self, user_id, role=UserRole.CLIENT, full_name=None):
            profile = Profile(user_id=user_id, full_name=full_name or user_id, role=role)
            fake_db.collection('profiles').document(user_id).set(profile.to_dict())
            return profile

        def pet(self, pet_id, user_id, name="Rex"):
            pet = Pet(pet_id=pet_id, user_id=user_id, name=name)
            fake_db.collection('pets').document(pet_id).set(pet.to_dict())
            return pet

        def service(self, service_id, name="Banho", price=60.0):
            service = Service(service_id=service_id, name=name, price=price)
            fake_db.collection('services').document(service_id).set(service.to_dict())
            return service

        def appointment(self, appointment):
            fake_db.collection('appointments').document(appointment.appointment_id).set(appointment.to_dict())
            return appointment

    return Seeder()
