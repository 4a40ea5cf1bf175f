# conftest.py
"""
pytest 공용 픽스처

- FakeFirestore: 테스트용 인메모리 Firestore 대역 (ArrayUnion/ArrayRemove, batch, get_all, where/order_by 지원)
- storage_bucket: Firebase Storage 버킷을 대신하는 MagicMock
- app / client: create_app('testing', db=..., bucket=...)으로 만든 Flask 앱과 테스트 클라이언트
"""

import copy
import io
import uuid
from dataclasses import asdict
from unittest.mock import MagicMock

import pytest
from flask_jwt_extended import create_access_token
from firebase_admin import firestore
from google.api_core.exceptions import NotFound
from PIL import Image

from postgram import create_app
from postgram.models.user import User


# =====================================================================================
# 인메모리 Firestore 대역
# =====================================================================================

def _apply_update(existing: dict, data: dict) -> dict:
    """update() 데이터를 기존 문서에 반영합니다. ArrayUnion/ArrayRemove 센티넬을 해석합니다."""
    updated = copy.deepcopy(existing)
    for key, value in data.items():
        if isinstance(value, firestore.ArrayUnion):
            current = list(updated.get(key, []))
            for item in value.values:
                if item not in current:
                    current.append(item)
            updated[key] = current
        elif isinstance(value, firestore.ArrayRemove):
            updated[key] = [item for item in updated.get(key, []) if item not in value.values]
        else:
            updated[key] = copy.deepcopy(value)
    return updated


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.store.setdefault(self._collection_name, {})

    def get(self, transaction=None):
        return FakeSnapshot(self, copy.deepcopy(self._docs.get(self.id)))

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            self._docs[self.id] = _apply_update(self._docs[self.id], data)
        else:
            self._docs[self.id] = _apply_update({}, data)
        self._db.write_count += 1

    def update(self, data):
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self._collection_name}/{self.id}")
        self._docs[self.id] = _apply_update(self._docs[self.id], data)
        self._db.write_count += 1

    def delete(self):
        self._docs.pop(self.id, None)
        self._db.write_count += 1


class FakeQuery:
    def __init__(self, db, collection_name, filters=(), orders=(), limit_count=None):
        self._db = db
        self._collection_name = collection_name
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._limit = limit_count

    def where(self, field_path, op_string, value):
        return FakeQuery(self._db, self._collection_name, self._filters + ((field_path, op_string, value),),
                         self._orders, self._limit)

    def order_by(self, field_path, direction="ASCENDING"):
        return FakeQuery(self._db, self._collection_name, self._filters,
                         self._orders + ((field_path, direction),), self._limit)

    def limit(self, count):
        return FakeQuery(self._db, self._collection_name, self._filters, self._orders, count)

    @staticmethod
    def _matches(doc, field_path, op_string, value):
        actual = doc.get(field_path)
        if op_string == '==':
            return actual == value
        if op_string == 'array_contains':
            return isinstance(actual, list) and value in actual
        if op_string == 'in':
            return actual in value
        raise NotImplementedError(op_string)

    def stream(self, transaction=None):
        docs = self._db.store.get(self._collection_name, {})
        items = [(doc_id, data) for doc_id, data in docs.items()
                 if all(self._matches(data, *f) for f in self._filters)]
        # order_by 필드가 없는 문서는 Firestore와 동일하게 결과에서 제외
        for field_path, _ in self._orders:
            items = [item for item in items if field_path in item[1]]
        for field_path, direction in reversed(self._orders):
            items.sort(key=lambda item: item[1][field_path], reverse=(direction == firestore.Query.DESCENDING))
        if self._limit is not None:
            items = items[:self._limit]
        for doc_id, data in items:
            ref = FakeDocumentReference(self._db, self._collection_name, doc_id)
            yield FakeSnapshot(ref, copy.deepcopy(data))

    def get(self, transaction=None):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, db, name):
        super().__init__(db, name)
        self.id = name

    def document(self, document_id=None):
        return FakeDocumentReference(self._db, self._collection_name, document_id or uuid.uuid4().hex)


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, reference, document_data, merge=False):
        self._ops.append(lambda: reference.set(document_data, merge=merge))

    def update(self, reference, field_updates):
        self._ops.append(lambda: reference.update(field_updates))

    def delete(self, reference):
        self._ops.append(reference.delete)

    def commit(self):
        # 실제 배치처럼 전부 반영되거나 전혀 반영되지 않도록 스냅샷 후 적용
        backup = copy.deepcopy(self._db.store)
        try:
            for op in self._ops:
                op()
        except Exception:
            self._db.store = backup
            raise
        self._db.batch_commits += 1
        return []


class FakeFirestore:
    def __init__(self):
        self.store = {}
        self.write_count = 0
        self.batch_commits = 0

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeWriteBatch(self)

    def get_all(self, references, field_paths=None, transaction=None):
        for ref in references:
            yield ref.get()

    def docs(self, collection_name):
        return copy.deepcopy(self.store.get(collection_name, {}))


# =====================================================================================
# 픽스처
# =====================================================================================

@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def storage_bucket():
    """blob(path)마다 public_url을 가진 MagicMock을 돌려주는 버킷 대역"""
    bucket = MagicMock(name="bucket")
    bucket.blobs = {}

    def _blob(path):
        blob = MagicMock(name=f"blob:{path}")
        blob.public_url = f"https://storage.googleapis.com/postgram-test.appspot.com/{path}"
        bucket.blobs[path] = blob
        return blob

    bucket.blob.side_effect = _blob
    return bucket


@pytest.fixture
def app(fake_db, storage_bucket):
    app = create_app('testing', db=fake_db, bucket=storage_bucket)
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_user(fake_db):
    """users 컬렉션에 사용자 문서를 만듭니다. (외부 인증 서비스가 만든 문서를 흉내냄)"""
    def _make_user(user_id, username=None, profile_picture=None, **extra):
        user = User(user_id=user_id, username=username or user_id,
                    profile_picture=profile_picture or f"https://cdn.example.com/avatars/{user_id}.png")
        data = asdict(user)
        data['password'] = 'hashed-secret'
        data.update(extra)
        fake_db.collection('users').document(user_id).set(data)
        return data
    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user_id):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def image_bytes():
    """Pillow로 테스트용 이미지를 생성합니다."""
    def _image_bytes(size=(1600, 1200), fmt="PNG", mode="RGB"):
        color = (200, 120, 40, 255) if mode == "RGBA" else (200, 120, 40)
        buffer = io.BytesIO()
        Image.new(mode, size, color).save(buffer, format=fmt)
        return buffer.getvalue()
    return _image_bytes


@pytest.fixture
def create_post_via_api(client, auth_headers, image_bytes):
    """멀티파트 요청으로 게시글을 작성하고 응답 JSON을 반환합니다."""
    def _create(user_id, caption=None):
        data = {'image': (io.BytesIO(image_bytes()), 'photo.png')}
        if caption is not None:
            data['caption'] = caption
        response = client.post('/api/posts/', data=data, headers=auth_headers(user_id),
                               content_type='multipart/form-data')
        assert response.status_code == 201, response.get_json()
        return response.get_json()['post']
    return _create
