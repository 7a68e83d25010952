import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.services.s3_service import get_photo_storage
from app.models import Achievement, ChildProfile  # noqa: F401
from main import app


class FakePhotoStorage:
    """S3 대신 메모리에 저장하는 테스트용 스토리지"""

    max_size = 5 * 1024 * 1024

    def __init__(self):
        self.objects = {}
        self.deleted = []

    def upload(self, content, original_filename):
        if len(content) > self.max_size:
            raise HTTPException(status_code=413, detail="Photo exceeds the maximum size of 5MB")
        url = f"https://test-bucket.s3.ap-northeast-1.amazonaws.com/{len(self.objects)}-{original_filename}"
        self.objects[url] = content
        return url

    def delete(self, url):
        self.deleted.append(url)
        self.objects.pop(url, None)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def storage():
    return FakePhotoStorage()


@pytest.fixture
def client(db_session, storage):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def achievement_payload():
    return {
        "date": "2024-03-10",
        "title": "First steps",
        "description": "Walked from the sofa to the table",
        "ageAtEvent": {"years": 1, "months": 1, "days": 26},
        "tags": ["walking", "milestone"],
    }
