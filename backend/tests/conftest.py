# tests/conftest.py
import os
import shutil
import tempfile
from datetime import date, timedelta
from pathlib import Path

# Settings are read at import time, so point them at throwaway locations first
_BASE_STORAGE = tempfile.mkdtemp(prefix="pixelforge-test-")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("STORAGE_PATH", _BASE_STORAGE)
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pixelforge.main import app
from pixelforge.database import Base, get_db
from pixelforge.models import Project, ProjectDocument, Role, User
from pixelforge.config import settings
from pixelforge.services.auth import create_access_token, hash_password

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_PASSWORD = "password123"

@pytest.fixture(scope="session")
def engine():
    """Create test database engine"""
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool  # Needed for SQLite in-memory database
    )
    return engine

@pytest.fixture(scope="session")
def tables(engine):
    """Create all tables in the test database"""
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)

@pytest.fixture
def db_session(engine, tables):
    """Creates a new database session for a test"""
    connection = engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection)()

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture
def temp_storage_dir():
    """Fresh upload directory for every test"""
    temp_dir = Path(tempfile.mkdtemp(dir=_BASE_STORAGE))
    (temp_dir / "uploads").mkdir(parents=True, exist_ok=True)
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)

@pytest.fixture(autouse=True)
def override_settings(temp_storage_dir):
    """Override settings for testing"""
    original_storage = settings.STORAGE_PATH
    original_uploads = settings.UPLOADS_PATH

    settings.STORAGE_PATH = temp_storage_dir
    settings.UPLOADS_PATH = temp_storage_dir / "uploads"

    yield

    settings.STORAGE_PATH = original_storage
    settings.UPLOADS_PATH = original_uploads

@pytest.fixture
def client(db_session):
    """Test client using the test database"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def make_user(db_session):
    """Factory for persisted users with a known password"""
    counter = {"n": 0}

    def _make_user(role: Role, name: str = None, email: str = None) -> User:
        counter["n"] += 1
        user = User(
            name=name or f"{role.value} {counter['n']}",
            email=(email or f"{role.value.lower()}{counter['n']}@pixelforge.test").lower(),
            password_hash=hash_password(TEST_PASSWORD),
            role=role
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user

@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers

@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, name="Ada Admin", email="admin@pixelforge.test")

@pytest.fixture
def lead(make_user):
    return make_user(Role.PROJECT_LEAD, name="Lena Lead")

@pytest.fixture
def other_lead(make_user):
    return make_user(Role.PROJECT_LEAD, name="Otto Lead")

@pytest.fixture
def developer(make_user):
    return make_user(Role.DEVELOPER, name="Dana Dev")

@pytest.fixture
def second_developer(make_user):
    return make_user(Role.DEVELOPER, name="Dirk Dev")

@pytest.fixture
def outsider(make_user):
    """Developer who is on no project"""
    return make_user(Role.DEVELOPER, name="Olga Outsider")

@pytest.fixture
def sample_project(db_session, lead, developer):
    """Active project led by `lead` with `developer` assigned"""
    project = Project(
        name="Test Project",
        description="Test Description",
        deadline=date.today() + timedelta(days=30),
        project_lead=lead,
        assigned_developers=[developer]
    )
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project

@pytest.fixture
def sample_document(db_session, sample_project):
    """Stored PDF attached to the sample project"""
    stored_filename = "1700000000000-deadbeef.pdf"
    (settings.UPLOADS_PATH / stored_filename).write_bytes(b"%PDF-1.4 test content")

    document = ProjectDocument(
        project_id=sample_project.id,
        stored_filename=stored_filename,
        original_filename="Design Brief.pdf"
    )
    db_session.add(document)
    db_session.commit()
    db_session.refresh(document)
    return document

@pytest.fixture(scope="session", autouse=True)
def cleanup_test_files():
    """Clean up test files after all tests are done"""
    yield
    shutil.rmtree(_BASE_STORAGE, ignore_errors=True)
    for file in ["test.db", "pixelforge.db"]:
        if os.path.exists(file):
            os.remove(file)
