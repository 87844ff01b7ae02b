"""
Shared fixtures: a throwaway SQLite database, a TestClient and seed helpers.

DATABASE_URL has to be set before db.py is imported anywhere.
"""

import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="directory-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"

import itertools
import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from db import Base, engine, SessionLocal
from models.models import Profile, ClassRecord, ProfileClass
from utils.auth_utils import create_token

_clock = itertools.count()


@pytest.fixture(autouse=True)
def fresh_db():
    import models.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    from main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_class():
    def _make(code, title=None, description=None):
        with SessionLocal() as session:
            course = ClassRecord(id=str(uuid.uuid4()), code=code, title=title or code, description=description)
            session.add(course)
            session.commit()
            return course.id
    return _make


@pytest.fixture
def make_profile():
    """
    Insert a profile and return its id. Later calls get a later created_at,
    so "newest first" listings return them in reverse creation order.
    """
    def _make(full_name, status="active", role="user", links=None, classes=(), **fields):
        profile_id = str(uuid.uuid4())
        tick = next(_clock)
        with SessionLocal() as session:
            profile = Profile(
                id=profile_id,
                full_name=full_name,
                email=fields.pop("email", f"{full_name.lower().replace(' ', '.')}.{tick}@usc.edu"),
                status=status,
                role=role,
                links=links or {},
                created_at=datetime(2025, 1, 1) + timedelta(minutes=tick),
                **fields,
            )
            for code in classes:
                course = session.query(ClassRecord).filter_by(code=code).one_or_none()
                if course is None:
                    course = ClassRecord(id=str(uuid.uuid4()), code=code, title=code)
                    session.add(course)
                profile.profile_classes.append(ProfileClass(class_id=course.id, course=course))
            session.add(profile)
            session.commit()
        return profile_id
    return _make


@pytest.fixture
def auth():
    def _headers(profile_id):
        return {"Authorization": f"Bearer {create_token(profile_id)}"}
    return _headers
