import os

os.environ["EXAMCELL_DATABASE_URL"] = "sqlite://"
os.environ["EXAMCELL_SEED_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from examcell.config import get_settings
from examcell.database import Base, get_db
from examcell.db_models import ClassroomDB, TeacherDB
from examcell.main_api import app


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def client(db_session, tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "export_dir", tmp_path / "exports")

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def add_classroom(db, name, students_per_bench, num_benches=30):
    room = ClassroomDB(
        name=name,
        num_benches=num_benches,
        students_per_bench=students_per_bench,
        total_capacity=num_benches * students_per_bench,
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


def add_teacher(db, name, division="A", sem3=False, sem5=False):
    teacher = TeacherDB(name=name, division=division, teaches_sem_3=sem3, teaches_sem_5=sem5)
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return teacher
