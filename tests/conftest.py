import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from timetable.config import settings
from timetable.database import get_session
from timetable.main import app
from timetable.records import Classroom, Faculty, StudentBatch, Subject, TimeSlot


def make_subject(code="CS201", name="Data Structures", hours=3, projector=False):
    return Subject(code=code, name=name, hours_per_week=hours, requires_projector=projector)


def make_faculty(fid="F1", name="Dr. Rao", subjects=("CS201",)):
    return Faculty(id=fid, name=name, subjects=frozenset(subjects))


def make_batch(*subjects, dept="CS", year=2, section="A"):
    return StudentBatch(dept=dept, year=year, section=section, required_subjects=tuple(subjects))


def make_rooms(*numbers):
    return [Classroom(number=n, capacity=60) for n in numbers]


def make_slots(days=("Mon",), times=("09:00",)):
    return [TimeSlot(day=d, time=t) for d in days for t in times]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def client(db_engine, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_file", tmp_path / "data.json")
    monkeypatch.setattr(settings, "output_dir", tmp_path / "exports")

    def override_session():
        with Session(db_engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()
