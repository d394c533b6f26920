# timetable/database.py
from sqlalchemy import delete
from sqlmodel import SQLModel, create_engine, Session, select
from typing import Generator, List, Sequence

from timetable.config import settings
from timetable.models import TimetableEntry
from timetable.records import Lecture

DATABASE_URL = settings.database_url

# For sqlite: allow multithread
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args)

def init_db() -> None:
    SQLModel.metadata.create_all(engine)

def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session

def clear_timetable(session: Session) -> None:
    session.execute(delete(TimetableEntry))
    session.commit()

def save_lectures(session: Session, lectures: Sequence[Lecture]) -> int:
    """Store lectures in the given (already display-sorted) order."""
    for position, lecture in enumerate(lectures):
        session.add(TimetableEntry.from_lecture(lecture, position))
    session.commit()
    return len(lectures)

def load_entries(session: Session) -> List[TimetableEntry]:
    return list(session.exec(select(TimetableEntry).order_by(TimetableEntry.position)).all())
