# timetable/models.py
from sqlmodel import SQLModel, Field
from typing import Optional

from timetable.records import Lecture


class TimetableEntry(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    position: int = Field(index=True)  # display/export order
    day: str
    time: str
    batch: str
    subject: str
    faculty: str
    room: str

    @classmethod
    def from_lecture(cls, lecture: Lecture, position: int) -> "TimetableEntry":
        return cls(
            position=position,
            day=lecture.slot.day,
            time=lecture.slot.time,
            batch=lecture.batch.label,
            subject=lecture.subject.name,
            faculty=lecture.faculty.name,
            room=lecture.room.number,
        )
