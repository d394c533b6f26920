# timetable/records.py
"""
In-memory records handed to the placement engine.

All records are frozen so they can key the workload counters and so a
placed Lecture cannot be altered after it is committed.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class Subject:
    code: str
    name: str
    hours_per_week: int
    requires_projector: bool = False


@dataclass(frozen=True)
class Faculty:
    id: str
    name: str
    subjects: FrozenSet[str] = field(default_factory=frozenset)

    def can_teach(self, subject: Subject) -> bool:
        return subject.code in self.subjects

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Classroom:
    number: str
    capacity: int = 0
    has_projector: bool = False

    def __str__(self):
        return self.number


@dataclass(frozen=True)
class StudentBatch:
    dept: str
    year: int
    section: str
    required_subjects: Tuple[Subject, ...] = ()

    @property
    def label(self) -> str:
        return f"{self.dept} Y{self.year}{self.section}"

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class TimeSlot:
    day: str
    time: str


@dataclass(frozen=True)
class Lecture:
    faculty: Faculty
    batch: StudentBatch
    subject: Subject
    room: Classroom
    slot: TimeSlot

    def as_record(self) -> dict:
        """Flat export form: one row of the Day,Time,Batch,Subject,Faculty,Room table."""
        return {
            "Day": self.slot.day,
            "Time": self.slot.time,
            "Batch": self.batch.label,
            "Subject": self.subject.name,
            "Faculty": self.faculty.name,
            "Room": self.room.number,
        }
