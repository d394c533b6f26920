# timetable/state.py
from collections import defaultdict
from typing import Dict, Iterable, List, Set, Tuple

from timetable.records import Classroom, Faculty, Lecture, StudentBatch, TimeSlot
from timetable.workload import WorkloadTracker

RoomTimeKey = Tuple[str, str, str]


def room_time_key(slot: TimeSlot, room: Classroom) -> RoomTimeKey:
    return (slot.day, slot.time, room.number)


class SchedulingState:
    """Everything one generation run mutates.

    Owned by a single run of the placement engine and never shared.
    """

    def __init__(self, faculties: Iterable[Faculty] = (), batches: Iterable[StudentBatch] = ()):
        self.lectures: List[Lecture] = []
        self.claimed: Set[RoomTimeKey] = set()
        self.by_slot: Dict[Tuple[str, str], List[Lecture]] = defaultdict(list)
        self.workload = WorkloadTracker(faculties, batches)

    def is_claimed(self, slot: TimeSlot, room: Classroom) -> bool:
        return room_time_key(slot, room) in self.claimed

    def lectures_at(self, slot: TimeSlot) -> List[Lecture]:
        return self.by_slot.get((slot.day, slot.time), [])

    def commit(self, lecture: Lecture) -> None:
        """Append the lecture, claim its room-time and bump every counter."""
        self.lectures.append(lecture)
        self.claimed.add(room_time_key(lecture.slot, lecture.room))
        self.by_slot[(lecture.slot.day, lecture.slot.time)].append(lecture)
        self.workload.record(lecture.faculty, lecture.batch, lecture.slot)
