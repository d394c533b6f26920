# timetable/constraints.py
"""
Hard constraints checked before a session is committed.

Both checks only read the scheduling state.
"""
from timetable.config import WorkloadLimits
from timetable.records import Classroom, Faculty, StudentBatch, TimeSlot
from timetable.state import SchedulingState


def is_clash(state: SchedulingState, faculty: Faculty, batch: StudentBatch,
             room: Classroom, slot: TimeSlot) -> bool:
    """True when a committed lecture at the same day and time shares the faculty, batch or room."""
    for lec in state.lectures_at(slot):
        if lec.faculty == faculty or lec.batch == batch or lec.room == room:
            return True
    return False


def exceeds_workload(state: SchedulingState, faculty: Faculty, batch: StudentBatch,
                     slot: TimeSlot, limits: WorkloadLimits) -> bool:
    """True when any counter is already at its limit."""
    workload = state.workload

    if workload.batch_day_count(batch, slot.day) >= limits.max_batch_per_day:
        return True

    if workload.faculty_week_count(faculty) >= limits.max_faculty_per_week:
        return True

    if workload.faculty_day_count(faculty, slot.day) >= limits.max_faculty_per_day:
        return True

    return False
