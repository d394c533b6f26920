# timetable/workload.py
from collections import defaultdict
from typing import Dict, Iterable

from timetable.records import Faculty, StudentBatch, TimeSlot


class WorkloadTracker:
    """Counts committed sessions per faculty (day and week) and per batch (day).

    Counters only ever go up: the engine never un-places a session.
    """

    def __init__(self, faculties: Iterable[Faculty] = (), batches: Iterable[StudentBatch] = ()):
        self.faculty_weekly: Dict[Faculty, int] = {}
        self.faculty_daily: Dict[Faculty, Dict[str, int]] = {}
        self.batch_daily: Dict[StudentBatch, Dict[str, int]] = {}

        for f in faculties:
            self.faculty_weekly[f] = 0
            self.faculty_daily[f] = defaultdict(int)
        for b in batches:
            self.batch_daily[b] = defaultdict(int)

    def faculty_week_count(self, faculty: Faculty) -> int:
        return self.faculty_weekly.get(faculty, 0)

    def faculty_day_count(self, faculty: Faculty, day: str) -> int:
        return self.faculty_daily.get(faculty, {}).get(day, 0)

    def batch_day_count(self, batch: StudentBatch, day: str) -> int:
        return self.batch_daily.get(batch, {}).get(day, 0)

    def record(self, faculty: Faculty, batch: StudentBatch, slot: TimeSlot) -> None:
        self.batch_daily.setdefault(batch, defaultdict(int))[slot.day] += 1
        self.faculty_weekly[faculty] = self.faculty_weekly.get(faculty, 0) + 1
        self.faculty_daily.setdefault(faculty, defaultdict(int))[slot.day] += 1

    def __repr__(self):
        busiest = max(self.faculty_weekly.values(), default=0)
        return (
            f"WorkloadTracker(faculty={len(self.faculty_weekly)}, "
            f"batches={len(self.batch_daily)}, "
            f"busiest_faculty_week={busiest})"
        )
