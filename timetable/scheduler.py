# timetable/scheduler.py
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session

from timetable.config import WorkloadLimits, settings
from timetable.constraints import exceeds_workload, is_clash
from timetable.database import clear_timetable, save_lectures
from timetable.exceptions import ExportError
from timetable.loaders import load_dataset_file
from timetable.records import (
    Classroom,
    Faculty,
    Lecture,
    StudentBatch,
    Subject,
    TimeSlot,
)
from timetable.renderer import export_csv, export_excel, export_json, sort_for_export
from timetable.state import SchedulingState

logger = logging.getLogger(__name__)

EXPORT_FILES = ["timetable.csv", "timetable.json", "timetable.xlsx"]


@dataclass(frozen=True)
class UnassignedSubject:
    """No faculty lists the subject, so none of its hours were attempted."""

    batch: StudentBatch
    subject: Subject


@dataclass(frozen=True)
class UnplacedHour:
    """One hour-unit that ran out of attempts."""

    batch: StudentBatch
    subject: Subject
    faculty: Faculty
    hour: int
    attempts: int


@dataclass
class ScheduleResult:
    lectures: List[Lecture]
    state: SchedulingState
    unassigned: List[UnassignedSubject] = field(default_factory=list)
    unplaced: List[UnplacedHour] = field(default_factory=list)
    requested_hours: int = 0

    @property
    def placed_hours(self) -> int:
        return len(self.lectures)

    @property
    def complete(self) -> bool:
        return not self.unassigned and not self.unplaced

    def summary(self) -> Dict[str, int]:
        return {
            "requested_hours": self.requested_hours,
            "placed_hours": self.placed_hours,
            "unplaced_hours": len(self.unplaced),
            "unassigned_subjects": len(self.unassigned),
        }


def assign_faculty(subject: Subject, faculties: Sequence[Faculty]) -> Optional[Faculty]:
    """First faculty in catalog order that can teach the subject, or None."""
    for f in faculties:
        if f.can_teach(subject):
            return f
    return None


class PlacementEngine:
    """
    Randomized greedy placement with bounded retries.

    Every hour-unit is searched on its own: draw a random slot, try the rooms
    in a fresh random order, commit the first legal one. Nothing placed is
    ever moved again.
    """

    def __init__(
        self,
        faculties: Sequence[Faculty],
        classrooms: Sequence[Classroom],
        slots: Sequence[TimeSlot],
        batches: Sequence[StudentBatch],
        rng: Optional[random.Random] = None,
        limits: Optional[WorkloadLimits] = None,
        max_attempts: Optional[int] = None,
    ):
        self.faculties = list(faculties)
        self.classrooms = list(classrooms)
        self.slots = list(slots)
        self.batches = list(batches)
        self.random = rng if rng is not None else random.Random(settings.seed)
        self.limits = limits or settings.limits
        self.max_attempts = settings.max_attempts if max_attempts is None else max_attempts

    def run(self) -> ScheduleResult:
        state = SchedulingState(self.faculties, self.batches)
        result = ScheduleResult(lectures=state.lectures, state=state)

        for batch in self.batches:
            for subject in batch.required_subjects:
                result.requested_hours += subject.hours_per_week

                assigned = assign_faculty(subject, self.faculties)
                if assigned is None:
                    logger.debug("No faculty can teach %s for %s; skipping", subject.code, batch)
                    result.unassigned.append(UnassignedSubject(batch, subject))
                    continue

                for hour in range(subject.hours_per_week):
                    attempts = self._place_hour(state, assigned, batch, subject)
                    if attempts is not None:
                        logger.debug(
                            "Gave up on %s hour %d for %s after %d attempts",
                            subject.code, hour + 1, batch, attempts,
                        )
                        result.unplaced.append(
                            UnplacedHour(batch, subject, assigned, hour + 1, attempts)
                        )

        logger.info(
            "Placed %d of %d hours (%d unplaced, %d subjects without faculty)",
            result.placed_hours, result.requested_hours,
            len(result.unplaced), len(result.unassigned),
        )
        return result

    def _place_hour(self, state: SchedulingState, faculty: Faculty,
                    batch: StudentBatch, subject: Subject) -> Optional[int]:
        """Search for one legal (slot, room). Returns None on success, else the attempts spent."""
        if not self.slots or not self.classrooms:
            return 0

        attempts = 0
        while attempts < self.max_attempts:
            slot = self.random.choice(self.slots)
            rooms = list(self.classrooms)
            self.random.shuffle(rooms)

            for room in rooms:
                if state.is_claimed(slot, room):
                    continue
                if is_clash(state, faculty, batch, room, slot):
                    continue
                if exceeds_workload(state, faculty, batch, slot, self.limits):
                    continue

                state.commit(Lecture(faculty, batch, subject, room, slot))
                return None

            attempts += 1

        return attempts


def generate_schedule(
    subjects: Sequence[Subject],
    faculties: Sequence[Faculty],
    classrooms: Sequence[Classroom],
    slots: Sequence[TimeSlot],
    batches: Sequence[StudentBatch],
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    limits: Optional[WorkloadLimits] = None,
    max_attempts: Optional[int] = None,
) -> ScheduleResult:
    """
    Place every required hour of every batch.

    `subjects` is the full catalog; batches already carry the Subject records
    they need, so it is only used for reporting. Pass `rng` (or `seed`) to
    replay a run exactly.
    """
    if rng is None and seed is not None:
        rng = random.Random(seed)

    logger.info(
        "Generating schedule: subjects=%d, faculty=%d, rooms=%d, slots=%d, batches=%d",
        len(subjects), len(faculties), len(classrooms), len(slots), len(batches),
    )
    engine = PlacementEngine(
        faculties, classrooms, slots, batches,
        rng=rng, limits=limits, max_attempts=max_attempts,
    )
    return engine.run()


def generate_timetable(session: Session, data_file: Optional[Path] = None,
                       output_dir: Optional[Path] = None,
                       seed: Optional[int] = None) -> ScheduleResult:
    """
    Load the uploaded dataset, place it, then replace the stored timetable
    and the files under the export directory.

    Raises LoadError when the dataset is missing or malformed and
    ExportError when an export file cannot be written.
    """
    data_file = data_file or settings.data_file
    output_dir = output_dir or settings.output_dir

    catalog = load_dataset_file(data_file)
    result = generate_schedule(
        catalog.subjects, catalog.faculties, catalog.classrooms,
        catalog.slots, catalog.batches,
        seed=seed if seed is not None else settings.seed,
    )

    ordered = sort_for_export(result.lectures)

    _clear_exports(output_dir)
    clear_timetable(session)
    save_lectures(session, ordered)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError(f"could not create export directory: {e}", str(output_dir)) from None
    export_csv(ordered, output_dir / "timetable.csv", presorted=True)
    export_json(ordered, output_dir / "timetable.json", presorted=True)
    export_excel(ordered, output_dir / "timetable.xlsx", presorted=True)

    logger.info("Timetable generated: %d entries written to %s", len(ordered), output_dir)
    return result


def _clear_exports(output_dir: Path) -> None:
    """Remove the previous run's export files so no stale file outlives a failed export."""
    for name in EXPORT_FILES:
        path = output_dir / name
        try:
            if path.exists():
                path.unlink()
        except OSError as e:
            raise ExportError(f"could not remove old export: {e}", str(path)) from None
