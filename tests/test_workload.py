from conftest import make_batch, make_faculty, make_subject
from timetable.records import Classroom, Lecture, TimeSlot
from timetable.state import SchedulingState
from timetable.workload import WorkloadTracker


def test_counters_start_empty_for_known_records():
    rao = make_faculty()
    batch = make_batch(make_subject())

    tracker = WorkloadTracker([rao], [batch])

    assert tracker.faculty_weekly == {rao: 0}
    assert tracker.faculty_day_count(rao, "Mon") == 0
    assert tracker.batch_day_count(batch, "Mon") == 0


def test_record_bumps_all_three_counters():
    rao = make_faculty()
    batch = make_batch(make_subject())
    tracker = WorkloadTracker([rao], [batch])

    tracker.record(rao, batch, TimeSlot("Mon", "09:00"))
    tracker.record(rao, batch, TimeSlot("Mon", "10:00"))
    tracker.record(rao, batch, TimeSlot("Wed", "09:00"))

    assert tracker.faculty_week_count(rao) == 3
    assert tracker.faculty_day_count(rao, "Mon") == 2
    assert tracker.faculty_day_count(rao, "Wed") == 1
    assert tracker.batch_day_count(batch, "Mon") == 2
    assert tracker.batch_day_count(batch, "Tue") == 0


def test_unknown_records_read_as_zero():
    tracker = WorkloadTracker()

    assert tracker.faculty_week_count(make_faculty()) == 0
    assert tracker.batch_day_count(make_batch(), "Fri") == 0


def test_commit_keeps_counters_in_step_with_lectures():
    subject = make_subject()
    rao = make_faculty()
    batch = make_batch(subject)
    state = SchedulingState([rao], [batch])

    state.commit(Lecture(rao, batch, subject, Classroom("R1"), TimeSlot("Mon", "09:00")))
    state.commit(Lecture(rao, batch, subject, Classroom("R2"), TimeSlot("Tue", "09:00")))

    assert len(state.lectures) == 2
    assert state.workload.faculty_week_count(rao) == len(state.lectures)
    assert state.claimed == {("Mon", "09:00", "R1"), ("Tue", "09:00", "R2")}
    assert [l.room.number for l in state.lectures_at(TimeSlot("Tue", "09:00"))] == ["R2"]
