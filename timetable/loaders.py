# timetable/loaders.py
"""
Build the engine's in-memory records from CSV files or a JSON dataset.

Expected CSV files in the data directory (a header row is required; columns
are read by position, so header names are free-form):
- subjects.csv:   code, name, hours_per_week, requires_projector
- faculty.csv:    id, name, subject codes separated by ';'
- classrooms.csv: number, capacity, has_projector
- timeslots.csv:  day, time
- batches.csv:    dept, year, section, subject codes separated by ';'

Any problem with the input raises LoadError so that the engine never runs on
a partial catalog.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

import pandas as pd

from timetable.exceptions import LoadError
from timetable.records import Classroom, Faculty, StudentBatch, Subject, TimeSlot

logger = logging.getLogger(__name__)

SUBJECTS_FILE = "subjects.csv"
FACULTY_FILE = "faculty.csv"
CLASSROOMS_FILE = "classrooms.csv"
TIMESLOTS_FILE = "timeslots.csv"
BATCHES_FILE = "batches.csv"

SUBJECT_COLUMNS = ["code", "name", "hours_per_week", "requires_projector"]
FACULTY_COLUMNS = ["id", "name", "subjects"]
CLASSROOM_COLUMNS = ["number", "capacity", "has_projector"]
TIMESLOT_COLUMNS = ["day", "time"]
BATCH_COLUMNS = ["dept", "year", "section", "subjects"]


@dataclass
class Catalog:
    """The five collections the placement engine needs."""

    subjects: List[Subject] = field(default_factory=list)
    faculties: List[Faculty] = field(default_factory=list)
    classrooms: List[Classroom] = field(default_factory=list)
    slots: List[TimeSlot] = field(default_factory=list)
    batches: List[StudentBatch] = field(default_factory=list)


# ---------- field parsing ----------

def _text(row: Mapping[str, Any], key: str, source: str, index: int) -> str:
    # short CSV rows come back from read_csv_rows with empty cells
    value = row.get(key)
    if value is None or not str(value).strip():
        raise LoadError(f"missing field '{key}'", source, index)
    return str(value).strip()


def _int(row: Mapping[str, Any], key: str, source: str, index: int) -> int:
    raw = _text(row, key, source, index)
    try:
        return int(raw)
    except ValueError:
        raise LoadError(f"field '{key}' is not an integer: {raw!r}", source, index) from None


def _bool(value: Any) -> bool:
    # anything other than a case-insensitive "true" is False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def _codes(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = str(value).split(";")
    return [str(p).strip() for p in parts if str(p).strip()]


# ---------- record builders ----------

def build_subjects(rows: Iterable[Mapping[str, Any]], source: str = SUBJECTS_FILE) -> List[Subject]:
    subjects = []
    for i, row in enumerate(rows, 1):
        hours = _int(row, "hours_per_week", source, i)
        if hours < 1:
            raise LoadError(f"hours_per_week must be positive, got {hours}", source, i)
        subjects.append(Subject(
            code=_text(row, "code", source, i),
            name=_text(row, "name", source, i),
            hours_per_week=hours,
            requires_projector=_bool(row.get("requires_projector", False)),
        ))
    return subjects


def build_faculties(rows: Iterable[Mapping[str, Any]], source: str = FACULTY_FILE) -> List[Faculty]:
    faculties = []
    for i, row in enumerate(rows, 1):
        faculties.append(Faculty(
            id=_text(row, "id", source, i),
            name=_text(row, "name", source, i),
            subjects=frozenset(_codes(row.get("subjects", ""))),
        ))
    return faculties


def build_classrooms(rows: Iterable[Mapping[str, Any]], source: str = CLASSROOMS_FILE) -> List[Classroom]:
    rooms = []
    for i, row in enumerate(rows, 1):
        rooms.append(Classroom(
            number=_text(row, "number", source, i),
            capacity=_int(row, "capacity", source, i),
            has_projector=_bool(row.get("has_projector", False)),
        ))
    return rooms


def build_timeslots(rows: Iterable[Mapping[str, Any]], source: str = TIMESLOTS_FILE) -> List[TimeSlot]:
    return [
        TimeSlot(day=_text(row, "day", source, i), time=_text(row, "time", source, i))
        for i, row in enumerate(rows, 1)
    ]


def build_batches(rows: Iterable[Mapping[str, Any]], subjects: List[Subject],
                  source: str = BATCHES_FILE) -> List[StudentBatch]:
    """Resolve each batch's subject codes against the subject catalog.

    Codes that match no subject are dropped with a warning. Repeated codes
    are kept, so the subject is scheduled once per occurrence.
    """
    by_code: Dict[str, Subject] = {}
    for s in subjects:
        by_code.setdefault(s.code, s)

    batches = []
    for i, row in enumerate(rows, 1):
        required = []
        for code in _codes(row.get("subjects", "")):
            subject = by_code.get(code)
            if subject is None:
                logger.warning("%s row %d: unknown subject code %r dropped", source, i, code)
                continue
            required.append(subject)

        batches.append(StudentBatch(
            dept=_text(row, "dept", source, i),
            year=_int(row, "year", source, i),
            section=_text(row, "section", source, i),
            required_subjects=tuple(required),
        ))
    return batches


# ---------- CSV ----------

def read_csv_rows(path: Union[str, Path], columns: List[str]) -> List[Dict[str, str]]:
    """Read a CSV with a header row and name its first len(columns) columns positionally."""
    path = Path(path)
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
            index_col=False,
        )
    except FileNotFoundError:
        raise LoadError("file not found", str(path)) from None
    except pd.errors.EmptyDataError:
        raise LoadError("file is empty", str(path)) from None
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise LoadError(f"could not parse CSV: {e}", str(path)) from None
    except OSError as e:
        raise LoadError(f"could not read file: {e}", str(path)) from None

    if len(df.columns) < len(columns):
        raise LoadError(
            f"expected {len(columns)} columns ({', '.join(columns)}), found {len(df.columns)}",
            str(path),
        )

    df = df.iloc[:, :len(columns)].fillna("")
    df.columns = columns
    return df.to_dict(orient="records")


def load_catalog(data_dir: Union[str, Path]) -> Catalog:
    data_dir = Path(data_dir)

    subjects = build_subjects(read_csv_rows(data_dir / SUBJECTS_FILE, SUBJECT_COLUMNS), SUBJECTS_FILE)
    faculties = build_faculties(read_csv_rows(data_dir / FACULTY_FILE, FACULTY_COLUMNS), FACULTY_FILE)
    classrooms = build_classrooms(read_csv_rows(data_dir / CLASSROOMS_FILE, CLASSROOM_COLUMNS), CLASSROOMS_FILE)
    slots = build_timeslots(read_csv_rows(data_dir / TIMESLOTS_FILE, TIMESLOT_COLUMNS), TIMESLOTS_FILE)
    batches = build_batches(read_csv_rows(data_dir / BATCHES_FILE, BATCH_COLUMNS), subjects, BATCHES_FILE)

    catalog = Catalog(subjects, faculties, classrooms, slots, batches)
    _log_loaded(catalog, str(data_dir))
    return catalog


# ---------- JSON dataset ----------

DATASET_SECTIONS = ["subjects", "faculties", "classrooms", "timeslots", "batches"]


def _section(data: Mapping[str, Any], name: str) -> List[Mapping[str, Any]]:
    if name not in data:
        raise LoadError(f"dataset has no {name!r} section")
    rows = data[name]
    if not isinstance(rows, list):
        raise LoadError(f"section {name!r} must be a list, got {type(rows).__name__}")
    for i, row in enumerate(rows, 1):
        if not isinstance(row, Mapping):
            raise LoadError(f"expected an object, got {type(row).__name__}", name, i)
    return rows


def records_from_dataset(data: Mapping[str, Any]) -> Catalog:
    """Build a catalog from the JSON dataset accepted by the upload endpoint."""
    if not isinstance(data, Mapping):
        raise LoadError(f"dataset must be a JSON object, got {type(data).__name__}")

    sections = {name: _section(data, name) for name in DATASET_SECTIONS}

    try:
        subjects = build_subjects(sections["subjects"], "subjects")
        faculties = build_faculties(sections["faculties"], "faculties")
        classrooms = build_classrooms(sections["classrooms"], "classrooms")
        slots = build_timeslots(sections["timeslots"], "timeslots")
        batches = build_batches(sections["batches"], subjects, "batches")
    except TypeError as e:
        raise LoadError(f"malformed dataset: {e}") from None

    return Catalog(subjects, faculties, classrooms, slots, batches)


def load_dataset_file(path: Union[str, Path]) -> Catalog:
    path = Path(path)
    if not path.exists():
        raise LoadError("data file not found", str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_data = json.load(f)
    except json.JSONDecodeError as e:
        raise LoadError(f"failed to decode JSON: {e}", str(path)) from None
    except (OSError, UnicodeDecodeError) as e:
        raise LoadError(f"could not read file: {e}", str(path)) from None

    catalog = records_from_dataset(raw_data)
    _log_loaded(catalog, str(path))
    return catalog


def _log_loaded(catalog: Catalog, source: str) -> None:
    logger.info(
        "Loaded %d subjects, %d faculty, %d rooms, %d slots, %d batches from %s",
        len(catalog.subjects), len(catalog.faculties), len(catalog.classrooms),
        len(catalog.slots), len(catalog.batches), source,
    )
