# timetable/renderer.py
"""
Sorting, grouping and output of a generated timetable.

Lectures are ordered by day (canonical week order, unknown days last), then
batch, then time, and grouped day -> batch. The flat export stream follows
exactly the same order as the console view.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Union

import pandas as pd

from timetable.config import DAY_ORDER
from timetable.exceptions import ExportError
from timetable.records import Lecture

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Day", "Time", "Batch", "Subject", "Faculty", "Room"]

ROW_FORMAT = "{:<7} | {:<20} | {:<15} | {:<5}"
RULE = "-" * 60

Grouped = Dict[str, Dict[str, List[Lecture]]]


def day_rank(day: str, day_order: Sequence[str] = DAY_ORDER) -> int:
    try:
        return list(day_order).index(day)
    except ValueError:
        return len(day_order)


def sort_lectures(lectures: Iterable[Lecture], day_order: Sequence[str] = DAY_ORDER) -> List[Lecture]:
    return sorted(
        lectures,
        key=lambda lec: (day_rank(lec.slot.day, day_order), lec.batch.label, lec.slot.time),
    )


def group_lectures(lectures: Iterable[Lecture], day_order: Sequence[str] = DAY_ORDER) -> Grouped:
    """Group sorted lectures day -> batch label, each batch list ordered by time."""
    grouped: Grouped = {}
    for lec in sort_lectures(lectures, day_order):
        grouped.setdefault(lec.slot.day, {}).setdefault(lec.batch.label, []).append(lec)

    for batches in grouped.values():
        for label, items in batches.items():
            batches[label] = sorted(items, key=lambda lec: lec.slot.time)
    return grouped


def ordered_days(grouped: Grouped, day_order: Sequence[str] = DAY_ORDER) -> List[str]:
    """Canonical days that occur, then any other day in first-seen order."""
    days = [d for d in day_order if d in grouped]
    days.extend(d for d in grouped if d not in day_order)
    return days


def sort_for_export(lectures: Iterable[Lecture], day_order: Sequence[str] = DAY_ORDER) -> List[Lecture]:
    grouped = group_lectures(lectures, day_order)
    ordered = []
    for day in ordered_days(grouped, day_order):
        for items in grouped[day].values():
            ordered.extend(items)
    return ordered


def export_records(lectures: Iterable[Lecture], day_order: Sequence[str] = DAY_ORDER,
                   presorted: bool = False) -> List[dict]:
    ordered = list(lectures) if presorted else sort_for_export(lectures, day_order)
    return [lec.as_record() for lec in ordered]


def render_text(lectures: Iterable[Lecture], day_order: Sequence[str] = DAY_ORDER) -> str:
    grouped = group_lectures(lectures, day_order)
    lines = ["", "==================== SMART TIMETABLE ====================", ""]

    for day in ordered_days(grouped, day_order):
        lines.extend(["", f"==================== {day.upper()} ====================", ""])
        for label, items in grouped[day].items():
            lines.append(f">>> Batch: {label}")
            lines.append("")
            lines.append(ROW_FORMAT.format("Time", "Subject", "Faculty", "Room"))
            lines.append(RULE)
            for lec in items:
                lines.append(ROW_FORMAT.format(
                    lec.slot.time, lec.subject.name, lec.faculty.name, lec.room.number,
                ))
            lines.append("")

    return "\n".join(lines) + "\n"


def to_dataframe(lectures: Iterable[Lecture], day_order: Sequence[str] = DAY_ORDER,
                 presorted: bool = False) -> pd.DataFrame:
    return pd.DataFrame(export_records(lectures, day_order, presorted), columns=EXPORT_COLUMNS)


# ---------- exporters ----------

def export_csv(lectures: Iterable[Lecture], path: Union[str, Path],
               day_order: Sequence[str] = DAY_ORDER, presorted: bool = False) -> Path:
    path = Path(path)
    df = to_dataframe(lectures, day_order, presorted)
    try:
        df.to_csv(path, index=False)
    except OSError as e:
        raise ExportError(f"could not write CSV: {e}", str(path)) from None
    logger.info("Exported %d rows to %s", len(df), path)
    return path


def export_json(lectures: Iterable[Lecture], path: Union[str, Path],
                day_order: Sequence[str] = DAY_ORDER, presorted: bool = False) -> Path:
    path = Path(path)
    records = export_records(lectures, day_order, presorted)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=4)
    except OSError as e:
        raise ExportError(f"could not write JSON: {e}", str(path)) from None
    logger.info("Exported %d rows to %s", len(records), path)
    return path


def export_excel(lectures: Iterable[Lecture], path: Union[str, Path],
                 day_order: Sequence[str] = DAY_ORDER, presorted: bool = False,
                 sheet_name: str = "Timetable") -> Path:
    path = Path(path)
    df = to_dataframe(lectures, day_order, presorted)
    try:
        df.to_excel(path, index=False, sheet_name=sheet_name)
    except OSError as e:
        raise ExportError(f"could not write Excel workbook: {e}", str(path)) from None
    logger.info("Exported %d rows to %s", len(df), path)
    return path
