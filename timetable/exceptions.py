# timetable/exceptions.py
from typing import Optional


class TimetableError(Exception):
    """Base class for errors raised at the load/export boundaries."""


class LoadError(TimetableError):
    def __init__(self, message: str, source: Optional[str] = None, row: Optional[int] = None):
        self.source = source
        self.row = row
        where = ""
        if source:
            where = f"{source}"
            if row is not None:
                where += f" (row {row})"
            where += ": "
        super().__init__(f"{where}{message}")


class ExportError(TimetableError):
    def __init__(self, message: str, target: Optional[str] = None):
        self.target = target
        super().__init__(f"{target}: {message}" if target else message)
