# timetable/config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DAY_ORDER = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class WorkloadLimits:
    max_batch_per_day: int = 5
    max_faculty_per_day: int = 4
    max_faculty_per_week: int = 18


@dataclass
class Settings:
    database_url: str = "sqlite:///./timetable.db"
    data_file: Path = Path("data.json")
    output_dir: Path = Path("exports")
    max_attempts: int = 2000
    seed: Optional[int] = None
    limits: WorkloadLimits = field(default_factory=WorkloadLimits)
    day_order: List[str] = field(default_factory=lambda: list(DAY_ORDER))

    @classmethod
    def from_env(cls) -> "Settings":
        seed = os.getenv("TIMETABLE_SEED")
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./timetable.db"),
            data_file=Path(os.getenv("TIMETABLE_DATA_FILE", "data.json")),
            output_dir=Path(os.getenv("TIMETABLE_OUTPUT_DIR", "exports")),
            max_attempts=_env_int("TIMETABLE_MAX_ATTEMPTS", 2000),
            seed=int(seed) if seed else None,
            limits=WorkloadLimits(
                max_batch_per_day=_env_int("TIMETABLE_MAX_BATCH_PER_DAY", 5),
                max_faculty_per_day=_env_int("TIMETABLE_MAX_FACULTY_PER_DAY", 4),
                max_faculty_per_week=_env_int("TIMETABLE_MAX_FACULTY_PER_WEEK", 18),
            ),
        )


settings = Settings.from_env()
