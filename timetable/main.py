# timetable/main.py
import asyncio
import json
import logging
from fastapi import FastAPI, Depends, HTTPException, Response
from fastapi.concurrency import run_in_threadpool
from sqlmodel import Session
from timetable.config import settings
from timetable.database import init_db, get_session, load_entries
from timetable.exceptions import ExportError, LoadError
from timetable.models import TimetableEntry
from timetable.renderer import EXPORT_COLUMNS
from timetable.scheduler import generate_timetable
from pydantic import BaseModel, Field
from typing import List
import pandas as pd

logger = logging.getLogger(__name__)

app = FastAPI(title="Smart Timetable")

# Prevent concurrent scheduler runs
_generate_lock = asyncio.Lock()

@app.on_event("startup")
def on_startup():
    init_db()


class SubjectIn(BaseModel):
    code: str
    name: str
    hours_per_week: int = Field(gt=0)
    requires_projector: bool = False

class FacultyIn(BaseModel):
    id: str
    name: str
    subjects: List[str] = []

class ClassroomIn(BaseModel):
    number: str
    capacity: int = 0
    has_projector: bool = False

class TimeSlotIn(BaseModel):
    day: str
    time: str

class BatchIn(BaseModel):
    dept: str
    year: int
    section: str
    subjects: List[str] = []

class Dataset(BaseModel):
    subjects: List[SubjectIn]
    faculties: List[FacultyIn]
    classrooms: List[ClassroomIn]
    timeslots: List[TimeSlotIn]
    batches: List[BatchIn]


@app.post("/upload-dataset")
def upload_dataset(data: Dataset):
    try:
        # Save the dataset into a JSON file
        with open(settings.data_file, "w", encoding="utf-8") as f:
            json.dump(data.model_dump(), f, indent=4)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Error saving dataset: {str(e)}")

    return {
        "message": f"Dataset saved to {settings.data_file}",
        "batches": len(data.batches),
        "subjects": len(data.subjects),
    }

# Trigger timetable generation
@app.post("/timetable/generate")
async def generate_timetable_endpoint(session: Session = Depends(get_session)):
    async with _generate_lock:
        try:
            result = await run_in_threadpool(generate_timetable, session)
        except LoadError as e:
            raise HTTPException(status_code=400, detail=f"Failed to load dataset: {e}")
        except ExportError as e:
            logger.error("Export failed: %s", e)
            raise HTTPException(status_code=500, detail=f"Error exporting timetable: {e}")

    return {
        "status": "success" if result.complete else "partial",
        **result.summary(),
        "unassigned": [
            {"batch": u.batch.label, "subject": u.subject.code} for u in result.unassigned
        ],
        "unplaced": [
            {"batch": u.batch.label, "subject": u.subject.code, "hour": u.hour}
            for u in result.unplaced
        ],
    }

# Fetch generated timetable in display order
@app.get("/timetable", response_model=List[TimetableEntry])
def get_timetable(session: Session = Depends(get_session)):
    return load_entries(session)

@app.get("/timetable/csv")
def get_timetable_csv(session: Session = Depends(get_session)):
    rows = [
        {"Day": e.day, "Time": e.time, "Batch": e.batch,
         "Subject": e.subject, "Faculty": e.faculty, "Room": e.room}
        for e in load_entries(session)
    ]
    body = pd.DataFrame(rows, columns=EXPORT_COLUMNS).to_csv(index=False)
    return Response(content=body, media_type="text/csv")
