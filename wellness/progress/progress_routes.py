"""
progress_routes.py
==================
FastAPI router for progress tracking.

Endpoints:
  GET  /progress  — most recent entries (PROGRESS_HISTORY_LIMIT), newest first
  POST /progress  — log a day's energy / sleep / stress ratings
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wellness.app_config import PROGRESS_HISTORY_LIMIT
from wellness.auth.dependencies import get_current_user
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database
from wellness.progress.progress_db import list_progress, record_progress

router = APIRouter(prefix="/progress", tags=["Progress"])


class ProgressEntryRequest(BaseModel):
    tracking_date: date = Field(default_factory=date.today)
    weight: Optional[float] = Field(default=None, gt=0)
    energy_level: int = Field(default=5, ge=1, le=10)
    sleep_quality: int = Field(default=5, ge=1, le=10)
    stress_level: int = Field(default=5, ge=1, le=10)
    notes: Optional[str] = None


@router.get("", status_code=status.HTTP_200_OK)
def progress_history(user: dict = Depends(get_current_user),
                     db: Database = Depends(get_database)):
    try:
        entries = list_progress(db, str(user["id"]), limit=PROGRESS_HISTORY_LIMIT)
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to fetch progress: {str(e)}"}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({"success": True, "entries": entries})
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def log_progress(body: ProgressEntryRequest,
                 user: dict = Depends(get_current_user),
                 db: Database = Depends(get_database)):
    """
    Request:
      POST /progress
      { "tracking_date": "2026-10-18", "weight": 64.2,
        "energy_level": 7, "sleep_quality": 6, "stress_level": 4, "notes": "..." }
    """
    try:
        entry = record_progress(db, str(user["id"]), **body.model_dump())
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to save progress: {str(e)}"}
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder({"success": True, "entry": entry})
    )
