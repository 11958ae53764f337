"""
followup_routes.py
==================
FastAPI router for the user's own follow-ups.

Endpoints:
  GET  /followups                 — upcoming (with overdue flag) and completed
  POST /followups/{id}/complete   — mark one of the caller's follow-ups done

Admin-side creation and deletion live in admin/admin_routes.py.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from wellness.auth.dependencies import get_current_user
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database
from wellness.followups.followup_db import (
    complete_followup,
    list_followups,
    split_followups,
)

router = APIRouter(prefix="/followups", tags=["Follow-ups"])


@router.get("", status_code=status.HTTP_200_OK)
def my_followups(user: dict = Depends(get_current_user),
                 db: Database = Depends(get_database)):
    """
    Response:
      {
        "success": true,
        "upcoming":  [ { "title": "...", "scheduled_date": "...", "overdue": true, ... } ],
        "completed": [ ... ]
      }
    """
    try:
        follow_ups = list_followups(db, str(user["id"]))
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to fetch follow-ups: {str(e)}"}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({"success": True, **split_followups(follow_ups)})
    )


@router.post("/{followup_id}/complete", status_code=status.HTTP_200_OK)
def mark_completed(followup_id: UUID,
                   user: dict = Depends(get_current_user),
                   db: Database = Depends(get_database)):
    try:
        done = complete_followup(db, str(followup_id), str(user["id"]))
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to update follow-up: {str(e)}"}
        )

    if not done:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": "Follow-up not found"}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": True, "message": "Follow-up marked as completed"}
    )
