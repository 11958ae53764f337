"""
admin_routes.py
===============
FastAPI router for administrators managing members' follow-ups.

Endpoints:
  GET    /admin/users                        — all non-admin users
  GET    /admin/users/{user_id}/followups    — one user's follow-ups
  POST   /admin/users/{user_id}/followups    — schedule a follow-up for them
  DELETE /admin/followups/{followup_id}      — remove a follow-up

Every endpoint requires a JWT whose user has is_admin = true (403 otherwise).
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wellness.auth.auth_db import get_user_by_id, list_members
from wellness.auth.dependencies import require_admin
from wellness.auth.profile_db import public_profile
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database
from wellness.followups.followup_db import (
    create_followup,
    delete_followup,
    list_followups,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


class FollowUpCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    follow_up_type: Literal["reminder", "check_in", "assessment"] = "reminder"
    scheduled_date: datetime


def _store_failure(action: str, e: StoreError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": f"Failed to {action}: {str(e)}"}
    )


def _not_found(what: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"success": False, "message": f"{what} not found"}
    )


@router.get("/users", status_code=status.HTTP_200_OK)
def members(admin: dict = Depends(require_admin),
            db: Database = Depends(get_database)):
    try:
        users = list_members(db)
    except StoreError as e:
        return _store_failure("fetch users", e)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({
            "success": True,
            "users": [public_profile(u) for u in users],
        })
    )


@router.get("/users/{user_id}/followups", status_code=status.HTTP_200_OK)
def member_followups(user_id: UUID,
                     admin: dict = Depends(require_admin),
                     db: Database = Depends(get_database)):
    try:
        follow_ups = list_followups(db, str(user_id))
    except StoreError as e:
        return _store_failure("fetch follow-ups", e)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({"success": True, "follow_ups": follow_ups})
    )


@router.post("/users/{user_id}/followups", status_code=status.HTTP_201_CREATED)
def schedule_followup(user_id: UUID, body: FollowUpCreateRequest,
                      admin: dict = Depends(require_admin),
                      db: Database = Depends(get_database)):
    """
    Request:
      POST /admin/users/<user_id>/followups
      { "title": "Monthly check-in", "description": "...",
        "follow_up_type": "check_in", "scheduled_date": "2026-11-01T09:00:00Z" }
    """
    try:
        if not get_user_by_id(db, str(user_id)):
            return _not_found("User")
        follow_up = create_followup(
            db,
            user_id=str(user_id),
            created_by=str(admin["id"]),
            **body.model_dump(),
        )
    except StoreError as e:
        return _store_failure("create follow-up", e)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder({"success": True, "follow_up": follow_up})
    )


@router.delete("/followups/{followup_id}", status_code=status.HTTP_200_OK)
def remove_followup(followup_id: UUID,
                    admin: dict = Depends(require_admin),
                    db: Database = Depends(get_database)):
    try:
        removed = delete_followup(db, str(followup_id))
    except StoreError as e:
        return _store_failure("delete follow-up", e)

    if not removed:
        return _not_found("Follow-up")

    print(f"[ADMIN] Follow-up {str(followup_id)[:8]}... deleted by {str(admin['id'])[:8]}...")
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": True, "message": "Follow-up deleted"}
    )
