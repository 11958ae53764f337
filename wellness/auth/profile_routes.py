"""
profile_routes.py
=================
FastAPI router for the user's own profile.

Endpoints:
  GET /user/profile  — fetch stored profile
  PUT /user/profile  — update personal and health details

Authentication:
  All endpoints require: Authorization: Bearer <jwt_token>
  user_id is extracted from the token — never sent in request body.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wellness.auth.dependencies import get_current_user
from wellness.auth.profile_db import get_profile, update_profile, public_profile
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database

# ─────────────────────────────
# Router
# ─────────────────────────────
router = APIRouter(prefix="/user", tags=["User Profile"])


# ─────────────────────────────
# Request Model
# ─────────────────────────────

class ProfileUpdateRequest(BaseModel):
    full_name: str
    age: Optional[int] = Field(default=None, ge=1, le=120)
    gender: Optional[Literal["male", "female", "other"]] = None
    height: Optional[float] = Field(default=None, gt=0)   # cm
    weight: Optional[float] = Field(default=None, gt=0)   # kg
    medical_conditions: list[str] = []
    allergies: list[str] = []


# ─────────────────────────────
# Endpoints
# ─────────────────────────────

@router.get("/profile", status_code=status.HTTP_200_OK)
def read_profile(user: dict = Depends(get_current_user)):
    """
    Fetch stored profile for the authenticated user.

    Response:
      { "success": true, "profile": { "full_name": "...", "age": 31, ... } }
    """
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": True, "profile": jsonable_encoder(public_profile(user))}
    )


@router.put("/profile", status_code=status.HTTP_200_OK)
def write_profile(body: ProfileUpdateRequest,
                  user: dict = Depends(get_current_user),
                  db: Database = Depends(get_database)):
    """
    Replace the profile fields of the authenticated user.

    Request:
      PUT /user/profile
      {
        "full_name": "Asha Rao", "age": 31, "gender": "female",
        "height": 162, "weight": 58.5,
        "medical_conditions": ["asthma"], "allergies": ["peanuts"]
      }
    """
    user_id = str(user["id"])
    try:
        update_profile(db, user_id, body.model_dump())
        profile = get_profile(db, user_id)
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to update profile: {str(e)}"}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "message": "Profile updated successfully",
            "profile": jsonable_encoder(profile),
        }
    )
