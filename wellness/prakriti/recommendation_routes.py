"""
recommendation_routes.py
========================
Diet chart and daily routine derived from the user's current assessment.

Endpoints:
  GET /diet/chart      — meals for the primary dosha, breakfast → dinner
  GET /schedule/daily  — routine activities, grouped by time of day

Both use only the first dosha of a composite label ("Vata-Pitta" → "Vata").
"""

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from wellness.auth.dependencies import get_current_user
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database
from wellness.prakriti.scoring import (
    get_current_assessment,
    group_by_time_of_day,
    primary_dosha,
    select_recommendations_for_label,
)

router = APIRouter(tags=["Recommendations"])

NO_ASSESSMENT_MESSAGE = "Please complete your Prakriti assessment first"


def _assessment_summary(assessment: dict) -> dict:
    return {
        "dominant_dosha": assessment["dominant_dosha"],
        "primary_dosha": primary_dosha(assessment["dominant_dosha"]),
        "vata_score": assessment["vata_score"],
        "pitta_score": assessment["pitta_score"],
        "kapha_score": assessment["kapha_score"],
        "assessed_at": assessment.get("assessed_at"),
    }


def _load(db: Database, user_id: str, table: str):
    """(assessment | None, recommendations)"""
    assessment = get_current_assessment(db, user_id)
    if not assessment:
        return None, []
    return assessment, select_recommendations_for_label(db, assessment["dominant_dosha"], table)


@router.get("/diet/chart", status_code=status.HTTP_200_OK)
def diet_chart(user: dict = Depends(get_current_user),
               db: Database = Depends(get_database)):
    """
    Response:
      {
        "success": true,
        "assessment": { "dominant_dosha": "Vata-Pitta", "primary_dosha": "Vata", ... },
        "recommendations": [ { "meal_type": "breakfast", "food_items": [...], ... }, ... ]
      }
    """
    try:
        assessment, recommendations = _load(db, str(user["id"]), "diet")
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to load diet chart: {str(e)}"}
        )

    if not assessment:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": NO_ASSESSMENT_MESSAGE}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({
            "success": True,
            "assessment": _assessment_summary(assessment),
            "recommendations": recommendations,
        })
    )


@router.get("/schedule/daily", status_code=status.HTTP_200_OK)
def daily_schedule(user: dict = Depends(get_current_user),
                   db: Database = Depends(get_database)):
    """
    Response:
      {
        "success": true,
        "assessment": {...},
        "activities": [ ...in display_order... ],
        "schedule": [ { "time_of_day": "morning", "activities": [...] }, ... ]
      }
    """
    try:
        assessment, templates = _load(db, str(user["id"]), "schedule")
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to load daily schedule: {str(e)}"}
        )

    if not assessment:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": NO_ASSESSMENT_MESSAGE}
        )

    grouped = group_by_time_of_day(templates)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({
            "success": True,
            "assessment": _assessment_summary(assessment),
            "activities": templates,
            "schedule": [
                {"time_of_day": time_of_day, "activities": activities}
                for time_of_day, activities in grouped.items()
            ],
        })
    )
