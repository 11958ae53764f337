"""
prakriti_routes.py
==================
FastAPI router for the Prakriti (constitution) assessment.

Endpoints:
  GET  /prakriti/questions            — questions in display order, 3 options each
  POST /prakriti/assessment/progress  — where a partial answer set stands
  POST /prakriti/assessment           — score + store a completed answer set
  GET  /prakriti/assessment/current   — the user's most recent result

The app keeps the answer set locally while the user moves between questions
and sends the whole set on submit. Retaking creates a new result row; older
results are kept.
"""

from typing import Literal

from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wellness.auth.dependencies import get_current_user
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database
from wellness.prakriti.scoring import (
    AssessmentFlow,
    IncompleteAssessmentError,
    get_current_assessment,
    load_questions,
)

router = APIRouter(prefix="/prakriti", tags=["Prakriti Assessment"])


# ─────────────────────────────
# Request models
# ─────────────────────────────

class AnswersRequest(BaseModel):
    # { question_id: "vata" | "pitta" | "kapha" }
    answers: dict[str, Literal["vata", "pitta", "kapha"]]


# ─────────────────────────────
# Helpers
# ─────────────────────────────

def build_question_response(question: dict) -> dict:
    """Flatten a prakriti_questions row into the app's option list format."""
    return {
        "question_id": str(question["id"]),
        "category": question["category"],
        "text": question["question"],
        "display_order": question["display_order"],
        "options": [
            {"dosha": "vata", "text": question["vata_option"]},
            {"dosha": "pitta", "text": question["pitta_option"]},
            {"dosha": "kapha", "text": question["kapha_option"]},
        ],
    }


def _build_flow(db: Database, answers: dict) -> AssessmentFlow:
    """Raises KeyError for an answer to a question that does not exist."""
    questions = load_questions(db)
    return AssessmentFlow([str(q["id"]) for q in questions], answers)


def _store_failure(action: str, e: StoreError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": f"Failed to {action}: {str(e)}"}
    )


def _unknown_question(e: KeyError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": f"Unknown question: {e.args[0]}"}
    )


# ─────────────────────────────
# Endpoints
# ─────────────────────────────

@router.get("/questions", status_code=status.HTTP_200_OK)
def list_questions(user: dict = Depends(get_current_user),
                   db: Database = Depends(get_database)):
    try:
        questions = load_questions(db)
    except StoreError as e:
        return _store_failure("load questions", e)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "total": len(questions),
            "questions": [build_question_response(q) for q in questions],
        }
    )


@router.post("/assessment/progress", status_code=status.HTTP_200_OK)
def assessment_progress(body: AnswersRequest,
                        user: dict = Depends(get_current_user),
                        db: Database = Depends(get_database)):
    """
    Report how far along a partial answer set is.

    Response:
      {
        "success": true,
        "state": "in_progress",
        "answered": 7, "total": 12,
        "unanswered_question_ids": ["...", ...]
      }
    """
    try:
        flow = _build_flow(db, body.answers)
    except StoreError as e:
        return _store_failure("load questions", e)
    except KeyError as e:
        return _unknown_question(e)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "state": flow.state.value,
            "answered": flow.answered,
            "total": flow.total,
            "unanswered_question_ids": flow.unanswered_ids(),
        }
    )


@router.post("/assessment", status_code=status.HTTP_201_CREATED)
def submit(body: AnswersRequest,
           user: dict = Depends(get_current_user),
           db: Database = Depends(get_database)):
    """
    Score a completed answer set and store the result.

    Request:
      POST /prakriti/assessment
      { "answers": { "<question_id>": "vata", "<question_id>": "kapha", ... } }

    Response (201):
      {
        "success": true,
        "assessment": {
          "id": "...", "vata_score": 5, "pitta_score": 4, "kapha_score": 3,
          "dominant_dosha": "Vata", "assessment_data": {...}, "assessed_at": "..."
        }
      }

    400 if any question is unanswered (nothing is stored).
    """
    try:
        flow = _build_flow(db, body.answers)
        assessment = flow.submit(db, str(user["id"]))
    except KeyError as e:
        return _unknown_question(e)
    except IncompleteAssessmentError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": str(e),
                "answered": e.answered,
                "total": e.total,
            }
        )
    except StoreError as e:
        return _store_failure("save assessment", e)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"success": True, "assessment": jsonable_encoder(assessment)}
    )


@router.get("/assessment/current", status_code=status.HTTP_200_OK)
def current_assessment(user: dict = Depends(get_current_user),
                       db: Database = Depends(get_database)):
    try:
        assessment = get_current_assessment(db, str(user["id"]))
    except StoreError as e:
        return _store_failure("fetch assessment", e)

    if not assessment:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "message": "No assessment found"}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": True, "assessment": jsonable_encoder(assessment)}
    )
