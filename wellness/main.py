"""
main.py — Prakriti Wellness API
================================
Run with:

    uvicorn wellness.main:app --reload --port 8000

Endpoints:
  /auth/*        signup, login
  /user/*        profile
  /prakriti/*    questions, assessment submit + current result
  /diet/chart    /schedule/daily
  /followups/*   /progress/*
  /admin/*       follow-up management (is_admin only)
  /dashboard     overview counts for the home screen
  /health
"""

from fastapi import Depends, FastAPI, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wellness.app_config import CORS_ORIGINS, SEED_REFERENCE_DATA
from wellness.auth.auth_config import warn_if_dev_secret
from wellness.auth.dependencies import get_current_user
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database
from wellness.db.schema import init_db
from wellness.db.seed import seed_reference_data
from wellness.followups.followup_db import count_pending
from wellness.prakriti.scoring import get_current_assessment

app = FastAPI(title="Prakriti Wellness API", version="1.0.0")

# ─────────────────────────────
# CORS Configuration
# ─────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─────────────────────────────
# Routers
# ─────────────────────────────
from wellness.auth.auth_routes import router as auth_router
from wellness.auth.profile_routes import router as profile_router
from wellness.prakriti.prakriti_routes import router as prakriti_router
from wellness.prakriti.recommendation_routes import router as recommendation_router
from wellness.followups.followup_routes import router as followup_router
from wellness.progress.progress_routes import router as progress_router
from wellness.admin.admin_routes import router as admin_router

app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(prakriti_router)
app.include_router(recommendation_router)
app.include_router(followup_router)
app.include_router(progress_router)
app.include_router(admin_router)


@app.on_event("startup")
async def startup_event():
    """Create tables and load bundled reference data on startup"""
    warn_if_dev_secret()
    init_db()
    if SEED_REFERENCE_DATA:
        seed_reference_data(get_database())


# ─────────────────────────────
# Dashboard
# ─────────────────────────────

@app.get("/dashboard", status_code=status.HTTP_200_OK)
def dashboard(user: dict = Depends(get_current_user),
              db: Database = Depends(get_database)):
    """
    Home screen summary.

    Response:
      {
        "success": true,
        "full_name": "Asha Rao",
        "is_admin": false,
        "has_assessment": true,
        "dominant_dosha": "Pitta-Kapha",
        "pending_followups": 2
      }
    """
    user_id = str(user["id"])
    try:
        assessment = get_current_assessment(db, user_id)
        pending = count_pending(db, user_id)
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to load dashboard: {str(e)}"}
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=jsonable_encoder({
            "success": True,
            "full_name": user.get("full_name"),
            "is_admin": bool(user.get("is_admin")),
            "has_assessment": assessment is not None,
            "dominant_dosha": assessment["dominant_dosha"] if assessment else None,
            "pending_followups": pending,
        })
    )


@app.get("/health")
def health():
    return {"status": "ok"}
