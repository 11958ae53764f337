"""
dependencies.py
===============
Request-level auth helpers shared by every router.

  get_current_user  — decodes the Bearer JWT and loads the caller's users row
  require_admin     — same, but rejects callers whose is_admin flag is false

Header format: Authorization: Bearer <token>
JWT payload contains: { "sub": "<user_id>", "email": "...", "exp": ... }
"""

from fastapi import Depends, HTTPException, Request, status
from jose import jwt, JWTError

from wellness.auth.auth_config import JWT_SECRET_KEY, JWT_ALGORITHM
from wellness.auth.auth_db import get_user_by_id
from wellness.db.connection import StoreError
from wellness.db.record_store import Database, get_database


def extract_user_id_from_request(request: Request) -> str | None:
    """
    Extract and decode JWT from Authorization header.
    Returns user_id (str) if valid, None if missing/invalid/expired.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        return payload.get("sub")  # sub = user_id
    except JWTError:
        return None


def get_current_user(request: Request, db: Database = Depends(get_database)) -> dict:
    user_id = extract_user_id_from_request(request)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"success": False, "message": "Invalid token"}
        )

    try:
        user = get_user_by_id(db, user_id)
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"success": False, "message": f"Failed to load user: {str(e)}"}
        )

    # Token outlived its account
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"success": False, "message": "Invalid token"}
        )
    return user


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not user.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"success": False, "message": "Admin access required"}
        )
    return user
