# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + the configured storage roots.
"""

import os
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    - Whether each configured storage root is a readable directory
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "storage": {},
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    for name, root in request.app.state.storage_roots.items():
        if os.path.isdir(root) and os.access(root, os.R_OK):
            result["storage"][name] = "ok"
        else:
            result["storage"][name] = "unreachable"
            result["status"] = "degraded"

    return result
