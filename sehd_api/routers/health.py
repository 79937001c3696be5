import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from ..config import settings
from ..db import get_session
from ..models import AcademicProgram, AcademicTerm, AdmissionRecord, Department, EnrollmentGoal, User
from ..security import require_roles


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

# Only mounted when settings.debug is on
diagnostics_router = APIRouter(prefix="/health", tags=["health"])

API_ENDPOINTS = [
    "/api/health",
    "/api/auth/login",
    "/api/departments",
    "/api/programs",
    "/api/terms",
    "/api/admissionsdata",
]

_COUNTED = {
    "users": User,
    "departments": Department,
    "programs": AcademicProgram,
    "terms": AcademicTerm,
    "admissionRecords": AdmissionRecord,
    "enrollmentGoals": EnrollmentGoal,
}


@router.get("")
def get_health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "message": "SEHD API is running successfully!",
    }


@router.get("/info")
def get_info():
    return {
        "apiName": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc),
        "endpoints": API_ENDPOINTS,
    }


def count_entities(session) -> dict:
    return {name: session.exec(select(func.count()).select_from(model)).one() for name, model in _COUNTED.items()}


@diagnostics_router.get("/diagnostics")
def get_diagnostics(session=Depends(get_session), claims=Depends(require_roles("admin"))):
    try:
        counts = count_entities(session)
    except SQLAlchemyError as exc:
        logger.exception("Diagnostics query failed")
        return {"status": "degraded", "database": settings.database_url.split("://", 1)[0], "error": exc.__class__.__name__}
    return {"status": "healthy", "database": settings.database_url.split("://", 1)[0], "counts": counts}
