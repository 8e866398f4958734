"""Versioned API router."""

from fastapi import APIRouter

from . import (
    auth,
    health,
    medications,
    people,
    reminders,
    reports,
    schedules,
    search,
    users,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(people.router, prefix="/people", tags=["people"])
router.include_router(medications.router, prefix="/medications", tags=["medications"])
router.include_router(schedules.router, tags=["schedules"])
router.include_router(search.router, prefix="/search", tags=["search"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])

__all__ = ["router"]
