"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (sessions, registrations,
evaluations, awards, reports, users) under a unified prefix.
"""

from fastapi import APIRouter

from .endpoints import awards, evaluations, registrations, reports, sessions, users

router = APIRouter()

router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
router.include_router(registrations.router, prefix="/registrations", tags=["registrations"])
router.include_router(evaluations.router, prefix="/evaluations", tags=["evaluations"])
router.include_router(awards.router, prefix="/awards", tags=["awards"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(users.router, prefix="/users", tags=["users"])
