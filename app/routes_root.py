# routes_root.py
"""
Root / basic endpoints (landing, health). Both are public.
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
def read_root():
    return {"message": "Finance Tracker API is running"}


@router.get("/health")
def health():
    return {"status": "ok"}
