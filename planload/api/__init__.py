"""Stub Travel Plan API used for local dry runs and tests."""
from .routes import router
from .store import PlanStore

__all__ = ["router", "PlanStore"]
