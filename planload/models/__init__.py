"""Data models for the Travel Plan API."""
from .plan import (
    UUID_PATTERN,
    ConflictResult,
    HealthStatus,
    Location,
    LocationCreate,
    LocationUpdate,
    PlanLocation,
    TravelPlan,
    TravelPlanCreate,
    TravelPlanUpdate,
    ValidationErrorBody,
)

__all__ = [
    "UUID_PATTERN",
    "ConflictResult",
    "HealthStatus",
    "Location",
    "LocationCreate",
    "LocationUpdate",
    "PlanLocation",
    "TravelPlan",
    "TravelPlanCreate",
    "TravelPlanUpdate",
    "ValidationErrorBody",
]
