"""
Travel plan models - Entities returned by the Travel Plan API and the
payloads sent to it.
"""
from pydantic import BaseModel, Field
from typing import Any, Literal, Optional


UUID_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"


class PlanLocation(BaseModel):
    """A location as nested inside a plan; servers may send a partial view."""
    id: Optional[str] = None
    travel_plan_id: Optional[str] = None
    name: Optional[str] = None
    visit_order: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    arrival_date: Optional[str] = None
    departure_date: Optional[str] = None
    budget: Optional[float] = None
    notes: Optional[str] = None
    version: Optional[int] = None


class Location(PlanLocation):
    """A stop inside a travel plan."""
    id: str = Field(..., description="Location identifier")
    travel_plan_id: str = Field(
        ...,
        description="Identifier of the owning travel plan"
    )
    name: str = Field(..., description="Name of the place")
    visit_order: int = Field(
        ...,
        description="Position of the stop within the plan (1-based)"
    )


class TravelPlan(BaseModel):
    """A travel plan with its ordered locations."""
    id: str = Field(..., description="Plan identifier")
    title: str = Field(..., description="Plan title")
    version: int = Field(
        ...,
        description="Optimistic-lock version, incremented on every update"
    )
    locations: list[PlanLocation] = Field(
        default_factory=list,
        description="Locations in visit order"
    )
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    budget: Optional[float] = None
    currency: Optional[str] = None
    is_public: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ConflictResult(BaseModel):
    """Returned by update helpers when the server answers 409."""
    conflict: Literal[True] = True
    body: Any = None


class HealthStatus(BaseModel):
    status: str


class ValidationErrorBody(BaseModel):
    error: str
    details: Any = None


# Request payloads

class TravelPlanCreate(BaseModel):
    """Body for POST /travel-plans."""
    title: str
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    budget: Optional[float] = None
    currency: Optional[str] = None
    is_public: Optional[bool] = None


class TravelPlanUpdate(TravelPlanCreate):
    """Body for PUT /travel-plans/{id}; version is the one the client last saw."""
    title: Optional[str] = None
    version: int = Field(..., ge=1)


class LocationCreate(BaseModel):
    """Body for POST /travel-plans/{id}/locations."""
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    arrival_date: Optional[str] = None
    departure_date: Optional[str] = None
    budget: Optional[float] = None
    notes: Optional[str] = None


class LocationUpdate(LocationCreate):
    """Body for PUT /locations/{id}."""
    name: Optional[str] = None
    version: Optional[int] = None
