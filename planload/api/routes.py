"""
API Routes for the stub Travel Plan service.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
from typing import Optional

from .store import NotFound, PlanStore, VersionConflict


router = APIRouter(prefix="/api", tags=["travel-plans"])


# Request Models

class PlanCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    budget: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    is_public: Optional[bool] = None


class PlanUpdateRequest(PlanCreateRequest):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    version: int = Field(..., ge=1)


class LocationCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    arrival_date: Optional[str] = None
    departure_date: Optional[str] = None
    budget: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class LocationUpdateRequest(LocationCreateRequest):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    version: Optional[int] = Field(None, ge=1)


def get_store(request: Request) -> PlanStore:
    return request.app.state.store


def _conflict(error: VersionConflict) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={
            "error": "Conflict",
            "message": str(error),
            "current_version": error.current_version,
        },
    )


# Endpoints

@router.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@router.post("/travel-plans", status_code=201)
def create_plan(payload: PlanCreateRequest, store: PlanStore = Depends(get_store)):
    plan = store.create_plan(payload.model_dump(exclude_none=True))
    return plan.model_dump()


@router.get("/travel-plans")
def list_plans(store: PlanStore = Depends(get_store)):
    return [plan.model_dump() for plan in store.list_plans()]


@router.get("/travel-plans/{plan_id}")
def get_plan(plan_id: str, store: PlanStore = Depends(get_store)):
    plan = store.get_plan(plan_id)
    if plan is None:
        raise HTTPException(status_code=404, detail="Travel plan not found")
    return plan.model_dump()


@router.put("/travel-plans/{plan_id}")
def update_plan(plan_id: str, payload: PlanUpdateRequest, store: PlanStore = Depends(get_store)):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"version"})
    try:
        plan = store.update_plan(plan_id, payload.version, changes)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VersionConflict as e:
        raise _conflict(e)
    return plan.model_dump()


@router.delete("/travel-plans/{plan_id}", status_code=204)
def delete_plan(plan_id: str, store: PlanStore = Depends(get_store)):
    try:
        store.delete_plan(plan_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.post("/travel-plans/{plan_id}/locations", status_code=201)
def add_location(plan_id: str, payload: LocationCreateRequest, store: PlanStore = Depends(get_store)):
    try:
        location = store.add_location(plan_id, payload.model_dump(exclude_none=True))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return location.model_dump()


@router.put("/locations/{location_id}")
def update_location(location_id: str, payload: LocationUpdateRequest, store: PlanStore = Depends(get_store)):
    changes = payload.model_dump(exclude_unset=True, exclude_none=True, exclude={"version"})
    try:
        location = store.update_location(location_id, payload.version, changes)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VersionConflict as e:
        raise _conflict(e)
    return location.model_dump()


@router.delete("/locations/{location_id}", status_code=204)
def delete_location(location_id: str, store: PlanStore = Depends(get_store)):
    try:
        store.delete_location(location_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
