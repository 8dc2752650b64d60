"""
In-memory plan storage for the stub Travel Plan API.
"""
from datetime import datetime, timezone
from typing import Optional
import threading
import uuid

from ..models.plan import Location, TravelPlan


class NotFound(Exception):
    """No plan or location with the given id."""


class VersionConflict(Exception):
    """The client's version does not match the stored one."""

    def __init__(self, current_version: int):
        super().__init__(f"Version mismatch, current version is {current_version}")
        self.current_version = current_version


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class PlanStore:
    """
    Simple in-memory plan store with optimistic locking.

    Every method that returns a plan or location hands back a copy taken
    while the lock is held, so callers never see a half-applied update.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._plans: dict[str, TravelPlan] = {}
        self._location_owner: dict[str, str] = {}

    def create_plan(self, fields: dict) -> TravelPlan:
        now = _now()
        plan = TravelPlan(
            id=str(uuid.uuid4()),
            version=1,
            locations=[],
            created_at=now,
            updated_at=now,
            **fields,
        )
        with self._lock:
            self._plans[plan.id] = plan
            return plan.model_copy(deep=True)

    def get_plan(self, plan_id: str) -> Optional[TravelPlan]:
        with self._lock:
            plan = self._plans.get(plan_id)
            return plan.model_copy(deep=True) if plan is not None else None

    def list_plans(self) -> list[TravelPlan]:
        with self._lock:
            return [plan.model_copy(deep=True) for plan in self._plans.values()]

    def update_plan(self, plan_id: str, version: int, changes: dict) -> TravelPlan:
        with self._lock:
            plan = self._require_plan(plan_id)
            if plan.version != version:
                raise VersionConflict(plan.version)
            for key, value in changes.items():
                setattr(plan, key, value)
            plan.version += 1
            plan.updated_at = _now()
            return plan.model_copy(deep=True)

    def delete_plan(self, plan_id: str):
        with self._lock:
            plan = self._require_plan(plan_id)
            for location in plan.locations:
                self._location_owner.pop(location.id, None)
            del self._plans[plan_id]

    def add_location(self, plan_id: str, fields: dict) -> Location:
        with self._lock:
            plan = self._require_plan(plan_id)
            location = Location(
                id=str(uuid.uuid4()),
                travel_plan_id=plan_id,
                visit_order=len(plan.locations) + 1,
                version=1,
                **fields,
            )
            plan.locations.append(location)
            self._location_owner[location.id] = plan_id
            plan.updated_at = _now()
            return location.model_copy(deep=True)

    def update_location(self, location_id: str, version: Optional[int], changes: dict) -> Location:
        with self._lock:
            location = self._require_location(location_id)
            if version is not None and location.version != version:
                raise VersionConflict(location.version)
            for key, value in changes.items():
                setattr(location, key, value)
            location.version += 1
            return location.model_copy(deep=True)

    def delete_location(self, location_id: str):
        with self._lock:
            location = self._require_location(location_id)
            plan = self._plans[self._location_owner.pop(location_id)]
            plan.locations = [loc for loc in plan.locations if loc.id != location.id]
            # Keep visit_order contiguous
            for index, remaining in enumerate(plan.locations, start=1):
                remaining.visit_order = index
            plan.updated_at = _now()

    def _require_plan(self, plan_id: str) -> TravelPlan:
        plan = self._plans.get(plan_id)
        if plan is None:
            raise NotFound(f"Travel plan {plan_id} not found")
        return plan

    def _require_location(self, location_id: str) -> Location:
        plan_id = self._location_owner.get(location_id)
        if plan_id is None:
            raise NotFound(f"Location {location_id} not found")
        for location in self._plans[plan_id].locations:
            if location.id == location_id:
                return location
        raise NotFound(f"Location {location_id} not found")
