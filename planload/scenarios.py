"""
Load-test scenarios built from the API client helpers.

Each scenario is one virtual-user iteration. Failures are already logged and
counted by the helpers; scenarios only decide whether to keep going.
"""
import logging
import random
from typing import Optional, Union

from .models.plan import (
    ConflictResult,
    LocationCreate,
    LocationUpdate,
    TravelPlan,
    TravelPlanCreate,
    TravelPlanUpdate,
)
from .services.api_client import TravelPlanClient

logger = logging.getLogger(__name__)

CITIES = [
    ("Kyiv", 50.4501, 30.5234),
    ("Lviv", 49.8397, 24.0297),
    ("Paris", 48.8566, 2.3522),
    ("Rome", 41.9028, 12.4964),
    ("Barcelona", 41.3874, 2.1686),
    ("Prague", 50.0755, 14.4378),
]


def sample_plan_payload() -> TravelPlanCreate:
    """Random but valid plan payload."""
    return TravelPlanCreate(
        title=f"Load test trip {random.randint(1000, 999999)}",
        description="Created by a load-test virtual user",
        start_date="2026-06-01",
        end_date="2026-06-14",
        budget=round(random.uniform(500, 5000), 2),
        currency="EUR",
        is_public=random.choice([True, False]),
    )


def sample_location_payload() -> LocationCreate:
    name, lat, lon = random.choice(CITIES)
    return LocationCreate(
        name=name,
        latitude=lat,
        longitude=lon,
        budget=round(random.uniform(50, 800), 2),
        notes="Load test stop",
    )


def crud_lifecycle(
    client: TravelPlanClient,
    plan_data: Optional[TravelPlanCreate] = None,
    think: bool = False,
) -> bool:
    """
    Full plan lifecycle: create, read, add a location, update both, then
    delete everything and check the plan is gone.

    Returns True when every step succeeded.
    """
    def pause():
        if think:
            client.think_time()

    if not client.check_health():
        logger.error("API is not healthy, skipping lifecycle")
        return False

    plan = client.create_plan(plan_data or sample_plan_payload())
    if plan is None:
        return False
    pause()

    fetched = client.get_plan(plan.id)
    if fetched is None:
        return False
    pause()

    location = client.add_location(plan.id, sample_location_payload())
    if location is None:
        return False
    pause()

    updated = client.update_plan(plan.id, TravelPlanUpdate(
        title=f"{plan.title} (updated)",
        version=fetched.version,
    ))
    if not isinstance(updated, TravelPlan):
        return False
    pause()

    moved = client.update_location(location.id, LocationUpdate(notes="Updated by load test"))
    if moved is None or isinstance(moved, ConflictResult):
        return False

    if not client.delete_location(location.id):
        return False
    if not client.delete_plan(plan.id):
        return False
    return client.verify_plan_deleted(plan.id)


def optimistic_lock_race(
    client: TravelPlanClient,
    plan_id: str,
    version: int,
    attempts: int = 2,
) -> list[Union[TravelPlan, ConflictResult, None]]:
    """
    Send several updates that all claim the same version.

    Only the first can win; the others should come back as conflicts.
    """
    outcomes = []
    for attempt in range(attempts):
        outcomes.append(client.update_plan(plan_id, TravelPlanUpdate(
            title=f"Race attempt {attempt + 1}",
            version=version,
        )))

    wins = sum(1 for o in outcomes if isinstance(o, TravelPlan))
    conflicts = sum(1 for o in outcomes if isinstance(o, ConflictResult))
    logger.info(f"Optimistic lock race on {plan_id}: {wins} won, {conflicts} conflicted")
    return outcomes


def validation_suite(client: TravelPlanClient) -> bool:
    """Send invalid payloads to the API; True when every one was rejected with 400."""
    endpoints = client.endpoints
    attempts = [
        ("POST", endpoints.travel_plans, {"title": ""}),
        ("POST", endpoints.travel_plans, {"title": "Negative budget", "budget": -100}),
    ]

    plan = client.create_plan(sample_plan_payload())
    if plan is not None:
        attempts.extend([
            ("POST", endpoints.locations_for_plan(plan.id), {"name": "", "latitude": 200}),
            ("PUT", endpoints.travel_plan_by_id(plan.id), {"title": "No version"}),
        ])

    results = [client.expect_validation_error(method, url, data) for method, url, data in attempts]

    if plan is not None:
        client.delete_plan(plan.id)
    return plan is not None and all(results)
