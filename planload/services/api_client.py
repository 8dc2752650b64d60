"""
Travel Plan API client for load-test scripts.

Each helper is a single request/response exchange: dispatch through the
RequestValidator, check the status, decode the body into a typed result and
assert the entity invariants. Failures are logged and turned into a None,
False or empty-list return; nothing is retried.
"""
import logging
import random
import re
import time
from typing import Any, Callable, Optional, TypeVar, Union

import httpx
from pydantic import BaseModel

from ..config import Endpoints, settings
from ..errors import CheckFailedError, MalformedBodyError, ResponseBodyError
from ..models.plan import (
    ConflictResult,
    HealthStatus,
    Location,
    TravelPlan,
    UUID_PATTERN,
    ValidationErrorBody,
)
from .decoding import decode, parse_json, validate_items
from .metrics import CHECKS, MetricsSink
from .request_validator import RequestValidator, encode_body, normalize_endpoint

ModelT = TypeVar("ModelT", bound=BaseModel)
Payload = Union[dict, BaseModel, None]


def _payload_field(payload: Payload, name: str) -> Any:
    if isinstance(payload, BaseModel):
        return getattr(payload, name, None)
    if isinstance(payload, dict):
        return payload.get(name)
    return None


def _holds(predicate: Callable[[Any], bool], entity: Any) -> bool:
    # A predicate that cannot be evaluated against the body counts as failed.
    try:
        return bool(predicate(entity))
    except (TypeError, ValueError, AttributeError):
        return False


class TravelPlanClient:
    """Helpers for the Travel Plan API, one instance per virtual user."""

    def __init__(
        self,
        http: httpx.Client,
        metrics: Optional[MetricsSink] = None,
        endpoints: Optional[Endpoints] = None,
        headers: Optional[dict[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.validator = RequestValidator(http, metrics=metrics, headers=headers, logger=self.logger)
        self.metrics = self.validator.metrics
        self.endpoints = endpoints or Endpoints()

    # Plans

    def create_plan(self, plan_data: Payload) -> Optional[TravelPlan]:
        """Create a travel plan. Returns the plan or None."""
        url = self.endpoints.travel_plans
        response = self.validator.request("POST", url, plan_data, 201, "write")

        if not self._check("plan created successfully", response.status_code == 201):
            self._log_failed_call("POST", url, response, plan_data)
            return None

        plan = self._decode_checked(response, TravelPlan, "plan creation", {
            "plan has valid UUID": lambda p: re.match(UUID_PATTERN, p.id) is not None,
            "plan has version 1": lambda p: p.version == 1,
        })
        if plan is not None:
            self.logger.info(f"Created plan {plan.id}, title=\"{plan.title}\", version={plan.version}")
        return plan

    def get_plan(self, plan_id: str) -> Optional[TravelPlan]:
        """Fetch a travel plan by id. Returns the plan or None."""
        url = self.endpoints.travel_plan_by_id(plan_id)
        response = self.validator.request("GET", url, None, 200, "read")

        if not self._check("plan retrieved successfully", response.status_code == 200):
            return None

        plan = self._decode_checked(response, TravelPlan, f"plan {plan_id}", {
            "plan has locations array": lambda p: "locations" in p.model_fields_set,
        })
        if plan is not None:
            self.logger.info(f"Retrieved plan {plan_id}: title=\"{plan.title}\", locations={len(plan.locations)}")
        return plan

    def update_plan(self, plan_id: str, update_data: Payload) -> Union[TravelPlan, ConflictResult, None]:
        """
        Update a travel plan with optimistic locking.

        update_data should carry the version the caller last saw. On 200 the
        returned plan must have that version + 1; on 409 a ConflictResult is
        returned.
        """
        url = self.endpoints.travel_plan_by_id(plan_id)
        response = self.validator.request("PUT", url, update_data, [200, 409], "write")
        self._check("plan updated successfully", response.status_code == 200)

        if response.status_code == 409:
            return self._conflict(response, f"plan {plan_id}")
        if response.status_code != 200:
            return None

        sent_version = _payload_field(update_data, "version")
        return self._decode_checked(response, TravelPlan, f"plan {plan_id} update", {
            "version incremented": lambda p: sent_version is None or (
                isinstance(sent_version, int) and p.version == sent_version + 1
            ),
        })

    def delete_plan(self, plan_id: str) -> bool:
        url = self.endpoints.travel_plan_by_id(plan_id)
        response = self.validator.request("DELETE", url, None, 204, "write")
        return self._check("plan deleted successfully", response.status_code == 204)

    def verify_plan_deleted(self, plan_id: str) -> bool:
        """True when the plan is gone (GET answers 404)."""
        url = self.endpoints.travel_plan_by_id(plan_id)
        response = self.validator.request("GET", url, None, 404, "read")

        is_deleted = self._check("plan is deleted (404)", response.status_code == 404)
        if is_deleted:
            self.logger.info(f"Verified plan {plan_id} is deleted (404)")
        else:
            self.logger.error(
                f"Plan {plan_id} should be deleted but returned status {response.status_code}",
                extra={"status": response.status_code, "body": response.text},
            )
        return is_deleted

    def list_plans(self) -> list[TravelPlan]:
        """List all plans. Items that do not decode are logged and skipped; a failed call gives []."""
        response = self.validator.request("GET", self.endpoints.travel_plans, None, 200, "read")

        if not self._check("plans list retrieved", response.status_code == 200):
            return []

        try:
            plans, rejected = validate_items(parse_json(response), TravelPlan, response.text)
        except ResponseBodyError as e:
            self._check("response is array", False)
            self._log_body_error("plan list", e)
            return []

        self._check("response is array", True)
        self._check("list items decode", not rejected)
        for error in rejected:
            self._log_body_error("plan list item", error, status=response.status_code)
        return plans

    # Locations

    def add_location(self, plan_id: str, location_data: Payload) -> Optional[Location]:
        """Add a location to a plan. Returns the location or None."""
        url = self.endpoints.locations_for_plan(plan_id)
        response = self.validator.request("POST", url, location_data, 201, "write")

        if not self._check("location created successfully", response.status_code == 201):
            self._log_failed_call("POST", url, response, location_data)
            return None

        location = self._decode_checked(response, Location, "location creation", {
            "location has visit_order": lambda loc: loc.visit_order >= 1,
            "location linked to plan": lambda loc: loc.travel_plan_id == plan_id,
        })
        if location is not None:
            self.logger.info(
                f"Added location {location.id}, name=\"{location.name}\", visit_order={location.visit_order}"
            )
        return location

    def update_location(self, location_id: str, update_data: Payload) -> Union[Location, ConflictResult, None]:
        url = self.endpoints.location_by_id(location_id)
        response = self.validator.request("PUT", url, update_data, [200, 409], "write")
        self._check("location updated successfully", response.status_code == 200)

        if response.status_code == 409:
            return self._conflict(response, f"location {location_id}")
        if response.status_code != 200:
            return None
        return self._decode_checked(response, Location, f"location {location_id} update", {})

    def delete_location(self, location_id: str) -> bool:
        url = self.endpoints.location_by_id(location_id)
        response = self.validator.request("DELETE", url, None, 204, "write")
        return self._check("location deleted successfully", response.status_code == 204)

    # Misc

    def check_health(self) -> bool:
        response = self.validator.request("GET", self.endpoints.health, None, 200, "read")
        if not self._check("API is healthy", response.status_code == 200):
            return False
        status = self._decode_checked(response, HealthStatus, "health check", {
            "status is healthy": lambda h: h.status == "healthy",
        })
        return status is not None

    def expect_validation_error(self, method: str, url: str, invalid_data: Payload) -> bool:
        """
        Send an invalid payload and expect a 400 validation error.

        Returns True when the server rejected it with an error message
        mentioning validation.
        """
        operation_type = "read" if method.upper() == "GET" else "write"
        response = self.validator.request(method, url, invalid_data, 400, operation_type)
        if not self._check("validation error returned", response.status_code == 400):
            return False
        error = self._decode_checked(response, ValidationErrorBody, "validation check", {
            "error message present": lambda b: "Validation" in b.error,
        })
        return error is not None

    def think_time(self, min_s: Optional[float] = None, max_s: Optional[float] = None) -> float:
        """Pause for a random duration to emulate human pacing."""
        low = settings.think_time_min if min_s is None else min_s
        high = settings.think_time_max if max_s is None else max_s
        duration = random.uniform(low, high)
        time.sleep(duration)
        return duration

    # Internals

    def _check(self, name: str, passed: bool) -> bool:
        self.metrics.observe(CHECKS, 1 if passed else 0, {"check": name})
        return passed

    def _decode_checked(
        self,
        response: httpx.Response,
        model: type[ModelT],
        action: str,
        checks: dict[str, Callable[[ModelT], bool]],
    ) -> Optional[ModelT]:
        try:
            entity = decode(response, model)
        except ResponseBodyError as e:
            self._check("response body decodes", False)
            self._log_body_error(action, e)
            return None
        self._check("response body decodes", True)

        failed = [name for name, predicate in checks.items() if not self._check(name, _holds(predicate, entity))]
        if failed:
            self._log_body_error(
                action,
                CheckFailedError(f"Checks failed: {', '.join(failed)}", response.text),
                status=response.status_code,
            )
            return None
        return entity

    def _conflict(self, response: httpx.Response, target: str) -> Optional[ConflictResult]:
        try:
            body = parse_json(response)
        except MalformedBodyError as e:
            self._log_body_error(f"{target} conflict", e)
            return None
        self.logger.warning(f"Version conflict (409) updating {target}")
        return ConflictResult(body=body)

    def _log_body_error(self, action: str, error: ResponseBodyError, status: Optional[int] = None):
        if isinstance(error, MalformedBodyError):
            message = f"Failed to parse response body for {action}: {error}"
        elif isinstance(error, CheckFailedError):
            message = f"{error} for {action}"
        else:
            message = f"Unexpected response shape for {action}: {error}"
        self.logger.error(
            message,
            extra={"error_kind": type(error).__name__, "status": status, "body": error.raw_body},
        )

    def _log_failed_call(self, method: str, url: str, response: httpx.Response, payload: Payload):
        self.logger.error(
            f"{method} {normalize_endpoint(url)} failed with status {response.status_code}. "
            f"Request data: {encode_body(payload)}",
            extra={"status": response.status_code, "body": response.text},
        )
