"""Shared fixtures."""
import json
import uuid

import httpx
import pytest
from fastapi.testclient import TestClient

from planload.config import Endpoints
from planload.main import create_app
from planload.services.api_client import TravelPlanClient
from planload.services.metrics import InMemoryMetrics

BASE_URL = "http://testserver/api"


@pytest.fixture
def metrics():
    return InMemoryMetrics()


@pytest.fixture
def endpoints():
    return Endpoints(BASE_URL)


@pytest.fixture
def stub_api(metrics, endpoints):
    """TravelPlanClient talking to a fresh in-memory stub server."""
    with TestClient(create_app()) as http:
        yield TravelPlanClient(http, metrics=metrics, endpoints=endpoints)


@pytest.fixture
def mock_api(metrics, endpoints):
    """Factory: TravelPlanClient whose responses come from a handler function."""
    clients = []

    def make(handler):
        http = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(http)
        return TravelPlanClient(http, metrics=metrics, endpoints=endpoints)

    yield make
    for http in clients:
        http.close()


def new_id() -> str:
    return str(uuid.uuid4())


def plan_body(**overrides) -> dict:
    body = {
        "id": new_id(),
        "title": "Summer in Lviv",
        "version": 1,
        "locations": [],
    }
    body.update(overrides)
    return body


def location_body(plan_id: str, **overrides) -> dict:
    body = {
        "id": new_id(),
        "travel_plan_id": plan_id,
        "name": "Rynok Square",
        "visit_order": 1,
    }
    body.update(overrides)
    return body


def respond(status: int, body=None, raw: str = None):
    """Handler that always answers with the given status and body."""
    def handler(request: httpx.Request) -> httpx.Response:
        if raw is not None:
            return httpx.Response(status, content=raw.encode())
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, content=json.dumps(body).encode())
    return handler
