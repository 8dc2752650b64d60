"""Tests for the load-test scenarios."""
import httpx

from conftest import plan_body, respond
from planload import scenarios
from planload.models import ConflictResult, TravelPlan
from planload.services.metrics import CONFLICT_COUNTER, ERROR_RATE


class TestCrudLifecycle:
    """Test the full lifecycle scenario."""

    def test_lifecycle_succeeds(self, stub_api, metrics):
        """Test the full lifecycle passes against the stub."""
        assert scenarios.crud_lifecycle(stub_api) is True

        assert metrics.rate(ERROR_RATE) == 0.0
        assert stub_api.list_plans() == []

    def test_lifecycle_with_think_time(self, stub_api, monkeypatch):
        """Test the lifecycle pauses between steps."""
        pauses = []
        monkeypatch.setattr(stub_api, "think_time", lambda *args: pauses.append(args))

        assert scenarios.crud_lifecycle(stub_api, think=True) is True
        assert len(pauses) == 4

    def test_stops_when_unhealthy(self, mock_api, metrics):
        """Test the lifecycle stops after a failed health check."""
        api = mock_api(respond(503, {"status": "down"}))

        assert scenarios.crud_lifecycle(api) is False
        assert len(metrics.requests) == 1

    def test_stops_when_create_fails(self, mock_api, metrics):
        """Test the lifecycle stops when the plan cannot be created."""
        def handler(request):
            if request.url.path.endswith("/health"):
                return httpx.Response(200, json={"status": "healthy"})
            return httpx.Response(500, json={"error": "Internal"})

        assert scenarios.crud_lifecycle(mock_api(handler)) is False
        assert len(metrics.requests) == 2


class TestOptimisticLockRace:
    """Test concurrent-update conflicts."""

    def test_one_wins_rest_conflict(self, stub_api, metrics):
        """Test only the first update with a given version wins."""
        plan = stub_api.create_plan(scenarios.sample_plan_payload())

        outcomes = scenarios.optimistic_lock_race(stub_api, plan.id, plan.version, attempts=3)

        assert isinstance(outcomes[0], TravelPlan)
        assert all(isinstance(o, ConflictResult) for o in outcomes[1:])
        assert metrics.count(CONFLICT_COUNTER) == 2
        assert metrics.rate(ERROR_RATE) == 0.0

    def test_race_against_conflicting_server(self, mock_api):
        """Test every attempt can conflict."""
        api = mock_api(respond(409, {"error": "Conflict"}))

        outcomes = scenarios.optimistic_lock_race(api, plan_body()["id"], 1)

        assert [type(o) for o in outcomes] == [ConflictResult, ConflictResult]


class TestValidationSuite:
    """Test the invalid-payload scenario."""

    def test_all_invalid_payloads_rejected(self, stub_api, metrics):
        """Test the stub rejects every invalid payload."""
        assert scenarios.validation_suite(stub_api) is True
        assert metrics.rate(ERROR_RATE) == 0.0
        assert stub_api.list_plans() == []

    def test_lenient_server_fails_suite(self, mock_api):
        """Test a server accepting invalid payloads fails the suite."""
        api = mock_api(respond(201, plan_body()))

        assert scenarios.validation_suite(api) is False


class TestPayloads:
    """Test fixture payload builders."""

    def test_plan_payload(self):
        """Test the generated plan payload."""
        payload = scenarios.sample_plan_payload()

        assert payload.title.startswith("Load test trip")
        assert 500 <= payload.budget <= 5000

    def test_location_payload(self):
        """Test the generated location payload."""
        payload = scenarios.sample_location_payload()

        assert payload.name in [city[0] for city in scenarios.CITIES]
