"""
Locust integration - runs the helpers inside Locust virtual users.

Run against the stub server:
    python -m planload.main
    locust -f locustfile.py --host http://127.0.0.1:3000/api
"""
import logging

import httpx
from locust import User, between, events, task

from .config import Endpoints, settings
from .locust_metrics import existing_metrics, metrics_for
from .scenarios import crud_lifecycle, optimistic_lock_race, sample_plan_payload, validation_suite
from .services.api_client import TravelPlanClient
from .services.metrics import CONFLICT_COUNTER, ERROR_RATE

logger = logging.getLogger(__name__)


@events.test_stop.add_listener
def _log_summary(environment, **kwargs):
    sink = existing_metrics(environment)
    if sink is None:
        return
    logger.info(
        f"Run finished: {ERROR_RATE} rate={sink.rate(ERROR_RATE):.4f}, "
        f"{CONFLICT_COUNTER}={sink.count(CONFLICT_COUNTER)}, summary={sink.summary()}"
    )


class TravelPlanUser(User):
    """Base virtual user holding an httpx client and a TravelPlanClient."""
    abstract = True
    wait_time = between(settings.think_time_min, settings.think_time_max)

    def on_start(self):
        self.http = httpx.Client(timeout=settings.request_timeout)
        self.api = TravelPlanClient(
            self.http,
            metrics=metrics_for(self.environment),
            endpoints=Endpoints(self.host) if self.host else Endpoints(),
        )

    def on_stop(self):
        self.http.close()


class LifecycleUser(TravelPlanUser):
    """Mixed workload: CRUD lifecycles, version races and invalid payloads."""

    @task(5)
    def lifecycle(self):
        crud_lifecycle(self.api)

    @task(3)
    def browse(self):
        for plan in self.api.list_plans()[:3]:
            self.api.get_plan(plan.id)
            self.api.think_time(0.2, 0.5)

    @task(1)
    def version_race(self):
        plan = self.api.create_plan(sample_plan_payload())
        if plan is None:
            return
        optimistic_lock_race(self.api, plan.id, plan.version, attempts=2)
        self.api.delete_plan(plan.id)

    @task(1)
    def validation(self):
        validation_suite(self.api)
