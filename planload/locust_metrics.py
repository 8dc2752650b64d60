"""
Metrics sink that feeds Locust's request statistics.

Kept free of locust imports so it can be used without gevent patching.
"""
import weakref

from .services.metrics import InMemoryMetrics, RequestSample

_sinks: "weakref.WeakKeyDictionary" = weakref.WeakKeyDictionary()


class UnexpectedStatus(Exception):
    """Reported to Locust when a response status was not in the acceptable set."""


class LocustMetricsSink(InMemoryMetrics):
    """Aggregates in memory and forwards every request to Locust's `request` event.

    Raw samples are not retained; Locust keeps its own request statistics.
    """

    def __init__(self, request_event):
        super().__init__(history=0)
        self.request_event = request_event

    def record_request(self, sample: RequestSample) -> None:
        super().record_request(sample)
        self.request_event.fire(
            request_type=sample.method,
            name=sample.endpoint,
            response_time=sample.elapsed_ms,
            response_length=sample.response_length,
            exception=None if sample.expected else UnexpectedStatus(
                f"{sample.method} {sample.endpoint} returned {sample.status}"
            ),
            context={"type": sample.operation_type, "status": sample.status},
        )


def metrics_for(environment) -> LocustMetricsSink:
    """One shared sink per Locust environment."""
    sink = _sinks.get(environment)
    if sink is None:
        sink = LocustMetricsSink(environment.events.request)
        _sinks[environment] = sink
    return sink


def existing_metrics(environment):
    return _sinks.get(environment)
