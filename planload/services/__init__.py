"""Services for the load-testing helpers."""
from .api_client import TravelPlanClient
from .metrics import InMemoryMetrics, MetricsSink, RequestSample
from .request_validator import RequestValidator, normalize_endpoint

__all__ = [
    "TravelPlanClient",
    "InMemoryMetrics",
    "MetricsSink",
    "RequestSample",
    "RequestValidator",
    "normalize_endpoint",
]
