"""Load-testing helpers for the Travel Plan REST API."""
from .services import InMemoryMetrics, RequestValidator, TravelPlanClient

__all__ = ["InMemoryMetrics", "RequestValidator", "TravelPlanClient"]
