"""
Request Validator - Sends one HTTP call and checks its status code.

Every helper in the API client goes through RequestValidator.request():
the call is tagged for metrics, sent synchronously, its status compared
against the acceptable set, and the outcome recorded. HTTP-level mismatches
are logged and reported, never raised; transport errors propagate.
"""
import json
import logging
import re
import time
from typing import Any, Iterable, Optional, Union

import httpx
from pydantic import BaseModel

from ..config import settings
from .metrics import (
    CONFLICT_COUNTER,
    ERROR_RATE,
    MetricsSink,
    RequestSample,
    default_metrics,
)

_ID_SEGMENT = re.compile(r"/[0-9a-f-]{36}")

StatusSpec = Union[int, Iterable[int]]


def normalize_endpoint(url: str) -> str:
    """Replace path-embedded UUIDs with ':id' to keep metric tags low-cardinality."""
    return _ID_SEGMENT.sub("/:id", url)


def normalize_statuses(expected: StatusSpec) -> frozenset[int]:
    if isinstance(expected, int):
        return frozenset((expected,))
    return frozenset(expected)


def encode_body(body: Any) -> Optional[str]:
    """JSON-encode a request payload; any falsy value means no payload."""
    if not body:
        return None
    if isinstance(body, BaseModel):
        return body.model_dump_json(exclude_none=True)
    return json.dumps(body)


def format_statuses(statuses: Iterable[int]) -> str:
    return ",".join(str(s) for s in sorted(statuses))


class RequestValidator:
    """Issues HTTP calls and validates their status against an allow-list."""

    def __init__(
        self,
        http: httpx.Client,
        metrics: Optional[MetricsSink] = None,
        headers: Optional[dict[str, str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.http = http
        self.metrics = metrics if metrics is not None else default_metrics
        self.headers = dict(headers if headers is not None else settings.default_headers)
        self.logger = logger or logging.getLogger(__name__)

    def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        expected_statuses: StatusSpec = 200,
        operation_type: str = "read",
    ) -> httpx.Response:
        """
        Send a request and record whether its status was acceptable.

        Args:
            method: HTTP method
            url: Full target URL
            body: Payload (dict or pydantic model); falsy values send no body
            expected_statuses: One status code or an iterable of them
            operation_type: 'read' or 'write', used as a metric tag

        Returns:
            The raw httpx response
        """
        statuses = normalize_statuses(expected_statuses)
        tags = {
            "type": operation_type,
            "endpoint": normalize_endpoint(url),
        }

        started = time.perf_counter()
        response = self.http.request(
            method,
            url,
            content=encode_body(body),
            headers=self.headers,
        )
        elapsed_ms = (time.perf_counter() - started) * 1000

        expected = response.status_code in statuses
        self.metrics.observe(ERROR_RATE, 0 if expected else 1, tags)

        # Counted whether or not 409 was acceptable for this call
        if response.status_code == 409:
            self.metrics.increment(CONFLICT_COUNTER, 1, tags)

        self.metrics.record_request(RequestSample(
            method=method,
            endpoint=tags["endpoint"],
            operation_type=operation_type,
            status=response.status_code,
            elapsed_ms=elapsed_ms,
            response_length=len(response.content),
            expected=expected,
        ))

        if not expected:
            self.logger.error(
                f"API Error on {method} {tags['endpoint']}: expected status to be one of "
                f"[{format_statuses(statuses)}], but got {response.status_code}. "
                f"Response: {response.text}",
                extra={
                    "method": method,
                    "endpoint": tags["endpoint"],
                    "expected_statuses": sorted(statuses),
                    "status": response.status_code,
                    "body": response.text,
                },
            )

        return response
