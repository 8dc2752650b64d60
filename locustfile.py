"""
Locust entry point for the Travel Plan API load test.

    locust -f locustfile.py --host http://127.0.0.1:3000/api
"""
from planload.config import configure_logging
from planload.locust_support import LifecycleUser  # noqa: F401

configure_logging()
