from datetime import datetime, timezone

import pytest

from jobs.service import JobService
from jobs.store import InMemoryJobStore
from routing.eta_service import ProviderUnavailableError


class FakeEtaResolver:
    """
    Stands in for routing.eta_service.EtaResolver.
    Returns `minutes`, or raises `error` if one is set. Records every call.
    """
    def __init__(self, minutes=42, error=None):
        self.minutes = minutes
        self.error = error
        self.calls = []

    def resolve_eta(self, origin_address, destination_address):
        self.calls.append((origin_address, destination_address))
        if self.error is not None:
            raise self.error
        return self.minutes


FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def eta_resolver():
    return FakeEtaResolver()


@pytest.fixture
def failing_eta_resolver():
    return FakeEtaResolver(error=ProviderUnavailableError("connection refused"))


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def service(store, eta_resolver):
    return JobService(store=store, eta_resolver=eta_resolver, clock=lambda: FIXED_NOW)


@pytest.fixture
def job_input():
    def make(reference="JOB-001", collection_time="2024-03-01T08:00:00Z", **overrides):
        data = {
            "reference_number": reference,
            "customer_name": "Harare Hardware",
            "driver_name": "Tendai Moyo",
            "collection_address": "Samora Machel Ave, Harare",
            "delivery_address": "Seke Rd, Chitungwiza",
            "collection_time": collection_time,
        }
        data.update(overrides)
        return data
    return make
