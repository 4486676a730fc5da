import pytest
import requests

from routing.distance_matrix_client import DistanceMatrixClient, DistanceMatrixError
from routing.eta_service import (
    EtaResolver,
    ProviderUnavailableError,
    RouteUnresolvableError,
    seconds_to_minutes,
)
from routing.policy import RoutingPolicy


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def matrix_payload(element_status="OK", in_traffic=1530, duration=1400, top_status="OK"):
    element = {"status": element_status}
    if element_status == "OK":
        element["duration"] = {"value": duration, "text": "23 mins"}
        if in_traffic is not None:
            element["duration_in_traffic"] = {"value": in_traffic, "text": "26 mins"}
    return {"status": top_status, "rows": [{"elements": [element]}]}


@pytest.fixture
def client():
    return DistanceMatrixClient(api_key="test-key", base_url="https://maps.example/distancematrix/json")


def test_resolver_rounds_traffic_duration_to_minutes(client, monkeypatch):
    captured = {}

    def fake_get(url, params=None, timeout=None):
        captured.update(url=url, params=params, timeout=timeout)
        return FakeResponse(matrix_payload(in_traffic=1530))

    monkeypatch.setattr(requests, "get", fake_get)

    minutes = EtaResolver(client).resolve_eta("Samora Machel Ave, Harare", "Seke Rd, Chitungwiza")

    # 1530 s = 25.5 min, halves round up
    assert minutes == 26
    assert captured["params"]["origins"] == "Samora Machel Ave, Harare"
    assert captured["params"]["destinations"] == "Seke Rd, Chitungwiza"
    assert captured["params"]["departure_time"] == "now"
    assert captured["params"]["key"] == "test-key"
    assert captured["timeout"] == client.policy.timeout_seconds


def test_resolver_falls_back_to_plain_duration(client, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(matrix_payload(in_traffic=None, duration=600)))
    assert EtaResolver(client).resolve_eta("A", "B") == 10


@pytest.mark.parametrize("element_status", ["NOT_FOUND", "ZERO_RESULTS", "MAX_ROUTE_LENGTH_EXCEEDED"])
def test_non_ok_element_is_unresolvable(client, monkeypatch, element_status):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(matrix_payload(element_status=element_status)))
    with pytest.raises(RouteUnresolvableError) as excinfo:
        EtaResolver(client).resolve_eta("Nowhere", "Somewhere")
    assert excinfo.value.kind == "RouteUnresolvable"


def test_timeout_is_provider_unavailable(client, monkeypatch):
    def fake_get(*args, **kwargs):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr(requests, "get", fake_get)
    with pytest.raises(ProviderUnavailableError):
        EtaResolver(client).resolve_eta("A", "B")


def test_http_error_is_provider_unavailable(client, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse({}, status_code=503))
    with pytest.raises(ProviderUnavailableError):
        EtaResolver(client).resolve_eta("A", "B")


def test_request_denied_is_provider_unavailable(client, monkeypatch):
    payload = {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
    monkeypatch.setattr(requests, "get", lambda *a, **kw: FakeResponse(payload))

    with pytest.raises(DistanceMatrixError):
        client.travel_time("A", "B")
    with pytest.raises(ProviderUnavailableError):
        EtaResolver(client).resolve_eta("A", "B")


def test_missing_api_key_never_calls_provider(monkeypatch):
    def fake_get(*args, **kwargs):
        raise AssertionError("provider must not be called without a key")

    monkeypatch.setattr(requests, "get", fake_get)
    monkeypatch.setattr("routing.distance_matrix_client.MAPS_API_KEY", None)

    with pytest.raises(ProviderUnavailableError):
        EtaResolver(DistanceMatrixClient(api_key=None)).resolve_eta("A", "B")


@pytest.mark.parametrize("seconds, minutes", [(0, 0), (29, 0), (30, 1), (89, 1), (90, 2), (3600, 60)])
def test_seconds_to_minutes(seconds, minutes):
    assert seconds_to_minutes(seconds) == minutes


def test_routing_policy_validation():
    with pytest.raises(ValueError):
        RoutingPolicy(timeout_seconds=0).validate()
    with pytest.raises(ValueError):
        RoutingPolicy(traffic_model="fast").validate()
