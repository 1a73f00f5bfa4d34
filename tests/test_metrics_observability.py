from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi import Request, Response
from prometheus_client import REGISTRY

import app.main as main_module
from app.core.metrics import instrument_http_request
from app.modules.notifications.push import SendResult
from app.modules.notifications.service import NotificationsService, PushMessage


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def _make_request(method: str, path: str, route_path: str | None = None) -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": [],
        "client": ("127.0.0.1", 12345),
        "scheme": "http",
        "server": ("testserver", 80),
        "query_string": b"",
    }
    if route_path is not None:
        scope["route"] = SimpleNamespace(path=route_path)
    return Request(scope)


@pytest.mark.asyncio
async def test_http_metrics_label_booking_routes_by_template() -> None:
    template = "/api/v1/bookings/pair-slots/{booking_id}/approve"
    labels = {"method": "PATCH", "path": template, "status_code": "409"}
    before = _sample("pairslots_http_requests_total", labels)

    async def _conflict(_: Request) -> Response:
        return Response(status_code=409)

    for booking_id in ("5d9f0f9e-0000-4000-8000-000000000001", "5d9f0f9e-0000-4000-8000-000000000002"):
        request = _make_request("PATCH", f"/api/v1/bookings/pair-slots/{booking_id}/approve", template)
        await instrument_http_request(request, _conflict)

    assert _sample("pairslots_http_requests_total", labels) == before + 2
    assert _sample(
        "pairslots_http_request_duration_seconds_count",
        {"method": "PATCH", "path": template},
    ) >= 2


@pytest.mark.asyncio
async def test_http_metrics_count_failed_handlers_as_500() -> None:
    labels = {"method": "POST", "path": "/api/v1/bookings/pair-slots", "status_code": "500"}
    before = _sample("pairslots_http_requests_total", labels)

    async def _explode(_: Request) -> Response:
        raise RuntimeError("database went away")

    with pytest.raises(RuntimeError):
        await instrument_http_request(_make_request("POST", "/api/v1/bookings/pair-slots"), _explode)

    assert _sample("pairslots_http_requests_total", labels) == before + 1


class ScriptedSender:
    def __init__(self, outcomes: list[bool]) -> None:
        self.outcomes = list(outcomes)

    async def send(self, device_token: str, message: tuple[str, str]) -> SendResult:
        success = self.outcomes.pop(0)
        return SendResult(success=success, message="send successful" if success else "oops! cannot send")

    async def aclose(self) -> None:
        return None


@pytest.mark.asyncio
async def test_push_delivery_counter_tracks_each_outcome() -> None:
    sent_before = _sample("pairslots_push_deliveries_total", {"status": "sent"})
    failed_before = _sample("pairslots_push_deliveries_total", {"status": "failed"})
    service = NotificationsService(ScriptedSender([True, False, True]))

    await service.deliver(
        PushMessage(device_token="token-bob", title="New pair slot request", body="09:00-09:30"),
        PushMessage(device_token="token-stale", title="Pair slot approved", body="09:00-09:30"),
        PushMessage(device_token="token-alice", title="Pair slot cancelled", body="09:00-09:30"),
    )

    assert _sample("pairslots_push_deliveries_total", {"status": "sent"}) == sent_before + 2
    assert _sample("pairslots_push_deliveries_total", {"status": "failed"}) == failed_before + 1


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_push_and_http_series() -> None:
    response = await main_module.metrics_endpoint(_make_request("GET", "/metrics"))
    payload = response.body.decode("utf-8")

    assert response.status_code == 200
    assert "pairslots_http_requests_total" in payload
    assert "pairslots_push_deliveries_total" in payload
