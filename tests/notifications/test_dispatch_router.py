from __future__ import annotations

from datetime import datetime

import httpx
import pytest

from siabdul.core.enums import ChannelMode, ChannelSetting, DispatchStatus
from siabdul.core.exceptions import GatewayConfigError, GatewayTransportError
from siabdul.notifications.channels.direct_link import DirectLinkChannel
from siabdul.notifications.channels.external_gateway import ExternalGatewayChannel
from siabdul.notifications.channels.factory import DeliveryChannelFactory
from siabdul.notifications.channels.simulated_gateway import SimulatedGatewayChannel
from siabdul.notifications.model import DispatchConfig, DispatchContext
from siabdul.notifications.repository import InMemoryNotificationLog
from siabdul.notifications.router import DispatchRouter

ARRIVED = datetime(2025, 1, 6, 7, 5)


class Harness:
    def __init__(self, handler):
        self.requests: list[httpx.Request] = []
        self.opened: list[str] = []
        self.sleeps: list[float] = []
        self.log = InMemoryNotificationLog()

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.router = DispatchRouter(
            DeliveryChannelFactory(
                direct_link=DirectLinkChannel(opener=self.opened.append),
                simulated_gateway=SimulatedGatewayChannel(self.log, delay_seconds=0.5, sleep=self.sleeps.append),
                external_gateway=ExternalGatewayChannel(httpx.Client(transport=httpx.MockTransport(record))),
            )
        )


def _ctx(**kwargs) -> DispatchContext:
    paired = kwargs.pop("paired", False)
    return DispatchContext(config=DispatchConfig(**kwargs), gateway_paired=paired)


def test_channel_mode_selection():
    assert _ctx().channel_mode() == ChannelMode.DIRECT_LINK
    assert _ctx(mode=ChannelSetting.LINK, paired=True).channel_mode() == ChannelMode.DIRECT_LINK
    assert _ctx(mode=ChannelSetting.GATEWAY, paired=True).channel_mode() == ChannelMode.SIMULATED_GATEWAY
    assert _ctx(mode=ChannelSetting.GATEWAY, api_url="", paired=True).channel_mode() == ChannelMode.EXTERNAL_GATEWAY
    assert _ctx(mode=ChannelSetting.GATEWAY).channel_mode() == ChannelMode.EXTERNAL_GATEWAY
    assert (
        _ctx(mode=ChannelSetting.GATEWAY, api_url="https://wa.example/send", paired=True).channel_mode()
        == ChannelMode.EXTERNAL_GATEWAY
    )


def test_direct_link_is_submitted(students):
    h = Harness(lambda r: httpx.Response(200))

    outcome = h.router.dispatch(students[1], ARRIVED, is_automatic=False, context=_ctx())

    assert outcome.status == DispatchStatus.SUBMITTED
    assert outcome.ok
    assert h.opened == [outcome.link]
    assert "phone=6281234567891" in outcome.link
    assert h.requests == []


def test_simulated_gateway_writes_log(students):
    h = Harness(lambda r: httpx.Response(200))

    outcome = h.router.dispatch(
        students[0], ARRIVED, is_automatic=True, context=_ctx(mode=ChannelSetting.GATEWAY, paired=True)
    )

    assert outcome.status == DispatchStatus.SENT
    assert h.sleeps == [0.5]
    assert [e.target for e in h.log.list_recent()] == ["6281234567890"]
    assert h.requests == []


def test_external_gateway_posts_form_with_key(students):
    h = Harness(lambda r: httpx.Response(200, json={"status": True}))
    ctx = _ctx(mode=ChannelSetting.GATEWAY, api_url="https://wa.example/send", api_key="secret")

    outcome = h.router.dispatch(students[0], ARRIVED, is_automatic=False, context=ctx)

    assert outcome.status == DispatchStatus.SENT
    sent = h.requests[0]
    assert str(sent.url) == "https://wa.example/send"
    assert sent.headers["Authorization"] == "secret"
    body = sent.content.decode()
    assert "target=6281234567890" in body
    assert "Authorization=secret" in body


def test_external_gateway_without_key_sends_no_auth_header(students):
    h = Harness(lambda r: httpx.Response(200))

    h.router.dispatch(students[0], ARRIVED, is_automatic=False, context=_ctx(mode=ChannelSetting.GATEWAY))

    assert "Authorization" not in h.requests[0].headers
    assert str(h.requests[0].url) == "https://api.fonnte.com/send"


def test_manual_send_surfaces_transport_error(students):
    h = Harness(lambda r: httpx.Response(500))

    outcome = h.router.dispatch(students[0], ARRIVED, is_automatic=False, context=_ctx(mode=ChannelSetting.GATEWAY))

    assert outcome.status == DispatchStatus.FAILED
    assert isinstance(outcome.error, GatewayTransportError)
    assert len(h.requests) == 1


def test_network_error_becomes_transport_error(students):
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    h = Harness(boom)

    outcome = h.router.dispatch(students[0], ARRIVED, is_automatic=True, context=_ctx(mode=ChannelSetting.GATEWAY))

    assert outcome.status == DispatchStatus.FAILED
    assert isinstance(outcome.error, GatewayTransportError)


@pytest.mark.parametrize("paired", [False, True])
@pytest.mark.parametrize("automatic, expected", [(True, DispatchStatus.DROPPED), (False, DispatchStatus.FAILED)])
def test_missing_gateway_url(students, automatic, expected, paired):
    h = Harness(lambda r: httpx.Response(200))

    outcome = h.router.dispatch(
        students[0],
        ARRIVED,
        is_automatic=automatic,
        context=_ctx(mode=ChannelSetting.GATEWAY, api_url="", paired=paired),
    )

    assert outcome.status == expected
    if automatic:
        assert outcome.error is None
    else:
        assert isinstance(outcome.error, GatewayConfigError)
    assert h.requests == []
    assert h.log.list_recent() == []


def test_student_without_phone_is_skipped(students):
    h = Harness(lambda r: httpx.Response(200))

    outcome = h.router.dispatch(students[2], ARRIVED, is_automatic=False, context=_ctx())

    assert outcome.status == DispatchStatus.SKIPPED
    assert h.opened == []
