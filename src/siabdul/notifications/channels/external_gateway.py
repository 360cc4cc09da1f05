from __future__ import annotations

import httpx

from ...core.enums import ChannelMode, DispatchStatus
from ...core.exceptions import GatewayConfigError, GatewayTransportError
from ..model import DispatchConfig, DispatchOutcome, OutboundMessage
from .base import DeliveryChannel


class ExternalGatewayChannel(DeliveryChannel):
    """Form POST to a Fonnte-style HTTP gateway.

    Success is decided by the HTTP status only; the body is not inspected.
    No retry here: a silent resend could notify a guardian twice.
    """

    def __init__(self, client: httpx.Client):
        self._client = client

    def send(self, message: OutboundMessage, *, config: DispatchConfig) -> DispatchOutcome:
        if not config.api_url:
            raise GatewayConfigError("URL API Gateway belum dikonfigurasi!")

        form = {"target": message.target, "message": message.body}
        headers = {}
        if config.api_key:
            form["Authorization"] = config.api_key
            headers["Authorization"] = config.api_key

        try:
            response = self._client.post(config.api_url, data=form, headers=headers)
        except httpx.HTTPError as e:
            raise GatewayTransportError(f"Terjadi kesalahan koneksi ke Gateway: {e}") from e

        if not response.is_success:
            raise GatewayTransportError(f"Gagal mengirim pesan via Gateway External (HTTP {response.status_code})")

        return DispatchOutcome(
            status=DispatchStatus.SENT,
            channel=ChannelMode.EXTERNAL_GATEWAY,
            detail="Pesan terkirim",
        )
