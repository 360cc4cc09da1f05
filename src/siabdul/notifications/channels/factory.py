from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import ChannelMode
from .base import DeliveryChannel
from .direct_link import DirectLinkChannel
from .external_gateway import ExternalGatewayChannel
from .simulated_gateway import SimulatedGatewayChannel


@dataclass
class DeliveryChannelFactory:
    """Factory Pattern: map the effective channel mode to its strategy."""

    direct_link: DirectLinkChannel
    simulated_gateway: SimulatedGatewayChannel
    external_gateway: ExternalGatewayChannel

    def for_mode(self, mode: ChannelMode) -> DeliveryChannel:
        if mode == ChannelMode.DIRECT_LINK:
            return self.direct_link
        if mode == ChannelMode.SIMULATED_GATEWAY:
            return self.simulated_gateway
        return self.external_gateway
