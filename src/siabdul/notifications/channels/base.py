from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import DispatchConfig, DispatchOutcome, OutboundMessage


class DeliveryChannel(ABC):
    """Strategy Pattern: one way of getting a message to a guardian."""

    @abstractmethod
    def send(self, message: OutboundMessage, *, config: DispatchConfig) -> DispatchOutcome:
        raise NotImplementedError
