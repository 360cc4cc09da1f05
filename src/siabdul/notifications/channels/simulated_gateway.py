from __future__ import annotations

import time
import uuid
from typing import Callable

from ...common.datetime_utils import now_local
from ...core.constants import DEFAULT_SIMULATED_DELAY_SECONDS
from ...core.enums import ChannelMode, DispatchStatus, LogStatus
from ..model import DispatchConfig, DispatchOutcome, NotificationLogEntry, OutboundMessage
from ..repository import NotificationLogRepository
from .base import DeliveryChannel


class SimulatedGatewayChannel(DeliveryChannel):
    """Local gateway used after the pairing flow; writes the delivery log and never fails."""

    def __init__(
        self,
        log: NotificationLogRepository,
        *,
        delay_seconds: float = DEFAULT_SIMULATED_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._log = log
        self._delay = float(delay_seconds)
        self._sleep = sleep

    def send(self, message: OutboundMessage, *, config: DispatchConfig) -> DispatchOutcome:
        if self._delay > 0:
            self._sleep(self._delay)

        self._log.append(
            NotificationLogEntry(
                entry_id=str(uuid.uuid4()),
                target=message.target,
                message=message.body,
                sent_at=now_local(),
                status=LogStatus.SENT,
            )
        )
        return DispatchOutcome(
            status=DispatchStatus.SENT,
            channel=ChannelMode.SIMULATED_GATEWAY,
            detail="Pesan berhasil dikirim via Gateway Lokal",
        )
