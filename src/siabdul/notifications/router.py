from __future__ import annotations

from datetime import datetime

from ..app_logger import get_logger
from ..core.constants import DEFAULT_COUNTRY_CODE
from ..core.enums import DispatchStatus
from ..core.exceptions import DispatchError, GatewayConfigError
from ..students.model import Student
from .channels.factory import DeliveryChannelFactory
from .message import normalize_phone, render_arrival_message
from .model import DispatchContext, DispatchOutcome, OutboundMessage

logger = get_logger("notifications.router")


class DispatchRouter:
    """Routes a "student arrived" notification to the effective channel.

    Every I/O failure is converted into a DispatchOutcome here. Automatic sends
    never surface an error to the caller; user-initiated sends carry the error
    in `outcome.error` so the controller can show it.
    """

    def __init__(self, channels: DeliveryChannelFactory, *, country_code: str = DEFAULT_COUNTRY_CODE):
        self._channels = channels
        self._country_code = country_code

    def build_message(self, student: Student, timestamp: datetime) -> OutboundMessage:
        return OutboundMessage(
            target=normalize_phone(student.guardian_phone, country_code=self._country_code),
            body=render_arrival_message(student, timestamp),
        )

    def dispatch(
        self,
        student: Student,
        timestamp: datetime,
        *,
        is_automatic: bool,
        context: DispatchContext,
    ) -> DispatchOutcome:
        message = self.build_message(student, timestamp)
        if not message.target:
            return DispatchOutcome(status=DispatchStatus.SKIPPED, detail="Siswa tidak memiliki nomor wali")

        mode = context.channel_mode()
        channel = self._channels.for_mode(mode)
        try:
            outcome = channel.send(message, config=context.config)
        except GatewayConfigError as e:
            if is_automatic:
                logger.warning("auto-send dropped for %s: %s", student.student_id, e)
                return DispatchOutcome(status=DispatchStatus.DROPPED, channel=mode, detail=str(e))
            return DispatchOutcome(status=DispatchStatus.FAILED, channel=mode, detail=str(e), error=e)
        except DispatchError as e:
            if is_automatic:
                logger.warning("auto-send failed for %s: %s", student.student_id, e)
            return DispatchOutcome(status=DispatchStatus.FAILED, channel=mode, detail=str(e), error=e)

        logger.info(
            "notification %s via %s for %s (auto=%s)",
            outcome.status.value,
            mode.value,
            student.student_id,
            is_automatic,
        )
        return outcome
