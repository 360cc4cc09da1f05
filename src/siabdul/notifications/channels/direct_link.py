from __future__ import annotations

import webbrowser
from typing import Callable
from urllib.parse import quote

from ...core.enums import ChannelMode, DispatchStatus
from ..model import DispatchConfig, DispatchOutcome, OutboundMessage
from .base import DeliveryChannel


def build_whatsapp_link(message: OutboundMessage) -> str:
    return f"whatsapp://send?phone={message.target}&text={quote(message.body, safe='')}"


class DirectLinkChannel(DeliveryChannel):
    """Hands the message to the installed WhatsApp app through a URI.

    There is no delivery confirmation, so the outcome is always SUBMITTED.
    """

    def __init__(self, opener: Callable[[str], object] = webbrowser.open):
        self._opener = opener

    def send(self, message: OutboundMessage, *, config: DispatchConfig) -> DispatchOutcome:
        link = build_whatsapp_link(message)
        self._opener(link)
        return DispatchOutcome(
            status=DispatchStatus.SUBMITTED,
            channel=ChannelMode.DIRECT_LINK,
            detail="Diteruskan ke aplikasi WhatsApp",
            link=link,
        )
