from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_GATEWAY_URL
from ..core.enums import ChannelMode, ChannelSetting, DispatchStatus, LogStatus
from ..core.exceptions import DispatchError

_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off", "")


def _flag(value) -> bool:
    """Read a boolean that may arrive as a form or JSON string."""
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"nilai autoSend tidak valid: {value!r}")
    return bool(value)


@dataclass(frozen=True)
class DispatchConfig:
    """WhatsApp settings as saved by the operator."""

    mode: ChannelSetting = ChannelSetting.LINK
    api_url: str = DEFAULT_GATEWAY_URL
    api_key: str = ""
    auto_send: bool = False

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "apiUrl": self.api_url,
            "apiKey": self.api_key,
            "autoSend": self.auto_send,
        }

    @classmethod
    def from_dict(cls, data: dict, *, base: Optional["DispatchConfig"] = None) -> "DispatchConfig":
        base = base or cls()
        mode = data.get("mode", base.mode)
        return replace(
            base,
            mode=ChannelSetting(mode),
            api_url=str(data.get("apiUrl", base.api_url) or "").strip(),
            api_key=str(data.get("apiKey", base.api_key) or "").strip(),
            auto_send=_flag(data.get("autoSend", base.auto_send)),
        )


@dataclass(frozen=True)
class DispatchContext:
    """Settings snapshot read fresh for every dispatch attempt."""

    config: DispatchConfig
    gateway_paired: bool = False

    @property
    def wants_auto_send(self) -> bool:
        return self.config.mode == ChannelSetting.GATEWAY and self.config.auto_send

    def channel_mode(self) -> ChannelMode:
        if self.config.mode == ChannelSetting.LINK:
            return ChannelMode.DIRECT_LINK
        # Pairing only stands in for the stock endpoint; an empty URL stays a config error.
        if self.gateway_paired and self.config.api_url == DEFAULT_GATEWAY_URL:
            return ChannelMode.SIMULATED_GATEWAY
        return ChannelMode.EXTERNAL_GATEWAY


@dataclass(frozen=True)
class OutboundMessage:
    target: str
    body: str


@dataclass(frozen=True)
class NotificationLogEntry:
    entry_id: str
    target: str
    message: str
    sent_at: datetime
    status: LogStatus

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "target": self.target,
            "message": self.message,
            "timestamp": self.sent_at.isoformat(timespec="seconds"),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class DispatchOutcome:
    status: DispatchStatus
    channel: Optional[ChannelMode] = None
    detail: str = ""
    link: Optional[str] = None
    error: Optional[DispatchError] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.status in (DispatchStatus.SUBMITTED, DispatchStatus.SENT, DispatchStatus.SKIPPED)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "channel": self.channel.value if self.channel else None,
            "detail": self.detail,
            "link": self.link,
        }
