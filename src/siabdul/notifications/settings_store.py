from __future__ import annotations

import threading
import time

from ..core.constants import DEFAULT_SCHOOL_NAME, GATEWAY_SESSION_PREFIX
from ..core.enums import ChannelSetting
from ..core.exceptions import ValidationError
from .model import DispatchConfig, DispatchContext


class SettingsStore:
    """Process-wide WhatsApp settings, pairing state and school display name.

    Mutated only through `save_config`, `pair`/`unpair` and `set_school_name`;
    readers always get an immutable snapshot.
    """

    def __init__(self, config: DispatchConfig | None = None, *, school_name: str = DEFAULT_SCHOOL_NAME):
        self._config = config or DispatchConfig()
        self._school_name = school_name
        self._paired = False
        self._session_value = self._new_session_value()
        self._lock = threading.Lock()

    @staticmethod
    def _new_session_value() -> str:
        return f"{GATEWAY_SESSION_PREFIX}{int(time.time() * 1000)}"

    def current(self) -> DispatchContext:
        with self._lock:
            return DispatchContext(config=self._config, gateway_paired=self._paired)

    @property
    def config(self) -> DispatchConfig:
        with self._lock:
            return self._config

    @property
    def school_name(self) -> str:
        with self._lock:
            return self._school_name

    def save_config(self, config: DispatchConfig) -> DispatchConfig:
        if config.mode == ChannelSetting.GATEWAY and config.api_url and not config.api_url.startswith(("http://", "https://")):
            raise ValidationError("URL API Gateway tidak valid")
        with self._lock:
            self._config = config
        return config

    def update_config(self, data: dict) -> DispatchConfig:
        try:
            config = DispatchConfig.from_dict(data, base=self.config)
        except ValueError as e:
            raise ValidationError(f"Pengaturan WhatsApp tidak valid: {e}") from e
        return self.save_config(config)

    def set_school_name(self, name: str) -> None:
        with self._lock:
            self._school_name = name

    def gateway_status(self) -> dict:
        with self._lock:
            return {
                "connected": self._paired,
                "session": None if self._paired else self._session_value,
            }

    def pair(self) -> None:
        with self._lock:
            self._paired = True

    def unpair(self) -> None:
        with self._lock:
            self._paired = False
            self._session_value = self._new_session_value()

    def restore(self, *, config: DispatchConfig | None = None, school_name: str | None = None) -> None:
        with self._lock:
            if config is not None:
                self._config = config
            if school_name is not None:
                self._school_name = school_name
