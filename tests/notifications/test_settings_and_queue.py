import threading

import pytest

from siabdul.core.enums import ChannelMode, ChannelSetting
from siabdul.core.exceptions import ValidationError
from siabdul.notifications.model import DispatchConfig
from siabdul.notifications.outbound_queue import OutboundQueue
from siabdul.notifications.settings_store import SettingsStore


def test_update_config_merges_partial_payload():
    store = SettingsStore()

    config = store.update_config({"mode": "gateway", "autoSend": True})

    assert config.mode == ChannelSetting.GATEWAY
    assert config.auto_send
    assert config.api_url == "https://api.fonnte.com/send"
    assert store.current().wants_auto_send


def test_update_config_rejects_unknown_mode_and_bad_url():
    store = SettingsStore()

    with pytest.raises(ValidationError):
        store.update_config({"mode": "sms"})
    with pytest.raises(ValidationError):
        store.update_config({"mode": "gateway", "apiUrl": "ftp://gateway"})
    assert store.config.mode == ChannelSetting.LINK


def test_pairing_flow_changes_effective_channel():
    store = SettingsStore()
    store.update_config({"mode": "gateway"})
    first_session = store.gateway_status()["session"]

    assert first_session.startswith("SIABDUL-WA-SESSION-")
    assert store.current().channel_mode() == ChannelMode.EXTERNAL_GATEWAY

    store.pair()
    assert store.gateway_status() == {"connected": True, "session": None}
    assert store.current().channel_mode() == ChannelMode.SIMULATED_GATEWAY

    store.unpair()
    assert store.gateway_status()["connected"] is False
    assert store.current().channel_mode() == ChannelMode.EXTERNAL_GATEWAY


def test_context_is_a_snapshot():
    store = SettingsStore()
    before = store.current()

    store.update_config({"mode": "gateway"})

    assert before.config.mode == ChannelSetting.LINK


def test_outbound_queue_runs_tasks_off_thread():
    queue = OutboundQueue(name="test-outbound")
    seen = []

    queue.submit(lambda: seen.append(threading.current_thread().name))
    queue.join()
    queue.close()

    assert seen == ["test-outbound"]


def test_outbound_queue_survives_failing_task():
    queue = OutboundQueue()
    seen = []

    def fail():
        raise RuntimeError("boom")

    queue.submit(fail)
    queue.submit(lambda: seen.append("after"))
    queue.join()
    queue.close()

    assert seen == ["after"]


@pytest.mark.parametrize(
    "raw, expected",
    [("false", False), ("0", False), ("off", False), ("true", True), ("1", True), (1, True)],
)
def test_update_config_reads_string_auto_send(raw, expected):
    store = SettingsStore(DispatchConfig(auto_send=not expected))

    assert store.update_config({"autoSend": raw}).auto_send is expected


def test_update_config_rejects_unreadable_auto_send():
    store = SettingsStore()

    with pytest.raises(ValidationError):
        store.update_config({"autoSend": "maybe"})
    assert store.config.auto_send is False
