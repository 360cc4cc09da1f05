from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from siabdul.attendance.scan import ScanResolutionEngine
from siabdul.core.enums import AttendanceStatus, ChannelSetting, DispatchStatus, ScanOutcome
from siabdul.notifications.channels.direct_link import DirectLinkChannel
from siabdul.notifications.channels.external_gateway import ExternalGatewayChannel
from siabdul.notifications.channels.factory import DeliveryChannelFactory
from siabdul.notifications.channels.simulated_gateway import SimulatedGatewayChannel
from siabdul.notifications.model import DispatchConfig
from siabdul.notifications.repository import InMemoryNotificationLog
from siabdul.notifications.router import DispatchRouter
from siabdul.notifications.settings_store import SettingsStore


class RecordingQueue:
    """Keeps submitted tasks so tests decide when they run."""

    def __init__(self):
        self.tasks = []

    def submit(self, task) -> None:
        self.tasks.append(task)

    def run_all(self):
        return [task() for task in self.tasks]


@pytest.fixture
def engine(roster, ledger, lock):
    return ScanResolutionEngine(roster, ledger, lock=lock)


def test_first_scan_records_present(engine, ledger, fixed_now):
    result = engine.resolve("0012345678", now=fixed_now)

    assert result.outcome == ScanOutcome.RECORDED
    assert result.student.student_id == "STU-001"
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.timestamp == fixed_now
    assert len(ledger.list_all()) == 1


def test_second_scan_same_day_is_duplicate_without_write(engine, ledger, fixed_now):
    first = engine.resolve("0012345678", now=fixed_now)

    second = engine.resolve("0012345678", now=fixed_now + timedelta(minutes=1))

    assert second.outcome == ScanOutcome.DUPLICATE
    assert not second.is_error
    assert second.record == first.record
    assert "Ahmad Santoso" in second.message
    assert len(ledger.list_all()) == 1


def test_unknown_code_does_not_touch_ledger(engine, ledger, fixed_now):
    result = engine.resolve("9999999999", now=fixed_now)

    assert result.outcome == ScanOutcome.UNKNOWN
    assert result.is_error
    assert "9999999999" in result.message
    assert ledger.list_all() == []


def test_legacy_id_resolves_when_code_misses(engine, fixed_now):
    result = engine.resolve("STU-003", now=fixed_now)

    assert result.outcome == ScanOutcome.RECORDED
    assert result.student.code == "0012345680"


def test_repeat_of_last_input_is_ignored_until_reset(engine, ledger, fixed_now):
    engine.scan("0012345678", now=fixed_now)

    # Same card held in front of the camera.
    ignored = engine.scan("0012345678", now=fixed_now)
    assert ignored.outcome == ScanOutcome.IGNORED
    assert ignored.student.student_id == "STU-001"

    engine.reset()
    assert engine.scan("0012345678", now=fixed_now).outcome == ScanOutcome.DUPLICATE
    assert len(ledger.list_all()) == 1


def test_unknown_code_does_not_arm_the_guard(engine, fixed_now):
    engine.scan("9999999999", now=fixed_now)

    assert engine.scan("9999999999", now=fixed_now).outcome == ScanOutcome.UNKNOWN


def test_other_student_is_not_ignored(engine, fixed_now):
    engine.scan("0012345678", now=fixed_now)

    assert engine.scan("0012345679", now=fixed_now).outcome == ScanOutcome.RECORDED


def test_legacy_id_of_last_student_is_not_ignored(engine, ledger, fixed_now):
    engine.scan("0012345678", now=fixed_now)

    result = engine.scan("STU-001", now=fixed_now)

    assert result.outcome == ScanOutcome.DUPLICATE
    assert len(ledger.list_all()) == 1
    # The legacy id is now the last input.
    assert engine.scan("STU-001", now=fixed_now).outcome == ScanOutcome.IGNORED


def test_manual_input_resolves_only_at_code_length(engine, fixed_now):
    assert engine.feed_manual_input("001234567", now=fixed_now) is None
    assert engine.feed_manual_input("00123456789", now=fixed_now) is None

    result = engine.feed_manual_input("0012345678", now=fixed_now)
    assert result.outcome == ScanOutcome.RECORDED


def test_manual_submit_accepts_any_non_empty_text(engine, fixed_now):
    assert engine.submit_manual("   ", now=fixed_now) is None
    assert engine.submit_manual(" STU-002 ", now=fixed_now).outcome == ScanOutcome.RECORDED


def _wired_engine(roster, ledger, lock, config: DispatchConfig, *, paired: bool):
    log = InMemoryNotificationLog()
    sleeps = []
    channels = DeliveryChannelFactory(
        direct_link=DirectLinkChannel(opener=lambda link: None),
        simulated_gateway=SimulatedGatewayChannel(log, delay_seconds=0.5, sleep=sleeps.append),
        external_gateway=ExternalGatewayChannel(httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))),
    )
    settings = SettingsStore(config)
    if paired:
        settings.pair()
    queue = RecordingQueue()
    engine = ScanResolutionEngine(
        roster,
        ledger,
        router=DispatchRouter(channels),
        outbound=queue,
        settings=settings,
        lock=lock,
    )
    return engine, queue, log, sleeps


def test_auto_send_is_queued_after_record(roster, ledger, lock, fixed_now):
    config = DispatchConfig(mode=ChannelSetting.GATEWAY, auto_send=True)
    engine, queue, log, sleeps = _wired_engine(roster, ledger, lock, config, paired=True)

    result = engine.resolve("0012345678", now=fixed_now)

    assert result.outcome == ScanOutcome.RECORDED
    assert len(queue.tasks) == 1
    assert log.list_recent() == []

    outcomes = queue.run_all()
    assert outcomes[0].status == DispatchStatus.SENT
    assert sleeps == [0.5]
    entry = log.list_recent()[0]
    assert entry.target == "6281234567890"
    assert "07:05" in entry.message


def test_no_auto_send_in_link_mode(roster, ledger, lock, fixed_now):
    engine, queue, _, _ = _wired_engine(roster, ledger, lock, DispatchConfig(auto_send=True), paired=True)

    engine.resolve("0012345678", now=fixed_now)

    assert queue.tasks == []


def test_no_auto_send_for_duplicate_or_student_without_phone(roster, ledger, lock, fixed_now):
    config = DispatchConfig(mode=ChannelSetting.GATEWAY, auto_send=True)
    engine, queue, _, _ = _wired_engine(roster, ledger, lock, config, paired=True)

    engine.resolve("0012345680", now=fixed_now)  # no guardian phone
    engine.resolve("0012345678", now=fixed_now)
    engine.resolve("0012345678", now=fixed_now)  # duplicate

    assert len(queue.tasks) == 1


def test_auto_send_config_error_is_dropped_and_ledger_kept(roster, ledger, lock, fixed_now):
    config = DispatchConfig(mode=ChannelSetting.GATEWAY, api_url="", auto_send=True)
    engine, queue, _, _ = _wired_engine(roster, ledger, lock, config, paired=False)

    engine.resolve("0012345678", now=fixed_now)
    outcomes = queue.run_all()

    assert outcomes[0].status == DispatchStatus.DROPPED
    assert outcomes[0].error is None
    assert len(ledger.list_all()) == 1
