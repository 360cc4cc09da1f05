from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Callable

import httpx

from .app_logger import get_logger
from .attendance.marking import ManualMarkingService
from .attendance.memory_ledger import InMemoryAttendanceLedger
from .attendance.scan import ScanResolutionEngine
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .core.constants import (
    DEFAULT_COUNTRY_CODE,
    DEFAULT_GATEWAY_TIMEOUT_SECONDS,
    DEFAULT_GATEWAY_URL,
    DEFAULT_SCHOOL_NAME,
    DEFAULT_SIMULATED_DELAY_SECONDS,
)
from .core.enums import ChannelSetting
from .notifications.channels.direct_link import DirectLinkChannel
from .notifications.channels.external_gateway import ExternalGatewayChannel
from .notifications.channels.factory import DeliveryChannelFactory
from .notifications.channels.simulated_gateway import SimulatedGatewayChannel
from .notifications.model import DispatchConfig
from .notifications.outbound_queue import OutboundQueue
from .notifications.repository import InMemoryNotificationLog
from .notifications.router import DispatchRouter
from .notifications.settings_store import SettingsStore
from .reports.service import ReportService
from .snapshot.service import SnapshotService
from .students.demo import DEMO_CLASSES, DEMO_STUDENTS
from .students.memory_repository import InMemoryClassRepository, InMemoryRosterRepository
from .students.service import RosterService
from .summarizer.service import DEFAULT_API_URL, DEFAULT_MODEL, ReportSummaryService

logger = get_logger("container")


def _hand_link_to_client(link: str) -> None:
    # The browser opens the whatsapp:// link returned in the outcome.
    logger.debug("direct link prepared: %s", link)


@dataclass(frozen=True)
class Container:
    lock: threading.RLock
    http_client: httpx.Client

    roster_repo: InMemoryRosterRepository
    classes_repo: InMemoryClassRepository
    ledger: InMemoryAttendanceLedger
    notification_log: InMemoryNotificationLog
    settings_store: SettingsStore

    outbound: OutboundQueue
    router: DispatchRouter

    auth_service: AuthService
    roster_service: RosterService
    scan_engine: ScanResolutionEngine
    marking_service: ManualMarkingService
    attendance_service: AttendanceService
    report_service: ReportService
    summary_service: ReportSummaryService
    snapshot_service: SnapshotService

    snapshot_path: Path | None = None

    def close(self) -> None:
        self.outbound.close()
        self.http_client.close()


def build_container(
    settings: ModuleType,
    *,
    transport: httpx.BaseTransport | None = None,
    sleep: Callable[[float], None] | None = None,
) -> Container:
    """Wire repositories, channels and services from a settings module.

    `transport` and `sleep` let tests replace network I/O and delays.
    """
    lock = threading.RLock()
    http_client = httpx.Client(
        timeout=float(getattr(settings, "WA_TIMEOUT", DEFAULT_GATEWAY_TIMEOUT_SECONDS)),
        transport=transport,
    )
    sleep_kw = {"sleep": sleep} if sleep is not None else {}

    roster_repo = InMemoryRosterRepository()
    classes_repo = InMemoryClassRepository()
    ledger = InMemoryAttendanceLedger()
    notification_log = InMemoryNotificationLog()

    settings_store = SettingsStore(
        DispatchConfig(
            mode=ChannelSetting(getattr(settings, "WA_MODE", ChannelSetting.LINK.value)),
            api_url=getattr(settings, "WA_API_URL", DEFAULT_GATEWAY_URL),
            api_key=getattr(settings, "WA_API_KEY", ""),
            auto_send=bool(getattr(settings, "WA_AUTO_SEND", False)),
        ),
        school_name=getattr(settings, "SCHOOL_NAME", DEFAULT_SCHOOL_NAME),
    )

    channels = DeliveryChannelFactory(
        direct_link=DirectLinkChannel(opener=_hand_link_to_client),
        simulated_gateway=SimulatedGatewayChannel(
            notification_log,
            delay_seconds=float(getattr(settings, "WA_SIMULATED_DELAY", DEFAULT_SIMULATED_DELAY_SECONDS)),
            **sleep_kw,
        ),
        external_gateway=ExternalGatewayChannel(http_client),
    )
    router = DispatchRouter(channels, country_code=getattr(settings, "WA_COUNTRY_CODE", DEFAULT_COUNTRY_CODE))
    outbound = OutboundQueue()

    roster_service = RosterService(roster_repo, classes_repo, ledger, lock=lock)
    scan_engine = ScanResolutionEngine(
        roster_repo,
        ledger,
        router=router,
        outbound=outbound,
        settings=settings_store,
        lock=lock,
    )
    marking_service = ManualMarkingService(roster_repo, ledger, lock=lock)
    attendance_service = AttendanceService(ledger, roster_repo, classes_repo, lock=lock)
    report_service = ReportService(roster_repo, ledger, lock=lock)

    model = getattr(settings, "GEMINI_MODEL", "") or DEFAULT_MODEL
    summary_service = ReportSummaryService(
        report_service,
        http_client,
        api_key=getattr(settings, "GEMINI_API_KEY", ""),
        model=model,
        api_url=getattr(settings, "GEMINI_API_URL", "") or DEFAULT_API_URL,
        max_attempts=int(getattr(settings, "RETRY_MAX_ATTEMPTS", 3)),
        base_delay=float(getattr(settings, "RETRY_BASE_DELAY", 1.0)),
        **sleep_kw,
    )
    snapshot_service = SnapshotService(roster_repo, classes_repo, ledger, settings_store, lock=lock)

    if bool(getattr(settings, "SEED_DEMO_ROSTER", False)):
        roster_repo.replace_all(DEMO_STUDENTS)
        classes_repo.replace_all(DEMO_CLASSES)

    snapshot_path = None
    raw_path = getattr(settings, "SNAPSHOT_PATH", "")
    if raw_path:
        snapshot_path = Path(raw_path)
        if snapshot_path.is_file():
            result = snapshot_service.load_file(snapshot_path)
            logger.info("loaded snapshot %s (%d students)", snapshot_path, result.students)

    return Container(
        lock=lock,
        http_client=http_client,
        roster_repo=roster_repo,
        classes_repo=classes_repo,
        ledger=ledger,
        notification_log=notification_log,
        settings_store=settings_store,
        outbound=outbound,
        router=router,
        auth_service=AuthService(getattr(settings, "OPERATOR_PASSWORD", "")),
        roster_service=roster_service,
        scan_engine=scan_engine,
        marking_service=marking_service,
        attendance_service=attendance_service,
        report_service=report_service,
        summary_service=summary_service,
        snapshot_service=snapshot_service,
        snapshot_path=snapshot_path,
    )
