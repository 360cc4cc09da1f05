"""Write a snapshot holding the demo roster to SNAPSHOT_PATH.

The app imports that file on startup, so this is the way to reset a station
to the five demo students and no attendance.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from siabdul.app_logger import get_logger, setup_logging
from siabdul.attendance.memory_ledger import InMemoryAttendanceLedger
from siabdul.core.constants import DEFAULT_SCHOOL_NAME
from siabdul.notifications.settings_store import SettingsStore
from siabdul.snapshot.service import SnapshotService
from siabdul.students.demo import DEMO_CLASSES, DEMO_STUDENTS
from siabdul.students.memory_repository import InMemoryClassRepository, InMemoryRosterRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", None))
    logger = get_logger("scripts.seed")

    raw_path = getattr(settings, "SNAPSHOT_PATH", "")
    if not raw_path:
        raise SystemExit("SNAPSHOT_PATH belum diatur.")
    out_file = Path(raw_path)
    if not out_file.is_absolute():
        out_file = REPO_ROOT / out_file

    service = SnapshotService(
        InMemoryRosterRepository(DEMO_STUDENTS),
        InMemoryClassRepository(DEMO_CLASSES),
        InMemoryAttendanceLedger(),
        SettingsStore(school_name=getattr(settings, "SCHOOL_NAME", DEFAULT_SCHOOL_NAME)),
    )
    service.save_file(out_file)
    logger.info("demo snapshot written to %s (%d students)", out_file, len(DEMO_STUDENTS))


if __name__ == "__main__":
    main()
