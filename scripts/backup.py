"""Copy the current snapshot into backups/ with a timestamped name.

The file is loaded and re-exported rather than copied byte for byte, so the
backup is normalised (legacy "alpha" statuses, dropped bad rows).
"""

from __future__ import annotations

import importlib
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from siabdul.app_logger import get_logger, setup_logging
from siabdul.attendance.memory_ledger import InMemoryAttendanceLedger
from siabdul.notifications.settings_store import SettingsStore
from siabdul.snapshot.service import SnapshotService
from siabdul.students.memory_repository import InMemoryClassRepository, InMemoryRosterRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", None))
    logger = get_logger("scripts.backup")

    source = Path(getattr(settings, "SNAPSHOT_PATH", "") or "")
    if not source.is_absolute():
        source = REPO_ROOT / source
    if not source.is_file():
        raise SystemExit(f"Snapshot tidak ditemukan: {source}")

    service = SnapshotService(
        InMemoryRosterRepository(),
        InMemoryClassRepository(),
        InMemoryAttendanceLedger(),
        SettingsStore(),
    )
    result = service.load_file(source)

    out_dir = REPO_ROOT / "backups"
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"siabdul_{ts}.json"
    service.save_file(out_file)
    logger.info("backup created: %s (%d rows skipped)", out_file, result.skipped)


if __name__ == "__main__":
    main()
