"""Example: drive the service layer without Flask.

Scans a demo card twice, marks a sick student and prints the day's report.
"""

import importlib

from config import get_settings_module

from siabdul.container import build_container
from siabdul.core.enums import AttendanceStatus


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings)
    try:
        first = container.scan_engine.resolve("0012345678")
        container.scan_engine.reset()
        second = container.scan_engine.resolve("0012345678")
        print(first.outcome.value, "->", second.outcome.value)

        container.marking_service.mark("STU-002", AttendanceStatus.SICK)
        for row in container.report_service.daily_rows("12 IPA 1", first.record.day):
            print(row.to_dict())
    finally:
        container.close()


if __name__ == "__main__":
    main()
