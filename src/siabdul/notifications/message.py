from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import format_hm
from ..common.validators import digits_only
from ..core.constants import DEFAULT_COUNTRY_CODE
from ..students.model import Student

ARRIVAL_TEMPLATE = (
    "Assalamualaikum Bapak/Ibu Wali Murid.\n\n"
    "Diinformasikan bahwa siswa:\n"
    "Nama: *{name}*\n"
    "Kelas: {class_label}\n\n"
    "Telah *HADIR* di sekolah pada pukul {time} WIB.\n\n"
    "Terima kasih.\n"
    "_Sistem Absensi SIABDUL_"
)


def normalize_phone(raw: str | None, *, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Digits only, with a leading local 0 rewritten to the country code."""
    phone = digits_only(raw)
    if phone.startswith("0"):
        phone = country_code + phone[1:]
    return phone


def render_arrival_message(student: Student, arrived_at: datetime) -> str:
    return ARRIVAL_TEMPLATE.format(
        name=student.name,
        class_label=student.class_label,
        time=format_hm(arrived_at),
    )
