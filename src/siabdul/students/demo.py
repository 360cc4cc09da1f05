"""Demo roster loaded into a fresh install."""

from .model import Student
from .service import avatar_url

_ROWS = (
    ("STU-001", "0012345678", "Ahmad Santoso", "12 IPA 1", "6281234567890"),
    ("STU-002", "0012345679", "Budi Pratama", "12 IPA 1", "6281234567891"),
    ("STU-003", "0012345680", "Citra Dewi", "12 IPA 2", "6281234567892"),
    ("STU-004", "0012345681", "Dewi Lestari", "12 IPS 1", "6281234567893"),
    ("STU-005", "0012345682", "Eko Kurniawan", "12 IPS 2", "6281234567894"),
)

DEMO_STUDENTS = tuple(
    Student(
        student_id=student_id,
        code=code,
        name=name,
        class_label=class_label,
        guardian_phone=phone,
        avatar=avatar_url(name),
    )
    for student_id, code, name, class_label, phone in _ROWS
)

DEMO_CLASSES = tuple(sorted({s.class_label for s in DEMO_STUDENTS}))
