from datetime import datetime
from urllib.parse import unquote

from siabdul.notifications.channels.direct_link import build_whatsapp_link
from siabdul.notifications.message import normalize_phone, render_arrival_message
from siabdul.notifications.model import OutboundMessage


def test_normalize_phone_rewrites_local_prefix():
    assert normalize_phone("0812-3456-7890") == "6281234567890"
    assert normalize_phone("+62 812 3456 7890") == "6281234567890"
    assert normalize_phone("0812", country_code="60") == "60812"


def test_normalize_phone_empty():
    assert normalize_phone(None) == ""
    assert normalize_phone("  -  ") == ""


def test_arrival_message_contains_name_class_and_time(students):
    body = render_arrival_message(students[0], datetime(2025, 1, 6, 7, 5))

    assert "*Ahmad Santoso*" in body
    assert "Kelas: 12 IPA 1" in body
    assert "pukul 07:05 WIB" in body


def test_whatsapp_link_is_url_encoded():
    link = build_whatsapp_link(OutboundMessage(target="6281", body="Halo *Ayah* & Ibu\nok"))

    assert link.startswith("whatsapp://send?phone=6281&text=")
    text = link.split("text=", 1)[1]
    assert " " not in text and "&" not in text
    assert unquote(text) == "Halo *Ayah* & Ibu\nok"
