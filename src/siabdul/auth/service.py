from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import AuthenticationError


class AuthService:
    """Use case: operator login for the scanning station.

    There is a single operator account; only its password hash is kept.
    """

    def __init__(self, password: str):
        self._password_hash = generate_password_hash(password) if password else ""

    def authenticate(self, password: str) -> None:
        if not self._password_hash or not password:
            raise AuthenticationError("Kata sandi salah")
        if not check_password_hash(self._password_hash, password):
            raise AuthenticationError("Kata sandi salah")
