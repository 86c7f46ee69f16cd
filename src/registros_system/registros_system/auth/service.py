from __future__ import annotations

from typing import Optional, Protocol

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import AuthenticationError


class Authenticator(Protocol):
    def authenticate(self, username: str, password: str) -> str:
        """Return the authenticated username or raise AuthenticationError."""
        raise NotImplementedError


class StaticCredentialAuthenticator(Authenticator):
    """Single configured account; the password is kept only as a werkzeug hash."""

    def __init__(self, username: str, password_hash: str):
        self._username = username
        self._password_hash = password_hash

    @classmethod
    def from_plain(cls, username: str, password: str) -> "StaticCredentialAuthenticator":
        return cls(username, generate_password_hash(password))

    @classmethod
    def from_settings(
        cls,
        username: Optional[str],
        *,
        password_hash: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Optional["StaticCredentialAuthenticator"]:
        if not username:
            return None
        if password_hash:
            return cls(username, password_hash)
        if password:
            return cls.from_plain(username, password)
        return None

    def authenticate(self, username: str, password: str) -> str:
        if username != self._username:
            raise AuthenticationError("Credenciales incorrectas")

        try:
            ok = check_password_hash(self._password_hash, password or "")
        except Exception:
            # e.g. placeholder or corrupted hash in settings
            ok = False

        if not ok:
            raise AuthenticationError("Credenciales incorrectas")
        return username
