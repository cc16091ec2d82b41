from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Mapping, Optional
import hashlib
import hmac
import logging
import secrets

from tbo.domain.errors import AuthorizationError
from tbo.domain.models import User

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginPolicy:
    max_failed_attempts: int = 5
    lockout_seconds: int = 60


def hash_password(password: str, *, rounds: int = 200_000, salt: Optional[str] = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), rounds).hex()
    return f"pbkdf2_sha256${rounds}${salt}${digest}"


def verify_password(stored: str, provided: str) -> bool:
    try:
        _algo, rounds_s, salt, digest = stored.split("$", 3)
        candidate = hashlib.pbkdf2_hmac(
            "sha256",
            provided.encode("utf-8"),
            bytes.fromhex(salt),
            int(rounds_s),
        ).hex()
    except ValueError:
        return False
    return hmac.compare_digest(candidate, digest)


class AuthService:
    """Fixed user list from settings; secrets are hashed once at startup."""

    def __init__(self, users: Mapping[str, str], policy: LoginPolicy | None = None, *, rounds: int = 200_000):
        self.policy = policy or LoginPolicy()
        self._hashes = {name: hash_password(secret, rounds=rounds) for name, secret in users.items()}
        self._failed: dict[str, int] = {}
        self._locked_until: dict[str, datetime] = {}

    def list_users(self) -> list[User]:
        return [User(username=name) for name in self._hashes]

    def login(self, username: str, password: str) -> User:
        username_clean = (username or "").strip()
        if not username_clean:
            raise AuthorizationError("Username is required.")

        until = self._locked_until.get(username_clean)
        if until:
            now = datetime.now()
            if now < until:
                remaining = int((until - now).total_seconds())
                raise AuthorizationError(f"User is temporarily locked. Retry in {remaining}s.")
            del self._locked_until[username_clean]

        stored = self._hashes.get(username_clean)
        if stored is None or not verify_password(stored, password or ""):
            attempts = self._failed.get(username_clean, 0) + 1
            if attempts >= self.policy.max_failed_attempts:
                self._failed.pop(username_clean, None)
                self._locked_until[username_clean] = datetime.now() + timedelta(seconds=self.policy.lockout_seconds)
                log.warning("login_locked username=%s", username_clean)
                raise AuthorizationError("Too many failed attempts. User is temporarily locked.")
            self._failed[username_clean] = attempts
            log.info("login_failed username=%s attempts=%s", username_clean, attempts)
            raise AuthorizationError("Invalid username or password.")

        self._failed.pop(username_clean, None)
        log.info("login_ok username=%s", username_clean)
        return User(username=username_clean)
