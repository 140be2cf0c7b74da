# src/todo_vault/users/user_store.py

"""
Local user accounts (users.json).

Passwords are stored as salted PBKDF2-HMAC-SHA256 hashes:
    pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..core.errors import InvalidCredentialsError, RegistrationError
from ..core.jsonio import ensure_json_list, read_json_list, write_json_atomic
from ..core.ports import Clock, IdGenerator
from ..core.runtime import RandomIdGenerator, SystemClock
from ..tasks.task_models import format_ts, parse_ts
from ..tasks.task_store import user_slug

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_HASH_SCHEME = "pbkdf2_sha256"
_HASH_ITERATIONS = 240_000


def hash_password(password: str, *, iterations: int = _HASH_ITERATIONS) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{_HASH_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        scheme, iterations, salt_hex, digest_hex = encoded.split("$", 3)
        if scheme != _HASH_SCHEME:
            return False
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest, expected)


@dataclass(slots=True)
class User:
    id: str
    username: str
    email: str
    password_hash: str
    created_at: datetime
    last_login: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password": self.password_hash,
            "createdAt": format_ts(self.created_at),
            "lastLogin": format_ts(self.last_login),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> User:
        return cls(
            id=str(raw.get("id") or ""),
            username=str(raw["username"]),
            email=str(raw.get("email") or "").lower(),
            password_hash=str(raw.get("password") or ""),
            created_at=parse_ts(raw.get("createdAt")) or datetime.fromtimestamp(0, UTC),
            last_login=parse_ts(raw.get("lastLogin")),
        )


class UserStore:
    """
    JSON-backed account registry.

    Emails are unique (case-insensitive). Usernames are unique by their file
    slug (see user_slug), since task files are named after it: "Alice Smith"
    and "alice_smith" cannot both register.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        min_password_length: int = 6,
        hash_iterations: int = _HASH_ITERATIONS,
    ) -> None:
        self._path = Path(path)
        self._clock = clock or SystemClock()
        self._ids = ids or RandomIdGenerator()
        self._min_password_length = min_password_length
        self._hash_iterations = hash_iterations
        ensure_json_list(self._path)
        logger.info("UserStore ready file=%s users=%s", self._path, self.count_users())

    def _read(self) -> list[User]:
        out: list[User] = []
        for raw in read_json_list(self._path):
            try:
                user = User.from_dict(raw)
            except KeyError:
                logger.warning("Skipping malformed user record in %s", self._path)
                continue
            if not user.username.strip():
                logger.warning("Skipping user record without a username in %s", self._path)
                continue
            out.append(user)
        return out

    def _write(self, users: list[User]) -> None:
        write_json_atomic(self._path, [u.to_dict() for u in users], private=True)

    def count_users(self) -> int:
        return len(self._read())

    def find_user(self, identifier: str) -> User | None:
        """Look up by username or email (case-insensitive)."""
        key = (identifier or "").strip().lower()
        if not key:
            return None
        for user in self._read():
            if user.username.lower() == key or user.email == key:
                return user
        return None

    def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm: str | None = None,
    ) -> User:
        username = (username or "").strip()
        email = (email or "").strip().lower()

        if not username:
            raise RegistrationError("Username cannot be empty.")
        if not EMAIL_RE.match(email):
            raise RegistrationError("Please enter a valid email address.")
        if not password or not password.strip():
            raise RegistrationError("Password cannot be empty.")
        if len(password) < self._min_password_length:
            raise RegistrationError(
                f"Password must be at least {self._min_password_length} characters long."
            )
        if confirm is not None and confirm != password:
            raise RegistrationError("Passwords do not match.")

        users = self._read()
        if any(u.email == email for u in users):
            raise RegistrationError("This email is already registered.")
        slug = user_slug(username)
        if any(user_slug(u.username) == slug for u in users):
            raise RegistrationError("This username is already taken.")

        user = User(
            id=self._ids.new_id("user"),
            username=username,
            email=email,
            password_hash=hash_password(password, iterations=self._hash_iterations),
            created_at=self._clock.now(),
        )
        self._write([*users, user])
        logger.info("User registered username=%s", username)
        return user

    def authenticate(self, identifier: str, password: str) -> User:
        user = self.find_user(identifier)
        if user is None or not verify_password(password or "", user.password_hash):
            logger.info("Sign-in failed identifier=%s", (identifier or "").strip())
            raise InvalidCredentialsError()

        users = self._read()
        now = self._clock.now()
        for u in users:
            if u.id == user.id:
                u.last_login = now
        self._write(users)
        user.last_login = now
        logger.info("Sign-in ok username=%s", user.username)
        return user
