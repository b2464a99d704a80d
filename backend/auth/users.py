from __future__ import annotations

from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


# username, password, role, user_id (the key used by the order history tables)
_DEMO_USERS = [
    ("user", "user123", "user", "u-1001"),
    ("vegan", "vegan123", "user", "u-1002"),
    ("newbie", "newbie123", "user", "u-1003"),
    ("admin", "admin123", "admin", "u-9000"),
]


def _seed_users() -> None:
    """Pre-seed the demo accounts on import."""
    for username, password, role, user_id in _DEMO_USERS:
        _users[username] = {
            "password_hash": _hash_password(password),
            "role": role,
            "user_id": user_id,
        }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{username, role, user_id}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"username": username, "role": record["role"], "user_id": record["user_id"]}
    return None


_seed_users()
