"""
Password hashing helpers.
"""

from __future__ import annotations

import bcrypt

from core.settings import env_int


class PasswordHashError(RuntimeError):
    pass


def bcrypt_rounds() -> int:
    # bcrypt accepts 4..31; keep whatever is configured inside that range.
    return max(4, min(env_int("BCRYPT_ROUNDS", 10), 31))


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise PasswordHashError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=bcrypt_rounds())).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False
