from __future__ import annotations

import bcrypt


def _truncate(password: str) -> bytes:
    # Multi-byte safe password truncation for bcrypt (max 72 bytes)
    safe_password = password.strip().encode("utf-8")[:72].decode("utf-8", errors="ignore")
    return safe_password.encode("utf-8")


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(_truncate(password), salt)
    return hashed.decode("utf-8")
