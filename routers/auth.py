from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt


logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

JWT_SECRET = os.getenv("JWT_SECRET", "change_me")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
JWT_EXP_MIN = int(os.getenv("JWT_EXP_MIN", "60"))

ADMIN_ROLE = "admin"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_admin_token(*, subject: str = "admin", minutes: Optional[int] = None) -> str:
    minutes = JWT_EXP_MIN if minutes is None else minutes
    payload = {
        "sub": subject,
        "role": ADMIN_ROLE,
        "iat": int(_now().timestamp()),
        "exp": int((_now() + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def require_admin(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> dict:
    """Guards operator-only endpoints such as listing every account."""
    if not creds or not creds.credentials:
        raise HTTPException(401, "Missing Authorization token")
    try:
        payload = jwt.decode(creds.credentials, JWT_SECRET, algorithms=[JWT_ALG])
    except JWTError:
        raise HTTPException(401, "Invalid token")
    if payload.get("role") != ADMIN_ROLE:
        logger.warning("Rejected non-admin token for subject %r", payload.get("sub"))
        raise HTTPException(403, "Admin access required")
    return payload
