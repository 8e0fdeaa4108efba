from __future__ import annotations

import os
import random
from datetime import datetime, timedelta
from typing import Optional


OTP_EXP_MIN = int(os.getenv("OTP_EXP_MINUTES", "5"))

OTP_MIN = 100000
OTP_MAX = 999999


class OtpGenerator:
    """
    Draws 6-digit OTP codes.

    Backed by random.SystemRandom (os.urandom), so there is no seed to share
    or reset between calls. One instance is created per process and handed
    to whoever needs codes.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        return f"{self._rng.randint(OTP_MIN, OTP_MAX)}"


default_generator = OtpGenerator()


def otp_expiry(issued_at: datetime, *, minutes: int = OTP_EXP_MIN) -> datetime:
    return issued_at + timedelta(minutes=minutes)


def is_well_formed(code: str) -> bool:
    code = (code or "").strip()
    return len(code) == 6 and code.isdigit()
