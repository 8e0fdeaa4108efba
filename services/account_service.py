from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from models import MigrationRecord, Otp, User
from utils.otp_service import OtpGenerator, default_generator, is_well_formed, otp_expiry
from utils.passwords import hash_password
from utils.store import Store


logger = logging.getLogger(__name__)


class AccountError(Exception):
    status_code = 400
    message = "Request failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationFailure(AccountError):
    message = "Invalid request."


class DuplicateEmail(AccountError):
    message = "Email is already in use."


class DuplicatePhone(AccountError):
    message = "Phone number is already in use."


class UserNotFound(AccountError):
    status_code = 404
    message = "User not found."


class InvalidOrExpiredOtp(AccountError):
    # Wrong, used and expired codes are deliberately reported the same way.
    message = "Invalid or expired OTP."


class AccountService:
    """
    Registration, OTP verification/resend, and legacy-id migration.

    Every public method is one store transaction: it either commits all of
    its writes or rolls them back and raises an AccountError.
    """

    def __init__(
        self,
        store: Store,
        generator: Optional[OtpGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.generator = generator or default_generator
        self.clock = clock or datetime.utcnow

    def _issue_otp(self, user: User) -> Otp:
        now = self.clock()
        otp = Otp(
            user_id=user.id,
            code=self.generator.generate(),
            is_used=False,
            created_at=now,
            expires_at=otp_expiry(now),
        )
        return self.store.insert(otp)

    def register(self, *, full_name: str, email: str, phone_number: str, password: str) -> Tuple[User, Otp]:
        full_name = (full_name or "").strip()
        email = (email or "").strip().lower()
        phone_number = (phone_number or "").strip()

        if not full_name:
            raise ValidationFailure("Full name is required.")
        if not email:
            raise ValidationFailure("Email is required.")
        if not phone_number:
            raise ValidationFailure("Phone number is required.")
        if not (password or "").strip():
            raise ValidationFailure("Password is required.")

        if self.store.exists(User, User.email == email):
            raise DuplicateEmail()
        if self.store.exists(User, User.phone_number == phone_number):
            raise DuplicatePhone()

        try:
            user = self.store.insert(
                User(
                    full_name=full_name,
                    email=email,
                    phone_number=phone_number,
                    password_hash=hash_password(password),
                    is_verified=False,
                    created_at=self.clock(),
                )
            )
            otp = self._issue_otp(user)
            self.store.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same contact.
            self.store.rollback()
            if self.store.exists(User, User.email == email):
                raise DuplicateEmail()
            raise DuplicatePhone()

        logger.info("Registered user %s", user.id)
        return user, otp

    def verify_otp(self, user_id: int, code: str) -> User:
        user = self.store.get(User, user_id)
        if not user:
            raise UserNotFound()

        code = (code or "").strip()
        otp = None
        if is_well_formed(code):
            # Locked so two concurrent checks of one code cannot both consume it.
            otp = self.store.find(
                Otp,
                Otp.user_id == user_id,
                Otp.code == code,
                Otp.is_used.is_(False),
                Otp.expires_at > self.clock(),
                for_update=True,
            )
        if not otp:
            self.store.rollback()
            logger.warning("OTP verification failed for user %s", user_id)
            raise InvalidOrExpiredOtp()

        self.store.update(user, is_verified=True)
        self.store.update(otp, is_used=True)
        self.store.commit()

        logger.info("User %s verified", user_id)
        return user

    def resend_otp(self, user_id: int) -> Otp:
        # Row lock serializes concurrent resends so only one code stays live.
        user = self.store.lock(User, user_id)
        if not user:
            self.store.rollback()
            raise UserNotFound()

        pending = self.store.find_all(Otp, Otp.user_id == user_id, Otp.is_used.is_(False))
        for old in pending:
            self.store.update(old, is_used=True)

        otp = self._issue_otp(user)
        self.store.commit()

        logger.info("Resent OTP for user %s (%d earlier code(s) invalidated)", user_id, len(pending))
        return otp

    def migrate_user(self, old_system_user_id: str, new_system_user_id: int) -> MigrationRecord:
        old_system_user_id = (old_system_user_id or "").strip()
        if not old_system_user_id:
            raise ValidationFailure("Old system user id is required.")

        if not self.store.get(User, new_system_user_id):
            raise UserNotFound("New system user not found.")

        record = self.store.insert(
            MigrationRecord(
                old_system_user_id=old_system_user_id,
                new_system_user_id=new_system_user_id,
                migrated_at=self.clock(),
            )
        )
        self.store.commit()

        logger.info("Migrated legacy user %r to user %s", old_system_user_id, new_system_user_id)
        return record

    def list_users(self) -> List[User]:
        return self.store.find_all(User)
