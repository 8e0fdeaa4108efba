from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone_number = Column(String, unique=True, index=True, nullable=False)

    # Store password hash (bcrypt). Never store plaintext.
    password_hash = Column(String, nullable=False)

    # Flipped once, by a successful OTP check.
    is_verified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Otp(Base):
    __tablename__ = "otps"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)


class MigrationRecord(Base):
    __tablename__ = "migration_records"

    id = Column(Integer, primary_key=True)
    old_system_user_id = Column(String, nullable=False, index=True)
    new_system_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    migrated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
