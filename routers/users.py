from __future__ import annotations

import os

from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from database import get_db
from models import User
from routers.auth import require_admin
from services.account_service import AccountError, AccountService
from utils.store import MAX_ID, Store


router = APIRouter(prefix="/users", tags=["users"])

# Codes are echoed back because nothing delivers them out-of-band yet.
OTP_ECHO_IN_RESPONSE = os.getenv("OTP_ECHO_IN_RESPONSE", "1").strip().lower() not in {"0", "false", "no"}


class RegisterIn(BaseModel):
    full_name: str = Field(alias="fullName", min_length=1)
    email: EmailStr
    phone_number: str = Field(alias="phoneNumber", min_length=1)
    password: str = Field(min_length=1)


class VerifyOtpIn(BaseModel):
    user_id: int = Field(alias="userId", ge=1, le=MAX_ID)
    otp_code: str = Field(alias="otpCode")


class MigrateIn(BaseModel):
    old_system_user_id: str = Field(alias="oldSystemUserId", min_length=1)
    new_system_user_id: int = Field(alias="newSystemUserId", ge=1, le=MAX_ID)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(Store(db))


def _fail(exc: AccountError) -> HTTPException:
    return HTTPException(exc.status_code, exc.message)


def _user_out(u: User) -> dict:
    return {
        "id": u.id,
        "fullName": u.full_name,
        "email": u.email,
        "phoneNumber": u.phone_number,
        "isVerified": bool(u.is_verified),
        "createdAt": u.created_at.isoformat() if u.created_at else None,
    }


@router.post("/register")
def register(payload: RegisterIn, service: AccountService = Depends(get_account_service)):
    try:
        user, otp = service.register(
            full_name=payload.full_name,
            email=str(payload.email),
            phone_number=payload.phone_number,
            password=payload.password,
        )
    except AccountError as exc:
        raise _fail(exc)

    body = {"message": "User registered successfully. OTP generated.", "userId": user.id}
    if OTP_ECHO_IN_RESPONSE:
        body["otpCode"] = otp.code
    return body


@router.post("/verify-otp", response_class=PlainTextResponse)
def verify_otp(payload: VerifyOtpIn, service: AccountService = Depends(get_account_service)):
    try:
        service.verify_otp(payload.user_id, payload.otp_code)
    except AccountError as exc:
        raise _fail(exc)
    return "OTP verified successfully. User is now verified."


@router.post("/resend-otp/{user_id}")
def resend_otp(
    user_id: int = Path(ge=1, le=MAX_ID),
    service: AccountService = Depends(get_account_service),
):
    try:
        otp = service.resend_otp(user_id)
    except AccountError as exc:
        raise _fail(exc)

    body = {"message": "OTP resent successfully."}
    if OTP_ECHO_IN_RESPONSE:
        body["otpCode"] = otp.code
    return body


@router.post("/migrate")
def migrate_user(payload: MigrateIn, service: AccountService = Depends(get_account_service)):
    try:
        record = service.migrate_user(payload.old_system_user_id, payload.new_system_user_id)
    except AccountError as exc:
        raise _fail(exc)
    return {
        "message": "User migrated successfully.",
        "oldSystemUserId": record.old_system_user_id,
        "newSystemUserId": record.new_system_user_id,
    }


@router.get("")
def list_users(
    service: AccountService = Depends(get_account_service),
    _admin: dict = Depends(require_admin),
):
    """
    Lists every account for operators. Password hashes are never part of
    the response.
    """
    return [_user_out(u) for u in service.list_users()]
