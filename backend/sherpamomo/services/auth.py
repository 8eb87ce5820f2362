"""Phone one-time-code sign-in and the mobile app's code exchange.

Every multi-step store change here is a single statement: a new code replaces
the old one in one upsert, a failed attempt is an in-place increment, and a
successful verify consumes the record with a delete conditioned on its hash,
so two concurrent verifies cannot both succeed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import delete, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select
from sherpamomo.core.config import settings
from sherpamomo.core.errors import (
    InvalidRequest, VerificationNotFound, TooManyAttempts, InvalidCode,
)
from sherpamomo.core.security import (
    normalize_phone, generate_verification_code, hash_verification_code,
    verify_code_hash, generate_mobile_auth_code,
)
from sherpamomo.models.user import User
from sherpamomo.models.verification import PhoneVerification, MobileAuthCode
from sherpamomo.services.users import get_or_create_phone_user, get_or_create_firebase_user

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

MOBILE_CODE_TTL = timedelta(minutes=5)
ALLOWED_REDIRECT_SCHEMES = ("sherpamomo://", "exp://")


@dataclass
class CodeRequestResult:
    phone: str
    # Plaintext code, only exposed outside production
    dev_code: Optional[str] = None


def require_phone(raw_phone: str) -> str:
    phone = normalize_phone(raw_phone)
    if not phone:
        raise InvalidRequest("Invalid phone number")
    return phone


def _is_test_phone(phone: str) -> bool:
    return bool(settings.TEST_PHONE and settings.TEST_CODE) and phone == normalize_phone(settings.TEST_PHONE)


def _upsert(db: Session, model, values: dict, key: str) -> None:
    insert = _DIALECT_INSERTS.get(db.get_bind().dialect.name)
    if insert is None:
        raise RuntimeError(f"Unsupported database dialect: {db.get_bind().dialect.name}")
    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[key],
        set_={k: v for k, v in values.items() if k != key},
    )
    db.connection().execute(stmt)


# === Phone verification ===

def request_code(db: Session, raw_phone: str) -> CodeRequestResult:
    phone = require_phone(raw_phone)

    if _is_test_phone(phone):
        logger.info("Test phone %s requested a code", phone)
        return CodeRequestResult(phone=phone, dev_code=settings.TEST_CODE)

    now = datetime.utcnow()
    code = generate_verification_code()

    conn = db.connection()
    conn.execute(delete(PhoneVerification).where(PhoneVerification.expires_at <= now))
    _upsert(
        db,
        PhoneVerification,
        {
            "phone": phone,
            "code_hash": hash_verification_code(code),
            "expires_at": now + settings.verification_ttl,
            "attempts": 0,
            "requested_at": now,
        },
        key="phone",
    )
    db.commit()

    # TODO: dispatch the code by SMS once a provider account exists
    if settings.is_production:
        return CodeRequestResult(phone=phone)

    logger.info("Verification code for %s: %s", phone, code)
    return CodeRequestResult(phone=phone, dev_code=code)


def verify_code(db: Session, raw_phone: str, code: str) -> User:
    """Check a code and return the signed-in user, creating it on first sign-in"""
    phone = require_phone(raw_phone)

    if _is_test_phone(phone):
        if code.strip() != settings.TEST_CODE:
            raise InvalidCode()
        return get_or_create_phone_user(db, phone)

    now = datetime.utcnow()
    record = db.exec(
        select(PhoneVerification).where(
            PhoneVerification.phone == phone,
            PhoneVerification.expires_at > now,
        )
    ).first()

    if not record:
        raise VerificationNotFound()

    code_hash = record.code_hash
    attempts = record.attempts
    conn = db.connection()
    max_attempts = settings.VERIFICATION_MAX_ATTEMPTS

    if attempts >= max_attempts:
        conn.execute(delete(PhoneVerification).where(PhoneVerification.phone == phone))
        db.commit()
        raise TooManyAttempts()

    if not verify_code_hash(code, code_hash):
        if attempts + 1 >= max_attempts:
            conn.execute(delete(PhoneVerification).where(PhoneVerification.phone == phone))
            db.commit()
            raise TooManyAttempts()
        conn.execute(
            update(PhoneVerification)
            .where(PhoneVerification.phone == phone)
            .values(attempts=PhoneVerification.attempts + 1)
        )
        db.commit()
        raise InvalidCode()

    consumed = conn.execute(
        delete(PhoneVerification).where(
            PhoneVerification.phone == phone,
            PhoneVerification.code_hash == code_hash,
        )
    ).rowcount
    db.commit()
    if consumed != 1:
        # Another request used this code first
        raise VerificationNotFound()

    return get_or_create_phone_user(db, phone)


# === Mobile sign-in code exchange ===

def is_allowed_redirect_uri(uri: Optional[str]) -> bool:
    if not uri:
        return False
    return uri.strip().lower().startswith(ALLOWED_REDIRECT_SCHEMES)


def create_mobile_code(
    db: Session,
    firebase_uid: str,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> str:
    user = get_or_create_firebase_user(db, firebase_uid, email=email, name=name)
    code = generate_mobile_auth_code()
    db.add(MobileAuthCode(code=code, user_id=user.id, expires_at=datetime.utcnow() + MOBILE_CODE_TTL))
    db.commit()
    return code


def exchange_mobile_code(db: Session, code: str) -> User:
    record = db.get(MobileAuthCode, code)
    if not record:
        raise InvalidRequest("Invalid or expired code")

    expires_at = record.expires_at
    user_id = record.user_id
    consumed = db.connection().execute(
        delete(MobileAuthCode).where(MobileAuthCode.code == code)
    ).rowcount
    db.commit()

    if consumed != 1:
        raise InvalidRequest("Invalid or expired code")
    if expires_at < datetime.utcnow():
        raise InvalidRequest("Code expired")

    user = db.get(User, user_id)
    if not user:
        raise InvalidRequest("User not found")
    return user
