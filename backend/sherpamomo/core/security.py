import hashlib
import hmac
import re
import secrets
from typing import Optional

from sherpamomo.core.config import settings


def normalize_phone(raw_phone: Optional[str]) -> Optional[str]:
    """Normalize a North American number to +1XXXXXXXXXX, None if it isn't one"""
    if not raw_phone:
        return None
    digits = re.sub(r"\D", "", raw_phone)
    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    return None


def generate_verification_code() -> str:
    """Random 6-digit code, never starting with zero"""
    return str(secrets.randbelow(900000) + 100000)


def hash_verification_code(code: str) -> str:
    return hmac.new(
        settings.OTP_SECRET.encode("utf-8"),
        code.strip().encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_code_hash(code: str, code_hash: str) -> bool:
    return hmac.compare_digest(hash_verification_code(code), code_hash)


def generate_mobile_auth_code() -> str:
    return secrets.token_hex(16)
