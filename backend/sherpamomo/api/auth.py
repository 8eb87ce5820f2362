from fastapi import APIRouter, Depends, Request, Response
from sqlmodel import Session
from sherpamomo.api.deps import get_db, access_security, get_current_user, issue_session_token
from sherpamomo.core.config import settings
from sherpamomo.core.errors import InvalidRequest
from sherpamomo.core.rate_limit import FixedWindowRateLimiter
from sherpamomo.models.user import User
from sherpamomo.schemas.auth import (
    PhoneCodeRequest, PhoneCodeSent, PhoneVerifyRequest, SessionResponse,
    MobileCodeRequest, MobileCodeResponse, MobileCallbackRequest, AuthStatusResponse,
)
from sherpamomo.schemas.user import UserResponse
from sherpamomo.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Two independent throttles: code requests per phone, verify attempts per client IP
code_request_limiter = FixedWindowRateLimiter(
    limit=settings.CODE_REQUEST_LIMIT,
    window_seconds=settings.CODE_REQUEST_WINDOW_SECONDS,
    message="Too many requests. Please wait a minute.",
)
verify_limiter = FixedWindowRateLimiter(
    limit=settings.VERIFY_LIMIT,
    window_seconds=settings.VERIFY_WINDOW_SECONDS,
    message="Too many verification attempts. Please wait.",
)
mobile_code_limiter = FixedWindowRateLimiter(
    limit=10,
    window_seconds=60,
    message="Too many requests.",
)


def client_ip(request: Request) -> str:
    """Socket peer address; X-Forwarded-For only counts when the peer is a trusted proxy"""
    peer = request.client.host if request.client else "unknown"
    trusted = settings.trusted_proxies_list
    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded or peer not in trusted:
        return peer

    # Walk back from the nearest hop, skipping our own proxies
    for hop in reversed([ip.strip() for ip in forwarded.split(",") if ip.strip()]):
        if hop not in trusted:
            return hop
    return peer


def session_response(message: str, user: User, response: Response) -> SessionResponse:
    token = issue_session_token(user)
    access_security.set_access_cookie(response, token)
    return SessionResponse(message=message, token=token, user=UserResponse.model_validate(user))


# === Phone sign-in ===

@router.post("/phone/request", response_model=PhoneCodeSent, response_model_exclude_none=True)
def request_phone_code(data: PhoneCodeRequest, db: Session = Depends(get_db)):
    """Send a one-time sign-in code"""
    phone = auth_service.require_phone(data.phone)
    code_request_limiter.hit(phone)

    result = auth_service.request_code(db, phone)
    return PhoneCodeSent(message="Verification code sent", dev_code=result.dev_code)


@router.post("/phone/verify", response_model=SessionResponse)
def verify_phone_code(
    data: PhoneVerifyRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """Check the code and sign in, creating the account on first use"""
    verify_limiter.hit(client_ip(request))

    user = auth_service.verify_code(db, data.phone, data.code)
    return session_response("Verified successfully", user, response)


# === Mobile Google sign-in (web -> app hand-off) ===

@router.post("/mobile-code", response_model=MobileCodeResponse)
def create_mobile_code(data: MobileCodeRequest, request: Request, db: Session = Depends(get_db)):
    """One-time code the web sign-in page hands to the mobile app"""
    mobile_code_limiter.hit(client_ip(request))

    if not auth_service.is_allowed_redirect_uri(data.redirect_uri):
        raise InvalidRequest("redirect_uri is required and must start with sherpamomo:// or exp://")

    code = auth_service.create_mobile_code(db, data.firebase_uid, email=data.email, name=data.name)
    return MobileCodeResponse(code=code, redirect_uri=data.redirect_uri.strip())


@router.post("/mobile/callback", response_model=SessionResponse)
def mobile_callback(
    data: MobileCallbackRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """Exchange the one-time code for a session token"""
    mobile_code_limiter.hit(client_ip(request))

    user = auth_service.exchange_mobile_code(db, data.code)
    return session_response("Signed in successfully", user, response)


# === Session ===

@router.get("/status", response_model=AuthStatusResponse)
def auth_status():
    return AuthStatusResponse(auth_method="phone-jwt", configured=True)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/logout")
def logout(response: Response):
    access_security.unset_access_cookie(response)
    return {"message": "Logged out"}
