from sqlmodel import SQLModel, Field
from datetime import datetime


class PhoneVerification(SQLModel, table=True):
    """One pending code per phone; only the keyed hash of the code is kept"""
    __tablename__ = "phone_verifications"

    phone: str = Field(primary_key=True)
    code_hash: str
    expires_at: datetime = Field(index=True)
    attempts: int = Field(default=0)
    requested_at: datetime = Field(default_factory=datetime.utcnow)


class MobileAuthCode(SQLModel, table=True):
    """One-time code exchanged by the mobile app for a session token"""
    __tablename__ = "mobile_auth_codes"

    code: str = Field(primary_key=True)
    user_id: int = Field(foreign_key="users.id")
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
