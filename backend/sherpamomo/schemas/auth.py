from pydantic import BaseModel, Field
from typing import Optional
from sherpamomo.schemas.base import CamelModel
from sherpamomo.schemas.user import UserResponse


class PhoneCodeRequest(BaseModel):
    phone: str = Field(min_length=1)


class PhoneCodeSent(CamelModel):
    message: str
    dev_code: Optional[str] = None


class PhoneVerifyRequest(BaseModel):
    phone: str = Field(min_length=1)
    code: str = Field(min_length=1)


class SessionResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class MobileCodeRequest(CamelModel):
    firebase_uid: str = Field(min_length=1)
    email: Optional[str] = None
    name: Optional[str] = None
    redirect_uri: str = Field(alias="redirect_uri")


class MobileCodeResponse(CamelModel):
    code: str
    redirect_uri: str = Field(alias="redirect_uri")


class MobileCallbackRequest(BaseModel):
    code: str = Field(min_length=1)


class AuthStatusResponse(CamelModel):
    auth_method: str
    configured: bool
