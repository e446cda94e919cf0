from typing import Optional
from pydantic import BaseModel


# Request bodies keep every field optional so the auth flow can answer
# with its own validation messages instead of a 422.

class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    photo: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    photo: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        from_attributes = True


class UserWithToken(UserResponse):
    token: str


# ─── Profile Update ───

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None  # accepted but ignored
    photo: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None


# ─── Password change / reset ───

class ChangePasswordRequest(BaseModel):
    oldPassword: Optional[str] = None
    password: Optional[str] = None


class PasswordResetRequest(BaseModel):
    email: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class ResetRequestResponse(BaseModel):
    success: bool
    message: str
