from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import date, datetime


class UserRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, max_length=150)
    date_of_birth: Optional[date] = None

    @field_validator('username', 'email')
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    @field_validator('email')
    @classmethod
    def email_shape(cls, v: str) -> str:
        local, _, domain = v.partition('@')
        if not local or '.' not in domain:
            raise ValueError('Invalid email address')
        return v.lower()


class UserLogin(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str


class RegisterResponse(BaseModel):
    message: str
    userId: int


class UserProfile(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, alias="fullName", max_length=150)
    date_of_birth: Optional[date] = Field(None, alias="dateOfBirth")

    model_config = ConfigDict(populate_by_name=True)


class AvatarResponse(BaseModel):
    avatarURL: str
