# user models: sign-up, sign-in and session schemas

from pydantic import BaseModel, EmailStr, Field, field_validator

from cbt_tracker.config import settings


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., description="plaintext password")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("password")
    @classmethod
    def check_length(cls, v: str) -> str:
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password should be at least {settings.PASSWORD_MIN_LENGTH} characters")
        return v


class UserLogin(BaseModel):
    email: str
    password: str


class SessionUser(BaseModel):
    id: str
    email: str


class SessionResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = "bearer"
    user: SessionUser

    model_config = {"populate_by_name": True}


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken")

    model_config = {"populate_by_name": True}
