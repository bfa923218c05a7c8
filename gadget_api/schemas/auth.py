from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ..core.security import PASSWORD_MAX_BYTES


class Credentials(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {"username": "agent007", "password": "secret"}
        },
    }

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value


class RegisterRequest(Credentials):
    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        # bcrypt only looks at the first 72 bytes of a password.
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
        return value


class TokenResponse(BaseModel):
    token: str

    model_config = {
        "json_schema_extra": {
            "example": {"token": "<jwt>"}
        }
    }


class MessageResponse(BaseModel):
    message: str
