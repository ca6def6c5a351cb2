from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_.\-]+$")


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not _USERNAME_RE.match(value):
            raise ValueError(
                "Username may contain only ASCII letters, digits, '_', '.' and '-'"
            )
        return value


class LoginRequestDTO(BaseModel):
    # No format rules on login: any mismatch is just invalid credentials.
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class AuthSuccessDTO(BaseModel):
    user_id: int
    token: str
    expires_at: datetime


class SessionDTO(BaseModel):
    user_id: int
