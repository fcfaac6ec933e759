from __future__ import annotations
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class LoginRequest(BaseModel):
    """Front-desk staff sign-in. Emails are stored lower-case by the seed script."""

    model_config = ConfigDict(extra='forbid')

    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: Annotated[str, Field(min_length=8, max_length=72)]

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()
