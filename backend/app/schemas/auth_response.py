from __future__ import annotations
from typing import Literal

from pydantic import BaseModel, ConfigDict


class AuthResponse(BaseModel):
    """Tokens returned by /auth/login and /auth/refresh, also set as cookies."""

    model_config = ConfigDict(extra='forbid')

    access_token: str
    refresh_token: str
    token_type: Literal["bearer"] = "bearer"
    # lifetime of access_token, in seconds
    expires_in: int
