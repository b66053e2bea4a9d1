"""Auth Schemas — login request and token response for POST /v1/Auth/Login.

Invariants:
    - LoginRequest.login is the holder's tax id, digits only after validation
    - password and token never appear in repr (kept out of logs)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bankard.core.tax_id import only_digits


class LoginRequest(BaseModel):
    login: str = Field(min_length=11, max_length=18)
    password: str = Field(min_length=1, repr=False)

    @field_validator("login")
    @classmethod
    def digits_only(cls, v: str) -> str:
        digits = only_digits(v)
        if not digits:
            raise ValueError("login must contain a tax id")
        return digits


class AuthResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str = Field(min_length=1, repr=False)
    expires_at: datetime | None = Field(None, alias="expiresAt")
