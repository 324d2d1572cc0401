"""Authentication request and response schemas."""

from pydantic import BaseModel, Field


class CreateAccountRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    name: str
    phone: str = ""


class PasswordSignInRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RoleResponse(BaseModel):
    privileged: bool


class FederatedSignInRequest(BaseModel):
    """Tokens from the client-side Google picker; both empty means it was dismissed."""

    id_token: str | None = None
    access_token: str | None = None
