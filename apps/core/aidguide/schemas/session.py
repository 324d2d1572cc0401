"""Session schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OriginProvider = Literal["password", "google.com"]


class Session(BaseModel):
    """Authenticated identity owned by the session manager."""

    model_config = ConfigDict(frozen=True)

    identity_id: str = Field(min_length=1)
    email: str
    display_name: str | None = None
    avatar_url: str | None = None
    origin_provider: OriginProvider


class ProviderUser(BaseModel):
    """Identity as returned by an identity provider after authentication."""

    identity_id: str = Field(min_length=1)
    email: str = ""
    display_name: str | None = None
    avatar_url: str | None = None
    id_token: str | None = None
    is_new_user: bool = False


class FederatedCredential(BaseModel):
    """Token pair handed back by the federated provider's interactive step."""

    provider_id: str = "google.com"
    id_token: str | None = None
    access_token: str | None = None
