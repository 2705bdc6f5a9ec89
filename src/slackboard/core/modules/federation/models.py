from pydantic import BaseModel


class ProviderTokens(BaseModel):
    """Tokens returned by the provider's authorization code exchange."""

    access_token: str
    id_token: str


class FederatedIdentity(BaseModel):
    """Identity asserted by a verified provider ID token."""

    name: str
    email: str
    external_id: str
