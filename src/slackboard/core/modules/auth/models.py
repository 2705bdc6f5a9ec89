from pydantic import BaseModel, Field

from slackboard.core.modules.user.models import UserView


class AuthResult(BaseModel):
    """Session token plus the authenticated user's public view."""

    success: bool = True
    token: str = Field(..., description="Session token for subsequent requests")
    user: UserView


class FederatedAuthResult(AuthResult):
    """Result of Google login; the provider token is handed to the client, never stored."""

    google_token: str = Field(..., description="Google access token for provider-scoped calls")
