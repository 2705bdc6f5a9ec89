from typing import Annotated, cast

from fastapi import Depends, Header, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from slackboard.app import App
from slackboard.core.modules.session.models import AuthToken

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name="auth_token", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    authorization: Annotated[str | None, Header()] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken | None:
    """Extract the session token without validating it.

    Accepts ``Authorization: Bearer <token>``, a bare ``Authorization: <token>``
    header, or the auth_token cookie. Validation happens in App so that a
    missing token and an invalid token produce distinct errors.
    """
    if credentials:
        return AuthToken(credentials.credentials)

    if authorization and " " not in authorization.strip():
        return AuthToken(authorization.strip())

    if token_cookie:
        return AuthToken(token_cookie)

    return None


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken | None, Depends(get_auth_token)]
