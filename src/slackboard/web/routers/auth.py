from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from slackboard.core.modules.auth.models import AuthResult, FederatedAuthResult
from slackboard.core.modules.user.models import UserView
from slackboard.web.deps import AppDep, AuthTokenDep
from slackboard.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])

TOKEN_COOKIE_MAX_AGE = 24 * 60 * 60  # matches the session token lifetime


class RegisterRequest(BaseModel):
    """Account registration request."""

    name: str = Field("", description="Display name")
    email: str = Field("", description="Email address, used as login")
    password: str = Field("", description="Password")
    phone_no: str | None = Field(None, alias="phoneNo", description="Optional phone number")

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field("", description="Email address")
    password: str = Field("", description="Password")


class GoogleLoginRequest(BaseModel):
    """Google sign-in with an authorization code from the popup flow."""

    code: str = Field("", description="Google authorization code")
    link_password: str | None = Field(
        None,
        description="Password of an existing account with the same email, confirming it should be linked to Google",
    )


class CurrentUserResponse(BaseModel):
    success: bool = True
    user: UserView


def _set_token_cookie(response: Response, token: str) -> None:
    # Cookie for browser-based clients
    response.set_cookie(
        key="auth_token",
        value=token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=TOKEN_COOKIE_MAX_AGE,
    )


@router.post(
    "/auth/register",
    summary="Register account",
    description="Create an account with name, email and password and receive a session token.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(data: RegisterRequest, app: AppDep, response: Response) -> AuthResult:
    result = await app.register(data.name, data.email, data.password, data.phone_no)
    _set_token_cookie(response, result.token)
    return result


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a session token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(data: LoginRequest, app: AppDep, response: Response) -> AuthResult:
    result = await app.login(data.email, data.password)
    _set_token_cookie(response, result.token)
    return result


@router.post(
    "/auth/google",
    summary="Authenticate with Google",
    description=(
        "Exchange a Google authorization code for a session token. The Google access token is returned "
        "for client-side Google API calls and is not stored."
    ),
    operation_id="googleLogin",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Google rejected the code or ID token"},
        409: {"model": ErrorResponse, "description": "Password account with this email must be linked first"},
    },
)
async def google_login(data: GoogleLoginRequest, app: AppDep, response: Response) -> FederatedAuthResult:
    result = await app.google_login(data.code, data.link_password)
    _set_token_cookie(response, result.token)
    return result


@router.get(
    "/auth/me",
    summary="Get current user",
    description="Return the account bound to the session token.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
        404: {"model": ErrorResponse, "description": "User no longer exists"},
    },
)
async def get_current_user(app: AppDep, auth_token: AuthTokenDep) -> CurrentUserResponse:
    return CurrentUserResponse(user=await app.get_current_user(auth_token))
