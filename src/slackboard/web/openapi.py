from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Endpoints reachable without a session token
PUBLIC_ENDPOINTS = {
    ("POST", "/api/v1/auth/register"),
    ("POST", "/api/v1/auth/login"),
    ("POST", "/api/v1/auth/google"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Slackboard API",
            version="0.1.0",
            summary="Account management and Slack workspace activity",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "description": "Bearer token authentication (preferred)",
            },
            "AuthTokenCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "auth_token",
                "description": "Authentication token stored in cookie",
            },
        }

        # Apply security globally (will be overridden for public endpoints)
        openapi_schema["security"] = [
            {"BearerAuth": []},
            {"AuthTokenCookie": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "message": "Invalid email or password", "type": "authentication_error"},
                {"success": False, "message": "User already exists. Please login instead", "type": "conflict"},
                {"success": False, "message": "channel_not_found", "type": "upstream_error"},
            ]
        }
    }
