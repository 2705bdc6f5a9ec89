from slackboard.web.routers.auth import router as auth_router
from slackboard.web.routers.slack import router as slack_router

__all__ = [
    "auth_router",
    "slack_router",
]
