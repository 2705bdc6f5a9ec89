from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    session_secret_key: str
    session_ttl_seconds: int = 24 * 60 * 60  # Session tokens expire after one day
    bcrypt_rounds: int = 12
    cors_origins: list[str] = []
    # Slack Web API (user or bot token)
    slack_token: str = ""
    slack_api_url: str = "https://slack.com/api"
    slack_timeout_seconds: float = 10.0
    slack_max_history_pages: int = 100  # Upper bound for cursor pagination of a single conversation
    slack_activity_concurrency: int = 1  # Parallel channel history calls, 1 = sequential
    slack_max_retries: int = 3
    # Google OAuth (authorization code flow, "postmessage" redirect for popup clients)
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = "postmessage"
    google_token_url: str = "https://oauth2.googleapis.com/token"
    google_jwks_url: str = "https://www.googleapis.com/oauth2/v3/certs"
    google_timeout_seconds: float = 10.0
    display_timezone: str = "UTC"  # Time zone used to format Slack message timestamps

    model_config = {
        "env_file": [".env"],
        "env_prefix": "SLACKBOARD_",
        "extra": "ignore",
    }
