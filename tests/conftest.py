"""Shared pytest fixtures."""

import copy
from types import SimpleNamespace
from typing import Any
from uuid import UUID

import httpx
import pytest
from pymongo.errors import DuplicateKeyError
from tenacity import wait_none

from slackboard.config import Config
from slackboard.core.modules.access.service import AccessService
from slackboard.core.modules.auth.service import AuthService
from slackboard.core.modules.federation.models import FederatedIdentity, ProviderTokens
from slackboard.core.modules.session.service import SessionService
from slackboard.core.modules.slack.client import SlackClient
from slackboard.core.modules.user.models import User
from slackboard.core.modules.user.service import UserService


class FakeCollection:
    """In-memory stand-in for an async Mongo collection with a unique email index."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "email_1"

    def _match(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs if all(doc.get(k) == v for k, v in query.items())), None)

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        doc = self._match(query)
        return copy.deepcopy(doc) if doc is not None else None

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        if any(existing["email"] == doc["email"] for existing in self.docs):
            raise DuplicateKeyError("E11000 duplicate key error collection: users index: email_1")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        doc = self._match(query)
        if doc is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        doc.update(update.get("$set", {}))
        return SimpleNamespace(matched_count=1, modified_count=1)


class FakeDatabase:
    """In-memory stand-in for an async Mongo database."""
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeFederation:
    """Federation service double returning a fixed Google identity."""

    def __init__(self) -> None:
        self.tokens = ProviderTokens(access_token="ya29.google-access", id_token="google-id-token")
        self.identity = FederatedIdentity(name="Grace Hopper", email="grace@example.com", external_id="google-123")
        self.error: Exception | None = None
        self.codes: list[str] = []

    async def exchange_code(self, code: str) -> ProviderTokens:
        self.codes.append(code)
        if self.error is not None:
            raise self.error
        return self.tokens

    async def verify_identity(self, id_token: str) -> FederatedIdentity:
        return self.identity


class FakeSlackApi:
    """Routes Slack Web API requests to canned responses and records every call."""

    def __init__(self) -> None:
        self._responses: dict[str, Any] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []

    def on(self, method: str, *responses: Any) -> None:
        """Queue responses (dicts or httpx.Response) returned in order."""
        self._responses[method] = list(responses)

    def on_call(self, method: str, handler: Any) -> None:
        """Answer a method with handler(params)."""
        self._responses[method] = handler

    def calls_to(self, method: str) -> list[dict[str, str]]:
        return [params for name, params in self.calls if name == method]

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        params = dict(request.url.params)
        self.calls.append((method, params))
        responses = self._responses[method]
        result = responses(params) if callable(responses) else responses.pop(0)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)


@pytest.fixture
def config():
    """Test configuration with cheap bcrypt rounds."""
    return Config(
        database_url="mongodb://localhost:27017/slackboard_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        session_secret_key="test-secret-key-that-is-long-enough-for-hs256",
        bcrypt_rounds=4,
        slack_token="xoxp-test",
        google_client_id="client-id.apps.googleusercontent.com",
        google_client_secret="client-secret",
    )


@pytest.fixture
def database():
    """Empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def federation():
    """Federation double with a fixed Google identity."""
    return FakeFederation()


@pytest.fixture
async def core(config, federation):
    """Core double wiring the real services to an in-memory database."""
    database = FakeDatabase()
    services = SimpleNamespace(
        user=UserService(database),
        session=SessionService(database),
        access=AccessService(database),
        auth=AuthService(database),
        federation=federation,
    )
    fake_core = SimpleNamespace(config=config, database=database, services=services)
    for service in (services.user, services.session, services.access, services.auth):
        service.set_core(fake_core)
    await services.user.on_start()
    return fake_core


@pytest.fixture
def slack_api():
    """Canned Slack Web API."""
    return FakeSlackApi()


@pytest.fixture
async def slack_client(slack_api):
    """Slack client talking to the canned API, retrying without waits."""
    async with httpx.AsyncClient(base_url="https://slack.test/api", transport=httpx.MockTransport(slack_api.handle)) as http:
        yield SlackClient(http, max_retries=3, wait=wait_none())


@pytest.fixture
def mock_user():
    """Create a mock user for testing."""
    return User(
        id=UUID("87654321-4321-8765-4321-876543218765"),
        name="Test User",
        email="testuser@example.com",
        password_hash="$2b$12$hashed_password_here",
        phone="+15550100",
        google_id="google-123",
    )
