"""Tests for Google code exchange and ID token verification."""

import time
from types import SimpleNamespace
from urllib.parse import parse_qs

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from slackboard.core.modules.federation.client import GoogleOAuthClient
from slackboard.errors import FederationError

CLIENT_ID = "client-id.apps.googleusercontent.com"
TOKEN_URL = "https://oauth2.test/token"


def generate_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def signing_key():
    """RSA key standing in for Google's signing key."""
    return generate_key()


class StaticKeys:
    """Key resolver returning one public key."""
    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        self.public_key = private_key.public_key()

    def get_signing_key_from_jwt(self, token: str) -> SimpleNamespace:
        return SimpleNamespace(key=self.public_key)


class FailingKeys:
    """Key resolver that cannot find a key."""
    def get_signing_key_from_jwt(self, token: str) -> SimpleNamespace:
        raise jwt.PyJWKClientError("Unable to find a signing key that matches")


def make_client(handler, keys) -> GoogleOAuthClient:
    """Build a client whose HTTP calls go to handler."""
    return GoogleOAuthClient(
        http=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        keys=keys,
        client_id=CLIENT_ID,
        client_secret="client-secret",
        redirect_uri="postmessage",
        token_url=TOKEN_URL,
    )


def id_token(private_key, **overrides) -> str:
    """Sign a Google-shaped ID token; None overrides drop the claim."""
    now = int(time.time())
    claims = {
        "iss": "https://accounts.google.com",
        "aud": CLIENT_ID,
        "sub": "google-123",
        "email": "grace@example.com",
        "email_verified": True,
        "name": "Grace Hopper",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    claims = {key: value for key, value in claims.items() if value is not None}
    return jwt.encode(claims, private_key, algorithm="RS256", headers={"kid": "test-key"})


def unused_handler(request: httpx.Request) -> httpx.Response:
    raise AssertionError("no HTTP call expected")


class TestExchangeCode:
    """Tests for authorization code exchange."""

    async def test_posts_authorization_code_grant(self, signing_key):
        """Test that the code is posted as an authorization_code grant."""
        seen: dict[str, list[str]] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == TOKEN_URL
            seen.update(parse_qs(request.content.decode()))
            return httpx.Response(200, json={"access_token": "ya29.access", "id_token": "id.token.value"})

        tokens = await make_client(handler, StaticKeys(signing_key)).exchange_code("auth-code")

        assert tokens.access_token == "ya29.access"
        assert tokens.id_token == "id.token.value"
        assert seen["grant_type"] == ["authorization_code"]
        assert seen["code"] == ["auth-code"]
        assert seen["redirect_uri"] == ["postmessage"]
        assert seen["client_id"] == [CLIENT_ID]

    async def test_rejected_code(self, signing_key):
        """Test that an error response fails the exchange."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with pytest.raises(FederationError):
            await make_client(handler, StaticKeys(signing_key)).exchange_code("expired-code")

    async def test_response_without_id_token(self, signing_key):
        """Test that a response without an ID token fails the exchange."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"access_token": "ya29.access"})

        with pytest.raises(FederationError):
            await make_client(handler, StaticKeys(signing_key)).exchange_code("auth-code")

    @pytest.mark.parametrize(
        "response",
        [httpx.Response(200, text="not json"), httpx.Response(200, json=["access_token", "id_token"])],
        ids=["not_json", "not_an_object"],
    )
    async def test_malformed_token_response(self, signing_key, response):
        """Test that a token response that is not a JSON object fails the exchange."""

        def handler(request: httpx.Request) -> httpx.Response:
            return response

        with pytest.raises(FederationError):
            await make_client(handler, StaticKeys(signing_key)).exchange_code("auth-code")

    async def test_transport_failure(self, signing_key):
        """Test that a connection failure fails the exchange."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FederationError):
            await make_client(handler, StaticKeys(signing_key)).exchange_code("auth-code")


class TestVerifyIdentity:
    """Tests for ID token verification."""

    async def test_valid_token(self, signing_key):
        """Test that a valid token yields the Google identity."""
        client = make_client(unused_handler, StaticKeys(signing_key))

        identity = await client.verify_identity(id_token(signing_key))

        assert identity.email == "grace@example.com"
        assert identity.name == "Grace Hopper"
        assert identity.external_id == "google-123"

    async def test_name_falls_back_to_email(self, signing_key):
        """Test that a token without a name uses the email."""
        client = make_client(unused_handler, StaticKeys(signing_key))

        identity = await client.verify_identity(id_token(signing_key, name=None))
        assert identity.name == "grace@example.com"

    async def test_short_issuer_accepted(self, signing_key):
        """Test that the issuer without scheme is accepted."""
        client = make_client(unused_handler, StaticKeys(signing_key))
        identity = await client.verify_identity(id_token(signing_key, iss="accounts.google.com"))
        assert identity.external_id == "google-123"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"aud": "someone-else.apps.googleusercontent.com"},
            {"iss": "https://evil.example.com"},
            {"exp": int(time.time()) - 60},
            {"email_verified": False},
            {"email": None},
        ],
    )
    async def test_invalid_claims(self, signing_key, overrides):
        """Test that wrong audience, issuer, expiry or email claims are rejected."""
        client = make_client(unused_handler, StaticKeys(signing_key))

        with pytest.raises(FederationError):
            await client.verify_identity(id_token(signing_key, **overrides))

    async def test_signed_with_unknown_key(self, signing_key):
        """Test that a token signed by another key is rejected."""
        client = make_client(unused_handler, StaticKeys(signing_key))

        with pytest.raises(FederationError):
            await client.verify_identity(id_token(generate_key()))

    async def test_key_lookup_failure(self, signing_key):
        """Test that a failed key lookup is rejected."""
        client = make_client(unused_handler, FailingKeys())

        with pytest.raises(FederationError):
            await client.verify_identity(id_token(signing_key))
