import structlog

from slackboard.core.core import Service
from slackboard.core.modules.auth.models import AuthResult, FederatedAuthResult
from slackboard.core.modules.user.models import User, UserView
from slackboard.errors import AuthenticationError, ConflictError, FederationError, ValidationError

logger = structlog.get_logger(__name__)


class AuthService(Service):
    """Registration, password login, Google login and current-user lookup."""

    async def register(self, name: str, email: str, password: str, phone: str | None = None) -> AuthResult:
        if not name.strip() or not email.strip() or not password:
            raise ValidationError("Please fill all required fields")

        users = self.core.services.user
        if await users.find_by_email(email) is not None:
            raise ConflictError("User already exists. Please login instead")

        user = await users.create_user(name.strip(), email, password=password, phone=phone)
        logger.info("user_registered", user_id=user.id)
        return self._auth_result(user)

    async def login(self, email: str, password: str) -> AuthResult:
        if not email.strip() or not password:
            raise ValidationError("Please provide email and password")

        users = self.core.services.user
        user = await users.find_by_email(email)
        verified = users.check_password(user, password)
        if user is None or not verified:
            raise AuthenticationError("Invalid email or password")
        return self._auth_result(user)

    async def federated_login(self, code: str, link_password: str | None = None) -> FederatedAuthResult:
        """Log in with a Google authorization code.

        An existing password-only account with the same email is linked only
        when link_password verifies against it.
        """
        if not code:
            raise ValidationError("Authorization code is required")

        federation = self.core.services.federation
        tokens = await federation.exchange_code(code)
        identity = await federation.verify_identity(tokens.id_token)

        users = self.core.services.user
        user = await users.find_by_email(identity.email)
        if user is None:
            user = await users.create_user(identity.name, identity.email, google_id=identity.external_id)
        elif user.google_id is None:
            if link_password is None or not users.check_password(user, link_password):
                logger.warning("federated_link_required", user_id=user.id)
                raise ConflictError("An account with this email already exists. Confirm its password to link Google sign-in")
            user = await users.link_google_id(user.id, identity.external_id)
        elif user.google_id != identity.external_id:
            logger.warning("federated_identity_mismatch", user_id=user.id)
            raise FederationError("This account is linked to a different Google identity")

        token = self.core.services.session.issue_token(user.id)
        return FederatedAuthResult(token=token, google_token=tokens.access_token, user=UserView.from_domain(user))

    async def who_am_i(self, auth_token: str | None) -> UserView:
        user = await self.core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(user)

    def _auth_result(self, user: User) -> AuthResult:
        token = self.core.services.session.issue_token(user.id)
        return AuthResult(token=token, user=UserView.from_domain(user))
