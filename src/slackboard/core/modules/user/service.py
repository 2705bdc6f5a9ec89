from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from slackboard.core.core import Service
from slackboard.core.modules.user.models import SubscriptionTier, User
from slackboard.core.modules.user.validators import validate_email, validate_password
from slackboard.errors import ConflictError, NotFoundError
from slackboard.utils import normalize_email

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Stores user accounts in the users collection and checks their passwords."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._dummy_hash: bytes | None = None

    async def on_start(self) -> None:
        """Create the unique email index."""
        await self._collection.create_index([("email", 1)], unique=True)
        logger.debug("user_service_started")

    async def find_by_email(self, email: str) -> User | None:
        doc = await self._collection.find_one({"email": normalize_email(email)})
        return None if doc is None else User.model_validate(doc)

    async def find_by_id(self, user_id: UUID) -> User | None:
        doc = await self._collection.find_one({"_id": user_id})
        return None if doc is None else User.model_validate(doc)

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID. Raises NotFoundError if not found."""
        user = await self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def create_user(
        self,
        name: str,
        email: str,
        password: str | None = None,
        phone: str | None = None,
        google_id: str | None = None,
    ) -> User:
        """Create user, hashing the password when one is given.

        Email uniqueness is enforced by the unique index, so a concurrent
        registration with the same email still fails with ConflictError.
        """
        email = normalize_email(email)
        validate_email(email)
        password_hash = None
        if password is not None:
            validate_password(password)
            password_hash = self.hash_password(password)

        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            phone=phone,
            google_id=google_id,
            subscription=SubscriptionTier.NONE,
        )
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ConflictError("User already exists. Please login instead") from e
        logger.info("user_created", user_id=user.id, federated=google_id is not None)
        return user

    async def link_google_id(self, user_id: UUID, google_id: str) -> User:
        """Attach a Google account id to an existing user."""
        result = await self._collection.update_one({"_id": user_id}, {"$set": {"google_id": google_id}})
        if result.matched_count == 0:
            raise NotFoundError("User not found")
        logger.info("federated_account_linked", user_id=user_id)
        return await self.get_user(user_id)

    def hash_password(self, password: str) -> str:
        rounds = self.core.config.bcrypt_rounds
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")

    def check_password(self, user: User | None, password: str) -> bool:
        """Verify password against the user's stored hash.

        Always performs one bcrypt comparison, also for unknown users and
        accounts without a local password.
        """
        password_bytes = password.encode("utf-8")[:72]
        if user is None or user.password_hash is None:
            bcrypt.checkpw(password_bytes, self._get_dummy_hash())
            return False
        return bcrypt.checkpw(password_bytes, user.password_hash.encode("utf-8"))

    def _get_dummy_hash(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(self.core.config.bcrypt_rounds))
        return self._dummy_hash
