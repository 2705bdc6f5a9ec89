from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from slackboard.core.db import MongoModel
from slackboard.utils import now


class SubscriptionTier(StrEnum):
    NONE = "none"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"


class User(MongoModel):
    """User domain model with credentials.

    Indexed on email - unique. A user registered through Google has no
    password_hash; a password account gains google_id once linked.
    """

    name: str
    email: str
    password_hash: str | None = None  # bcrypt hash
    phone: str | None = None
    google_id: str | None = None
    subscription: SubscriptionTier = SubscriptionTier.NONE
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    subscription: SubscriptionTier = Field(..., description="Subscription tier")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, name=user.name, email=user.email, subscription=user.subscription)
