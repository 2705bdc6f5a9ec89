"""Session token models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import BaseModel

AuthToken = NewType("AuthToken", str)


class SessionClaims(BaseModel):
    """Claims carried by a signed session token."""

    sub: UUID
    iat: datetime
    exp: datetime
    jti: str
