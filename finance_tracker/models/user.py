"""
User and Session Models

Users live in a roster; the session is a separate record holding a
snapshot of whoever is logged in, so it survives restarts on its own.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, Field, StringConstraints


# Names and emails are trimmed; passwords are kept exactly as typed.
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]


class RegistrationResult(str, Enum):
    """Outcome of a registration attempt."""
    SUCCESS = "success"
    EMAIL_TAKEN = "email_taken"
    STORAGE_FAILED = "storage_failed"


class UserUpdateResult(str, Enum):
    """Outcome of a profile update."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    STORAGE_FAILED = "storage_failed"


class User(BaseModel):
    """
    A registered user.

    NOTE: The password is kept as entered and compared for equality.
    See DESIGN.md for why this is kept as-is.
    """
    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique user ID"
    )
    name: TrimmedStr = Field(
        ...,
        description="Display name"
    )
    email: TrimmedStr = Field(
        ...,
        description="Login email, unique ignoring case"
    )
    password: str = Field(
        ...,
        repr=False,
        description="Login password"
    )

    def matches_email(self, email: str) -> bool:
        """Case-insensitive email comparison."""
        return self.email.casefold() == email.strip().casefold()


class Session(BaseModel):
    """
    The logged-in user.

    Created at login and destroyed at logout. Holds its own copy of
    the user, which the user store keeps in step with the roster.
    """

    user: User
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the user logged in (UTC)"
    )

    @property
    def user_id(self) -> str:
        return self.user.id
