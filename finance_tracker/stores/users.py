"""
User Store

Owns the user roster and the persisted session. The session is kept
under its own key, so it survives restarts independently of the
roster; update_user rewrites both when they concern the same user.
"""

import secrets
from typing import Optional

import structlog
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.user import (
    RegistrationResult,
    Session,
    User,
    UserUpdateResult,
)
from finance_tracker.storage import KeyValueStorageInterface, StorageError


NAMESPACE = "user_preferences"
USERS_KEY = "users"
SESSION_KEY = "current_user"


class UserStore:
    """Registration, login and profile updates over a local roster."""

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._logger = structlog.get_logger(__name__)

    def users(self) -> list[User]:
        """
        All registered users.

        A corrupt roster reads as empty; corrupt entries are skipped.
        """
        try:
            records = self._storage.get(USERS_KEY, [])
        except StorageError as e:
            self._logger.warning("users_unreadable", error=str(e))
            return []

        if not isinstance(records, list):
            self._logger.warning("users_payload_unrecognized")
            return []

        users = []
        for record in records:
            try:
                users.append(User.model_validate(record))
            except ValidationError:
                self._logger.warning("user_record_skipped")
        return users

    def _save_users(self, users: list[User], operation: str) -> bool:
        try:
            self._storage.put(USERS_KEY, [u.model_dump(mode="json") for u in users])
        except StorageError as e:
            self._audit.log_storage_error(operation, e)
            return False
        return True

    def register(self, name: str, email: str, password: str) -> RegistrationResult:
        """Add a new user unless the email is already registered (ignoring case)."""
        users = self.users()
        if any(u.matches_email(email) for u in users):
            self._audit.log(AuditEventBuilder.registration_rejected(email))
            return RegistrationResult.EMAIL_TAKEN

        user = User(name=name, email=email, password=password)
        users.append(user)
        if not self._save_users(users, "register_user"):
            return RegistrationResult.STORAGE_FAILED

        self._audit.log(AuditEventBuilder.user_registered(user))
        return RegistrationResult.SUCCESS

    def login(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate and start a session.

        Wrong password and unknown email look the same to the caller.
        """
        user = next(
            (
                u for u in self.users()
                if u.matches_email(email)
                and secrets.compare_digest(u.password.encode(), password.encode())
            ),
            None,
        )
        if user is None:
            self._audit.log(AuditEventBuilder.login_failed(email))
            return None

        session = Session(user=user)
        try:
            self._storage.put(SESSION_KEY, session.model_dump(mode="json"))
        except StorageError as e:
            self._audit.log_storage_error("login", e)
            return None

        self._audit.log(AuditEventBuilder.user_logged_in(user))
        return user

    def current_session(self) -> Optional[Session]:
        """The persisted session, or None if unset or corrupt."""
        try:
            record = self._storage.get(SESSION_KEY)
        except StorageError as e:
            self._logger.warning("session_unreadable", error=str(e))
            return None

        if record is None:
            return None
        try:
            return Session.model_validate(record)
        except ValidationError:
            self._logger.warning("session_corrupt")
            return None

    def current_user(self) -> Optional[User]:
        session = self.current_session()
        return session.user if session else None

    def is_logged_in(self) -> bool:
        return self.current_user() is not None

    def logout(self) -> None:
        """Clear the session. User records are kept."""
        session = self.current_session()
        try:
            self._storage.delete(SESSION_KEY)
        except StorageError as e:
            self._audit.log_storage_error("logout", e)
            return
        self._audit.log(
            AuditEventBuilder.user_logged_out(session.user_id if session else None)
        )

    def is_email_taken(self, email: str, excluding_user_id: Optional[str] = None) -> bool:
        """True if a user other than excluding_user_id has this email (ignoring case)."""
        return any(
            u.id != excluding_user_id and u.matches_email(email)
            for u in self.users()
        )

    def update_user(self, user: User) -> UserUpdateResult:
        """
        Replace the user with the same id.

        If that user is the one logged in, the session copy is rewritten
        in the same write so roster and session never disagree.
        """
        users = self.users()
        index = next((i for i, u in enumerate(users) if u.id == user.id), None)
        if index is None:
            self._logger.warning("user_not_found_for_update", user_id=user.id)
            return UserUpdateResult.NOT_FOUND

        users[index] = user
        values = {USERS_KEY: [u.model_dump(mode="json") for u in users]}

        session = self.current_session()
        session_refreshed = session is not None and session.user_id == user.id
        if session_refreshed:
            values[SESSION_KEY] = Session(
                user=user,
                started_at=session.started_at,
            ).model_dump(mode="json")

        try:
            self._storage.put_many(values)
        except StorageError as e:
            self._audit.log_storage_error("update_user", e)
            return UserUpdateResult.STORAGE_FAILED

        self._audit.log(AuditEventBuilder.user_updated(user, session_refreshed))
        return UserUpdateResult.SUCCESS
