"""User collection: registration and credential checks."""

from __future__ import annotations

from typing import Optional
import logging

from postboard.core.security import hash_password, needs_rehash, verify_password
from postboard.domain.errors import DuplicateUserError, InvalidCredentialsError
from postboard.domain.models import Role, User, new_id
from postboard.repositories.json_storage import DocumentStore

logger = logging.getLogger(__name__)


class UserRepository:
    """Registration and login on top of the users ``DocumentStore``."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _all(self) -> list[User]:
        return [User.from_dict(r) for r in self.store.load()]

    # -------------------------- reads --------------------------
    def get(self, user_id: str) -> Optional[User]:
        for user in self._all():
            if user.id == user_id:
                return user
        return None

    def exists(self, user_id: str) -> bool:
        return self.get(user_id) is not None

    def find_by_email(self, email: str) -> Optional[User]:
        for user in self._all():
            if user.email == email:
                return user
        return None

    # -------------------------- writes --------------------------
    def register(self, username: str, email: str, password: str, mobile: str) -> str:
        """Create a user and return its id; email and mobile must be unused."""
        password_hash = hash_password(password)
        with self.store.transaction() as records:
            for existing in (User.from_dict(r) for r in records):
                if existing.email == email or existing.mobile == mobile:
                    raise DuplicateUserError("Email or mobile already in use.")
            user = User(
                id=new_id(),
                username=username,
                email=email,
                mobile=mobile,
                password=password_hash,
                role=Role.USER,
            )
            records.append(user.to_dict())
        logger.info("Registered user %s", user.id)
        return user.id

    def authenticate(self, email: str, password: str) -> Role:
        """Return the role of the account matching ``email``/``password``."""
        user = self.find_by_email(email)
        if not user or not verify_password(password, user.password):
            logger.warning("Refused login for %s", email)
            raise InvalidCredentialsError("Invalid credentials.")
        if needs_rehash(user.password):
            self._upgrade_hash(user.id, password)
        return user.role

    def _upgrade_hash(self, user_id: str, password: str) -> None:
        new_hash = hash_password(password)
        with self.store.transaction() as records:
            for record in records:
                if record.get("id") == user_id:
                    record["password"] = new_hash
                    break
        logger.info("Upgraded password hash for user %s", user_id)
