"""Registered users and the current session."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import User
from .storage import Storage

logger = logging.getLogger(__name__)


class AuthStore:
    """Owns the user list and the session slot.

    The store never checks credentials. Callers validate them (see
    ``find_user``) before calling ``login``. A session is not re-validated
    against the user list after login: removing the user keeps the session
    until ``logout``.
    """

    def __init__(
        self,
        storage: Storage,
        users: Iterable[User] = (),
        session: User | None = None,
    ) -> None:
        self._storage = storage
        self._users: list[User] = [u.model_copy() for u in users]
        self._session = session.model_copy() if session is not None else None

    @classmethod
    def from_storage(cls, storage: Storage) -> AuthStore:
        return cls(storage, storage.load_users(), storage.load_session())

    @property
    def users(self) -> list[User]:
        return [u.model_copy() for u in self._users]

    @property
    def session(self) -> User | None:
        return self._session.model_copy() if self._session is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def has_user(self, email: str) -> bool:
        key = _identity(email)
        return any(_identity(u.email) == key for u in self._users)

    def get_user(self, email: str) -> User | None:
        """Return the first registered user with this identity."""
        key = _identity(email)
        for u in self._users:
            if _identity(u.email) == key:
                return u.model_copy()
        return None

    def find_user(self, email: str, password: str) -> User | None:
        """Return the registered user matching both email and password."""
        key = _identity(email)
        for u in self._users:
            if _identity(u.email) == key and u.password == password:
                return u.model_copy()
        return None

    def register_user(self, user: User) -> None:
        # Duplicates are accepted; see DESIGN.md.
        if self.has_user(user.email):
            logger.warning("Registering duplicate user identity %r", user.email)
        self._users.append(user.model_copy())
        self._storage.save_users(self._users)
        logger.info("Registered user %r", user.email)

    def replace_users(self, users: Iterable[User]) -> None:
        self._users = [u.model_copy() for u in users]
        self._storage.save_users(self._users)

    def login(self, user: User) -> None:
        self._session = user.model_copy()
        self._storage.save_session(self._session)
        logger.info("User %r signed in", user.email)

    def logout(self) -> None:
        previous = self._session
        self._session = None
        self._storage.save_session(None)
        if previous is not None:
            logger.info("User %r signed out", previous.email)

    def flush(self) -> None:
        self._storage.save_users(self._users)
        self._storage.save_session(self._session)


def _identity(email: str) -> str:
    return email.strip().lower()
