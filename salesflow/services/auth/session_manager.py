"""
Interactive session management for a single logged-in user.

SessionManager holds the user of an in-process session, such as a shell or
a script driving the services directly, and notifies subscribers whenever
the user logs in or out. The session lives only as long as the process.
"""

from typing import Callable, Iterable, Optional, Union

from salesflow.core.logging import clear_context, get_logger, set_user_id
from salesflow.database.connection import Database
from salesflow.database.models.user import User, UserRole
from salesflow.services import authorization
from salesflow.services.auth.service import AuthService

logger = get_logger(__name__)

SessionListener = Callable[[Optional[User]], None]


class SessionManager:
    """
    Tracks the authenticated user of an in-process session.

    Attributes:
        database: Store used to authenticate users
    """

    def __init__(self, database: Database):
        self.database = database
        self._user: Optional[User] = None
        self._listeners: list[SessionListener] = []

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a callback invoked with the current user on login and logout.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def login(self, username: str, password: str) -> bool:
        """
        Authenticate and make the user current.

        Returns:
            True on success; on failure the previous session is kept
        """
        with self.database.session() as session:
            user = AuthService(session).authenticate(username, password)
        if user is None:
            return False

        self._user = user
        set_user_id(str(user.id))
        logger.info("Session started", user_id=user.id, role=user.role.value)
        self._notify()
        return True

    def logout(self) -> None:
        if self._user is None:
            return
        logger.info("Session ended", user_id=self._user.id)
        self._user = None
        clear_context()
        self._notify()

    def has_permission(self, required_roles: Iterable[Union[UserRole, str]]) -> bool:
        """Nobody is permitted anything while logged out."""
        if self._user is None:
            return False
        return authorization.has_permission(self._user.role, required_roles)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._user)
