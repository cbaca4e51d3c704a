"""Authentication session state."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from docassist.core.exceptions import UnauthenticatedError
from docassist.schemas.documents import UserProfile

logger = logging.getLogger(__name__)

UserListener = Callable[[Optional[UserProfile]], None]


class AuthSession:
    """
    Holds the signed-in user pushed by the identity provider.

    The session is "initialized" once the provider has reported a state, even
    if that state is "signed out". Services wait for initialization before any
    store call and then read the user synchronously.
    """

    def __init__(self):
        self._user: Optional[UserProfile] = None
        self._initialized = asyncio.Event()
        self._listeners: List[UserListener] = []

    @property
    def is_initialized(self) -> bool:
        return self._initialized.is_set()

    def set_user(self, user: Optional[UserProfile]) -> None:
        """Record an auth state change and notify subscribers."""
        self._user = user
        self._initialized.set()
        logger.debug(f"Auth state changed: {'signed in' if user else 'signed out'}")
        for listener in list(self._listeners):
            listener(user)

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """
        Register a listener for auth state changes.

        The listener is called immediately with the current user once the
        session is initialized. Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)
        if self.is_initialized:
            listener(self._user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_for_auth(self) -> Optional[UserProfile]:
        await self._initialized.wait()
        return self._user

    def current_user(self) -> Optional[UserProfile]:
        return self._user

    def is_authenticated(self) -> bool:
        return self._user is not None

    def require_user(self) -> UserProfile:
        if self._user is None:
            raise UnauthenticatedError()
        return self._user

    async def require_ready_user(self) -> UserProfile:
        """Wait for initialization, then return the user or raise UnauthenticatedError."""
        await self.wait_for_auth()
        return self.require_user()

    def sign_out(self) -> None:
        self.set_user(None)
