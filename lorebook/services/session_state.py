"""
Session state.

Holds the signed-in user's token for the lifetime of one login. Login and
register report failures as tagged ActionResults; nothing raised by the
catalog client crosses this boundary.
"""

import logging
from typing import Any

from lorebook.client.catalog import CatalogClient
from lorebook.models.failure import ActionResult, CatalogError, Unauthorized
from lorebook.models.session import Session, User

logger = logging.getLogger(__name__)


class SessionState:
    """Current authentication context, created at login and cleared at logout."""

    def __init__(self, client: CatalogClient) -> None:
        self.client = client
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def require(self) -> Session:
        """
        Get the active session.

        Raises:
            Unauthorized: If nobody is signed in
        """
        if self._session is None:
            raise Unauthorized()
        return self._session

    async def login(self, email: str, password: str) -> ActionResult[Any]:
        """
        Sign in and keep the session.

        Returns:
            Success carrying the User, or a failure tagged with the error kind
            (invalid credentials, network failure, service unavailable)
        """
        try:
            session = await self.client.login(email, password)
        except CatalogError as e:
            logger.info("Login failed for %s: %s", email, e.kind.value)
            return ActionResult.from_error(e)

        self._session = session
        logger.info("Signed in as user %d", session.user.id)
        return ActionResult.success(session.user)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        password_confirmation: str,
    ) -> ActionResult[Any]:
        """Create an account. The new user still has to log in."""
        try:
            user = await self.client.register(name, email, password, password_confirmation)
        except CatalogError as e:
            logger.info("Registration failed for %s: %s", email, e.kind.value)
            return ActionResult.from_error(e)
        return ActionResult.success(user)

    async def logout(self) -> None:
        """
        Sign out.

        Local state is cleared even if the server call fails.
        """
        session = self._session
        self._session = None
        if session is None:
            return

        try:
            await self.client.logout(session)
        except CatalogError as e:
            logger.warning("Remote logout failed (%s); local session cleared", e.kind.value)

    def invalidate(self) -> None:
        """Drop the session after the server rejected its token."""
        if self._session is not None:
            logger.warning("Session for user %d invalidated by server", self._session.user.id)
        self._session = None
