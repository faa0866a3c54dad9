"""Tests for session state."""

from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from lorebook.client.catalog import CatalogClient
from lorebook.models.failure import (
    FailureKind,
    NetworkUnreachable,
    OutcomeType,
    RequestFailed,
    ServiceUnavailable,
    Unauthorized,
)
from lorebook.models.session import Session, User
from lorebook.services.session_state import SessionState


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock(spec=CatalogClient)


@pytest.fixture
def state(client: AsyncMock) -> SessionState:
    return SessionState(client)


class TestLogin:
    async def test_success_stores_session(
        self, client: AsyncMock, state: SessionState, session: Session, user: User
    ) -> None:
        client.login.return_value = session

        result = await state.login("ariel@example.com", "pw")

        assert result.ok
        assert result.data == user
        assert state.is_authenticated
        assert state.require() is session
        assert state.user == user

    @pytest.mark.parametrize(
        ("error", "kind", "retryable"),
        [
            (RequestFailed("Identifiants invalides"), FailureKind.REQUEST_FAILED, False),
            (NetworkUnreachable(), FailureKind.NETWORK_UNREACHABLE, True),
            (ServiceUnavailable(), FailureKind.SERVICE_UNAVAILABLE, True),
        ],
    )
    async def test_failures_are_tagged_not_raised(
        self,
        client: AsyncMock,
        state: SessionState,
        error: Exception,
        kind: FailureKind,
        retryable: bool,
    ) -> None:
        client.login.side_effect = error

        result = await state.login("ariel@example.com", "wrong")

        assert result.outcome == OutcomeType.FAILURE
        assert result.failure is not None
        assert result.failure.kind == kind
        assert result.failure.retryable is retryable
        assert not state.is_authenticated

    async def test_invalid_credentials_message_verbatim(
        self, client: AsyncMock, state: SessionState
    ) -> None:
        client.login.side_effect = RequestFailed("Identifiants invalides")

        result = await state.login("ariel@example.com", "wrong")

        assert result.failure is not None
        assert result.failure.message == "Identifiants invalides"

    @respx.mock
    async def test_rejected_401_reaches_form_as_request_failed(
        self, api_url: str, catalog_client: CatalogClient
    ) -> None:
        """A wrong password answered with 401 is not a session expiry."""
        respx.post(f"{api_url}/login").mock(return_value=httpx.Response(401, json={}))
        state = SessionState(catalog_client)

        result = await state.login("ariel@example.com", "wrong")

        assert result.failure is not None
        assert result.failure.kind == FailureKind.REQUEST_FAILED
        assert result.failure.message == "Invalid credentials"
        assert not result.failure.retryable
        assert not state.is_authenticated


class TestRegister:
    async def test_success_does_not_sign_in(
        self, client: AsyncMock, state: SessionState, user: User
    ) -> None:
        client.register.return_value = user

        result = await state.register("Ariel", "ariel@example.com", "pw", "pw")

        assert result.ok
        assert result.data == user
        assert not state.is_authenticated

    async def test_failure_is_tagged(self, client: AsyncMock, state: SessionState) -> None:
        client.register.side_effect = RequestFailed("The email has already been taken.")

        result = await state.register("Ariel", "ariel@example.com", "pw", "pw")

        assert not result.ok
        assert result.failure is not None
        assert result.failure.message == "The email has already been taken."


class TestLogout:
    async def test_clears_session(
        self, client: AsyncMock, state: SessionState, session: Session
    ) -> None:
        client.login.return_value = session
        await state.login("ariel@example.com", "pw")

        await state.logout()

        client.logout.assert_awaited_once_with(session)
        assert not state.is_authenticated

    async def test_remote_failure_still_clears(
        self, client: AsyncMock, state: SessionState, session: Session
    ) -> None:
        """Local logout always succeeds."""
        client.login.return_value = session
        client.logout.side_effect = NetworkUnreachable()
        await state.login("ariel@example.com", "pw")

        await state.logout()

        assert not state.is_authenticated

    async def test_logged_out_makes_no_call(self, client: AsyncMock, state: SessionState) -> None:
        await state.logout()

        client.logout.assert_not_called()


class TestInvalidate:
    async def test_invalidate_drops_session(
        self, client: AsyncMock, state: SessionState, session: Session
    ) -> None:
        client.login.return_value = session
        await state.login("ariel@example.com", "pw")

        state.invalidate()

        assert not state.is_authenticated
        client.logout.assert_not_called()

    def test_require_when_logged_out(self, state: SessionState) -> None:
        with pytest.raises(Unauthorized):
            state.require()
