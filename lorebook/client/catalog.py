"""
Remote catalog client.

Async wrapper over the collection-tracker HTTP API. Translates typed calls
into authenticated requests and typed responses, and maps every transport
or HTTP failure onto the error taxonomy in lorebook.models.failure.

The client never retries and never caches. Retry policy belongs to the
caller.
"""

import logging
import re
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from lorebook.client.adapters import WireRequest, get_wire_adapter
from lorebook.client.schemas import (
    CARD_LIST,
    OWNED_LIST,
    SET_LIST,
    ErrorPayload,
    LoginPayload,
    SetPayload,
    UserPayload,
    unwrap,
)
from lorebook.config import settings
from lorebook.models.card import Card, CardSet
from lorebook.models.collection import OwnedQuantity
from lorebook.models.failure import (
    STANDARD_MESSAGES,
    AlreadyPresent,
    NetworkUnreachable,
    NotPresent,
    RequestFailed,
    ServiceUnavailable,
    Unauthorized,
)
from lorebook.models.session import Session, User

logger = logging.getLogger(__name__)

# Server messages meaning the wishlist already holds / lacks the card.
# The API answers in French or English depending on version.
_ALREADY_PRESENT = re.compile(r"already|déjà", re.IGNORECASE)
_NOT_PRESENT = re.compile(r"not in|not found|n'est pas|pas dans|introuvable", re.IGNORECASE)


def _decode(response: httpx.Response) -> Any:
    """
    Decode a JSON body.

    Returns None for an empty body.

    Raises:
        ServiceUnavailable: If the body is not JSON (e.g., an HTML error page)
    """
    if not response.content.strip():
        return None
    try:
        return response.json()
    except ValueError as e:
        raise ServiceUnavailable(status_code=response.status_code) from e


def _error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    try:
        return ErrorPayload.model_validate(body).message or None
    except ValidationError:
        return None


def _check_response(response: httpx.Response) -> Any:
    """
    Classify a response and return its decoded body.

    Raises:
        Unauthorized: 401/403
        ServiceUnavailable: 5xx or non-JSON body
        RequestFailed: Any other 4xx
    """
    status = response.status_code

    if status in (401, 403):
        try:
            message = _error_message(_decode(response))
        except ServiceUnavailable:
            message = None
        raise Unauthorized(message, status_code=status)

    body = _decode(response)

    if status >= 500:
        raise ServiceUnavailable(status_code=status)
    if status >= 400:
        raise RequestFailed(_error_message(body), status_code=status)

    return body


def _parse(adapter: TypeAdapter[Any] | type[BaseModel], payload: Any, what: str) -> Any:
    """Validate a payload, treating malformed data as a server fault."""
    try:
        if isinstance(adapter, TypeAdapter):
            return adapter.validate_python(payload)
        return adapter.model_validate(payload)
    except ValidationError as e:
        logger.error("Malformed %s payload: %s", what, e)
        raise ServiceUnavailable() from e


class CatalogClient:
    """
    Client for the catalog API.

    Authenticated calls take the Session explicitly; there is no ambient
    token.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        wire_version: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the catalog client.

        Args:
            base_url: API base URL. Defaults to settings.api_base_url.
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
            wire_version: "current" or "legacy". Defaults to settings.wire_version.
            http_client: Optional shared httpx client for connection reuse.
                The caller owns its lifecycle.
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.adapter = get_wire_adapter(wire_version or settings.wire_version)
        self._http = http_client

    async def _request(
        self,
        method: str,
        path: str,
        session: Session | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform one HTTP call and return the decoded body.

        Raises:
            NetworkUnreachable: If no response arrives within the timeout
            Unauthorized, ServiceUnavailable, RequestFailed: See _check_response
        """
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if session is not None:
            headers.update(session.auth_header)

        try:
            if self._http is not None:
                response = await self._http.request(
                    method, url, json=json, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("Timed out after %.1fs: %s %s", self.timeout, method, path)
            raise NetworkUnreachable() from e
        except httpx.RequestError as e:
            logger.warning("No response for %s %s: %s", method, path, e)
            raise NetworkUnreachable() from e

        try:
            return _check_response(response)
        except (Unauthorized, ServiceUnavailable, RequestFailed) as e:
            logger.warning("%s %s failed (%s): %s", method, path, e.kind.value, e.message)
            raise

    async def _send(self, request: WireRequest, session: Session) -> Any:
        return await self._request(request.method, request.path, session, request.json)

    # --- Authentication ---

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        password_confirmation: str,
    ) -> User:
        """Create an account. Does not sign in."""
        body = await self._request(
            "POST",
            "/register",
            json={
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password_confirmation,
            },
        )
        payload = unwrap(body)
        if isinstance(payload, dict) and "user" in payload:
            payload = payload["user"]
        return _parse(UserPayload, payload, "user").to_user()

    async def login(self, email: str, password: str) -> Session:
        """
        Exchange credentials for a session.

        Raises:
            RequestFailed: If the credentials are rejected (including 401/403)
                or no token is returned
        """
        try:
            body = await self._request(
                "POST", "/login", json={"email": email, "password": password}
            )
        except Unauthorized as e:
            # No session exists yet, so a 401 here means wrong credentials
            message = None if e.message == STANDARD_MESSAGES[e.kind] else e.message
            raise RequestFailed(message or "Invalid credentials", status_code=e.status_code) from e
        payload = unwrap(body)
        if not isinstance(payload, dict) or not payload.get("token"):
            logger.error("Login response carried no token")
            raise RequestFailed("Invalid credentials")
        return _parse(LoginPayload, payload, "login").to_session()

    async def logout(self, session: Session) -> None:
        """Invalidate the token server-side."""
        await self._request("POST", "/logout", session)

    async def current_user(self, session: Session) -> User:
        body = await self._request("GET", "/me", session)
        return _parse(UserPayload, unwrap(body), "user").to_user()

    # --- Catalog ---

    async def list_sets(self, session: Session) -> list[CardSet]:
        body = await self._request("GET", "/sets", session)
        return [s.to_set() for s in _parse(SET_LIST, unwrap(body) or [], "set list")]

    async def get_set(self, session: Session, set_id: int) -> CardSet:
        body = await self._request("GET", f"/sets/{set_id}", session)
        return _parse(SetPayload, unwrap(body), "set").to_set()

    async def list_set_cards(self, session: Session, set_id: int) -> list[Card]:
        body = await self._request("GET", f"/sets/{set_id}/cards", session)
        return [c.to_card() for c in _parse(CARD_LIST, unwrap(body) or [], "card list")]

    # --- User collection ---

    async def list_user_cards(self, session: Session) -> list[OwnedQuantity]:
        """
        Get the user's owned quantities.

        Entries may cover only owned cards or the whole catalog with zeros;
        callers must not assume either.
        """
        body = await self._request("GET", "/me/cards", session)
        return [o.to_owned() for o in _parse(OWNED_LIST, unwrap(body) or [], "owned cards")]

    async def set_owned_quantity(
        self,
        session: Session,
        card_id: int,
        normal_count: int,
        foil_count: int,
    ) -> None:
        """
        Set both owned counts of a card. Idempotent.

        Raises:
            ValueError: If either count is negative
        """
        if normal_count < 0 or foil_count < 0:
            raise ValueError(f"Counts must be non-negative, got {normal_count}/{foil_count}")
        await self._send(self.adapter.update_owned(card_id, normal_count, foil_count), session)

    # --- Wishlist ---

    async def list_wishlist(self, session: Session) -> list[Card]:
        body = await self._request("GET", "/wishlist", session)
        return [c.to_card() for c in _parse(CARD_LIST, unwrap(body) or [], "wishlist")]

    async def add_to_wishlist(self, session: Session, card_id: int) -> None:
        """
        Add a card to the wishlist.

        Raises:
            AlreadyPresent: If the card is already wishlisted
        """
        try:
            await self._send(self.adapter.wishlist_add(card_id), session)
        except RequestFailed as e:
            if e.status_code == 409 or _ALREADY_PRESENT.search(e.message):
                raise AlreadyPresent(e.message, status_code=e.status_code) from e
            raise

    async def remove_from_wishlist(self, session: Session, card_id: int) -> None:
        """
        Remove a card from the wishlist.

        Raises:
            NotPresent: If the card is not wishlisted
        """
        try:
            await self._send(self.adapter.wishlist_remove(card_id), session)
        except RequestFailed as e:
            if e.status_code == 404 or _NOT_PRESENT.search(e.message):
                raise NotPresent(e.message, status_code=e.status_code) from e
            raise
