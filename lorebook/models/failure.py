"""
Failure classification for catalog calls.

Every failure of a remote catalog call is mapped to exactly one of the
classes below before it leaves the client. httpx exceptions never escape.

Taxonomy:
- Unauthorized: 401/403, the session is no longer valid
- ServiceUnavailable: 5xx, or a body that is not JSON (HTML error page)
- NetworkUnreachable: no response at all (connect error, timeout)
- RequestFailed: any other 4xx, carrying the server's message
- AlreadyPresent / NotPresent: the server state already matches the
  request; callers treat these as success

PROPAGATION:
Client and reconciler raise. The session boundary converts errors into an
ActionResult so the view layer gets a tagged result instead of an
exception.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    UNAUTHORIZED = "unauthorized"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NETWORK_UNREACHABLE = "network_unreachable"
    REQUEST_FAILED = "request_failed"

    # Server state already matches the request
    ALREADY_PRESENT = "already_present"
    NOT_PRESENT = "not_present"

    # Local rejections
    OPERATION_IN_PROGRESS = "operation_in_progress"
    CARD_NOT_LOADED = "card_not_loaded"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    FAILURE = "failure"


# Standard messages, used when the server gives nothing more specific
STANDARD_MESSAGES: dict[FailureKind, str] = {
    FailureKind.UNAUTHORIZED: "Your session has expired. Please sign in again.",
    FailureKind.SERVICE_UNAVAILABLE: (
        "The server is temporarily unavailable. Please try again later."
    ),
    FailureKind.NETWORK_UNREACHABLE: (
        "Unable to reach the server. Check your internet connection."
    ),
    FailureKind.REQUEST_FAILED: "An error occurred.",
    FailureKind.ALREADY_PRESENT: "The card is already in the wishlist.",
    FailureKind.NOT_PRESENT: "The card is not in the wishlist.",
    FailureKind.OPERATION_IN_PROGRESS: "An update for this card is still in progress.",
    FailureKind.CARD_NOT_LOADED: "This card is not part of the loaded collection.",
}

TRANSIENT_KINDS = frozenset({FailureKind.SERVICE_UNAVAILABLE, FailureKind.NETWORK_UNREACHABLE})


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    retryable: bool = Field(
        default=False,
        description="True if retrying the same action may succeed",
    )


class ActionResult(BaseModel, Generic[T]):
    """
    Tagged result handed to the view layer.

    Used where exceptions must not cross the boundary (login, register).
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Result data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on failure)",
    )

    @property
    def ok(self) -> bool:
        return self.outcome == OutcomeType.SUCCESS

    @classmethod
    def success(cls, data: T) -> "ActionResult[T]":
        """Create a success result."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def from_error(cls, error: "CatalogError") -> "ActionResult[Any]":
        """Create a failure result from a classified error."""
        return cls(
            outcome=OutcomeType.FAILURE,
            failure=FailureDetail(
                kind=error.kind,
                message=error.message,
                retryable=error.transient,
            ),
        )


class CatalogError(Exception):
    """
    Base class for classified catalog failures.

    Subclasses fix the kind. The message is the most specific explanation
    available, falling back to the standard message for the kind.
    """

    kind: FailureKind = FailureKind.REQUEST_FAILED

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or STANDARD_MESSAGES[self.kind]
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def transient(self) -> bool:
        """True for failures the user may retry as-is."""
        return self.kind in TRANSIENT_KINDS


class Unauthorized(CatalogError):
    """The token is missing, expired or rejected."""

    kind = FailureKind.UNAUTHORIZED


class ServiceUnavailable(CatalogError):
    """Server error or unparseable body."""

    kind = FailureKind.SERVICE_UNAVAILABLE


class NetworkUnreachable(CatalogError):
    """No response received."""

    kind = FailureKind.NETWORK_UNREACHABLE


class RequestFailed(CatalogError):
    """Client error with a server-supplied message."""

    kind = FailureKind.REQUEST_FAILED


class StateAlreadyMatches(CatalogError):
    """The server already holds the state the request asked for."""


class AlreadyPresent(StateAlreadyMatches):
    kind = FailureKind.ALREADY_PRESENT


class NotPresent(StateAlreadyMatches):
    kind = FailureKind.NOT_PRESENT


class OperationInProgress(CatalogError):
    """A per-card operation was rejected because another one is pending."""

    kind = FailureKind.OPERATION_IN_PROGRESS

    def __init__(self, card_id: int):
        self.card_id = card_id
        super().__init__(f"An update for card {card_id} is still in progress.")


class CardNotLoaded(CatalogError, KeyError):
    """The card ID is not among the loaded view-models."""

    kind = FailureKind.CARD_NOT_LOADED

    def __init__(self, card_id: int):
        self.card_id = card_id
        super().__init__(f"Card {card_id} is not part of the loaded collection.")

    def __str__(self) -> str:
        return self.message
