from lorebook.models.card import Card, CardSet
from lorebook.models.collection import CollectionStats, OwnedQuantity, SetProgress
from lorebook.models.failure import (
    STANDARD_MESSAGES,
    ActionResult,
    AlreadyPresent,
    CardNotLoaded,
    CatalogError,
    FailureDetail,
    FailureKind,
    NetworkUnreachable,
    NotPresent,
    OperationInProgress,
    OutcomeType,
    RequestFailed,
    ServiceUnavailable,
    StateAlreadyMatches,
    Unauthorized,
)
from lorebook.models.session import Session, User
from lorebook.models.view_model import CardViewModel, PendingOperation, Variant

__all__ = [
    "ActionResult",
    "AlreadyPresent",
    "Card",
    "CardNotLoaded",
    "CardSet",
    "CardViewModel",
    "CatalogError",
    "CollectionStats",
    "FailureDetail",
    "FailureKind",
    "NetworkUnreachable",
    "NotPresent",
    "OperationInProgress",
    "OutcomeType",
    "OwnedQuantity",
    "PendingOperation",
    "RequestFailed",
    "STANDARD_MESSAGES",
    "ServiceUnavailable",
    "Session",
    "SetProgress",
    "StateAlreadyMatches",
    "Unauthorized",
    "User",
    "Variant",
]
