from app.schemas.keys import (
    SessionCreate,
    DomainInput,
    TierUpdate,
    TokenCreate,
    DomainStateResponse,
    TokenResponse,
    TokenPartsResponse,
    HistoryEntryResponse,
    ReuseResponse,
    SessionResponse,
)

__all__ = [
    "SessionCreate",
    "DomainInput",
    "TierUpdate",
    "TokenCreate",
    "DomainStateResponse",
    "TokenResponse",
    "TokenPartsResponse",
    "HistoryEntryResponse",
    "ReuseResponse",
    "SessionResponse",
]
