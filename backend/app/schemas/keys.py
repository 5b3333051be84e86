from pydantic import BaseModel, Field

from app.services.tiers import SecurityTier


class SessionCreate(BaseModel):
    tier: SecurityTier | None = None


class DomainInput(BaseModel):
    value: str = Field("", max_length=2048)


class TierUpdate(BaseModel):
    tier: SecurityTier


class TokenCreate(BaseModel):
    tier: SecurityTier | None = None


class DomainStateResponse(BaseModel):
    input: str
    domain: str
    valid: bool
    generateable: bool
    error: str | None = None


class TokenResponse(BaseModel):
    token: str
    domain: str
    tier: SecurityTier
    prefix: str
    fingerprint: str
    length: int


class TokenPartsResponse(BaseModel):
    token: str
    tier: SecurityTier
    prefix: str
    fingerprint: str
    random_suffix: str
    length: int


class HistoryEntryResponse(BaseModel):
    index: int
    domain: str
    token: str


class ReuseResponse(BaseModel):
    domain: str
    token: str


class SessionResponse(BaseModel):
    session_id: str
    tier: SecurityTier
    domain_state: DomainStateResponse
    current_token: str | None
    history: list[HistoryEntryResponse]
