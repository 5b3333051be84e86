from fastapi import APIRouter, Depends, HTTPException, status

from app.sessions import get_session_store
from app.schemas import (
    SessionCreate,
    DomainInput,
    TierUpdate,
    TokenCreate,
    DomainStateResponse,
    TokenResponse,
    HistoryEntryResponse,
    ReuseResponse,
    SessionResponse,
)
from app.services.generator import GeneratorSession, GenerationNotAllowedError
from app.services.randomness import RandomnessUnavailableError
from app.services.session_store import SessionStore, SessionNotFoundError
from app.services.tiers import SecurityTier
from app.services.token_assembler import TierConfigurationError

router = APIRouter(prefix="/api/sessions", tags=["keys"])


def domain_state(session: GeneratorSession) -> DomainStateResponse:
    return DomainStateResponse(
        input=session.domain_input,
        domain=session.domain,
        valid=session.is_valid,
        generateable=session.is_generateable(),
        error=session.domain_error,
    )


def history_response(session: GeneratorSession) -> list[HistoryEntryResponse]:
    return [
        HistoryEntryResponse(index=i, domain=entry.domain, token=entry.token)
        for i, entry in enumerate(session.history())
    ]


def session_response(session_id: str, session: GeneratorSession) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        tier=session.tier,
        domain_state=domain_state(session),
        current_token=session.current_token,
        history=history_response(session),
    )


def _get_session(store: SessionStore, session_id: str) -> GeneratorSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    data: SessionCreate | None = None,
    store: SessionStore = Depends(get_session_store),
):
    """Start a new generator session with its own history."""
    session_id, session = store.create(tier=data.tier if data else None)
    return session_response(session_id, session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Get the full state of a session."""
    return session_response(session_id, _get_session(store, session_id))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Discard a session and its history."""
    try:
        store.delete(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.put("/{session_id}/domain", response_model=DomainStateResponse)
async def set_domain(
    session_id: str,
    data: DomainInput,
    store: SessionStore = Depends(get_session_store),
):
    """Set the domain input and return its validation state.

    An invalid domain is reported in the body, not as an HTTP error.
    """
    session = _get_session(store, session_id)
    session.set_domain_input(data.value)
    return domain_state(session)


@router.put("/{session_id}/tier", response_model=SessionResponse)
async def set_tier(
    session_id: str,
    data: TierUpdate,
    store: SessionStore = Depends(get_session_store),
):
    """Switch the tier used for the next key."""
    session = _get_session(store, session_id)
    session.set_tier(data.tier)
    return session_response(session_id, session)


@router.post("/{session_id}/tokens", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def generate_token(
    session_id: str,
    data: TokenCreate | None = None,
    store: SessionStore = Depends(get_session_store),
):
    """Generate a key for the session's current domain."""
    session = _get_session(store, session_id)
    tier = data.tier if data and data.tier else session.tier

    try:
        token = session.generate(tier)
    except GenerationNotAllowedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RandomnessUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Secure random source unavailable; no key was generated",
        )
    except TierConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except ValueError as e:
        # Session clock produced a timestamp that cannot be fingerprinted
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cannot derive key fingerprint: {e}",
        )

    return TokenResponse(
        token=token.full_string,
        domain=session.domain,
        tier=SecurityTier(tier),
        prefix=token.prefix,
        fingerprint=token.fingerprint,
        length=len(token.full_string),
    )


@router.get("/{session_id}/history", response_model=list[HistoryEntryResponse])
async def get_history(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Get recently issued keys, newest first."""
    return history_response(_get_session(store, session_id))


@router.post("/{session_id}/history/{index}/reuse", response_model=ReuseResponse)
async def reuse_history_entry(
    session_id: str,
    index: int,
    store: SessionStore = Depends(get_session_store),
):
    """Restore a history entry as the session's displayed domain and key."""
    session = _get_session(store, session_id)
    try:
        entry = session.history_entry(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="History entry not found")

    domain, token = session.reuse(entry)
    return ReuseResponse(domain=domain, token=token)
