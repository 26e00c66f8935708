from fastapi import APIRouter, Depends, HTTPException

from zana.dependencies import get_gate, get_session_store
from zana.errors import ZanaError
from zana.models.schemas import QuotaStatus, Session, UpgradeRequest
from zana.services.quota import QuotaGate
from zana.store import SessionStore

router = APIRouter()


@router.get("/session", response_model=Session)
def read_session(store: SessionStore = Depends(get_session_store)):
    session = store.load()
    if session is None:
        raise HTTPException(status_code=404, detail="No active session")
    return session


@router.post("/session", response_model=Session)
def login(session: Session, store: SessionStore = Depends(get_session_store)):
    store.save(session)
    return session


@router.put("/session", response_model=Session)
def update_session(session: Session, store: SessionStore = Depends(get_session_store)):
    """
    Update profile fields. Plan and usage counter are kept from the stored
    session; changing them goes through /session/upgrade.
    """
    current = store.load()
    if current is None:
        raise HTTPException(status_code=404, detail="No active session")
    updated = session.model_copy(update={"plan": current.plan, "analyses_used": current.analyses_used})
    store.save(updated)
    return updated


@router.delete("/session")
def logout(store: SessionStore = Depends(get_session_store)):
    store.clear()
    return {"message": "Signed out"}


@router.post("/session/upgrade", response_model=Session)
def upgrade_plan(request: UpgradeRequest, gate: QuotaGate = Depends(get_gate)):
    try:
        return gate.upgrade(request.plan)
    except ZanaError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/quota", response_model=QuotaStatus)
def quota_status(gate: QuotaGate = Depends(get_gate)):
    try:
        return gate.status()
    except ZanaError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
