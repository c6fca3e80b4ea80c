# api/routers/session.py
from fastapi import APIRouter, Depends

from retirewise.api.deps import get_unified_db
from retirewise.schemas import SessionRead, SessionUpdate
from retirewise.services import UnifiedDB

router = APIRouter(prefix="/session", tags=["Session"])


def _state(db: UnifiedDB) -> SessionRead:
    return SessionRead(
        user_id=db.current_user_id,
        backend="remote" if db.is_remote else "local",
    )


@router.get("", response_model=SessionRead, summary="Which store is active")
def get_session(db: UnifiedDB = Depends(get_unified_db)):
    return _state(db)


@router.post("", response_model=SessionRead, summary="Sign in: route data to the cloud")
def sign_in(body: SessionUpdate, db: UnifiedDB = Depends(get_unified_db)):
    """
    Called by the authentication provider's state-change hook with the
    opaque user id. Repeating the call with the same id changes nothing.
    """
    db.set_current_user(body.user_id)
    return _state(db)


@router.delete("", response_model=SessionRead, summary="Sign out: route data to the device")
def sign_out(db: UnifiedDB = Depends(get_unified_db)):
    db.set_current_user(None)
    return _state(db)
