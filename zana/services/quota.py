import logging
import threading
from enum import Enum
from typing import Optional

from zana.errors import QuotaExceeded
from zana.models.schemas import PlanType, QuotaStatus, Session, UserRole
from zana.store import SessionStore

logger = logging.getLogger(__name__)

GUEST_LIMIT = 1
FREE_LIMIT = 3

# Gates are built per request; the slot bookkeeping is shared.
_slot_lock = threading.Lock()


class QuotaState(str, Enum):
    WITHIN_QUOTA = "WITHIN_QUOTA"
    EXHAUSTED = "EXHAUSTED"


def analysis_limit(session: Session) -> Optional[int]:
    """None means unlimited. A paid plan wins over the guest role."""
    if session.plan == PlanType.PRO:
        return None
    if session.role == UserRole.GUEST:
        return GUEST_LIMIT
    return FREE_LIMIT


def quota_state(session: Session) -> QuotaState:
    limit = analysis_limit(session)
    if limit is not None and session.analyses_used >= limit:
        return QuotaState.EXHAUSTED
    return QuotaState.WITHIN_QUOTA


class QuotaGate:
    """
    Counted quota per session tier. ``check`` consumes nothing. ``reserve``
    checks and takes a slot in one step, before any analyzer runs, so that
    concurrent requests cannot both pass; ``release`` gives the slot back
    when the analysis does not complete. EXHAUSTED is left only through
    ``upgrade``.
    """

    def __init__(self, store: SessionStore):
        self.store = store

    def _session(self) -> Session:
        session = self.store.load()
        if session is None:
            raise QuotaExceeded("No active session. Sign in to run an analysis.")
        return session

    def state(self) -> QuotaState:
        return quota_state(self._session())

    def remaining(self) -> Optional[int]:
        session = self._session()
        limit = analysis_limit(session)
        return None if limit is None else max(0, limit - session.analyses_used)

    def status(self) -> QuotaStatus:
        session = self._session()
        limit = analysis_limit(session)
        return QuotaStatus(
            state=quota_state(session).value,
            used=session.analyses_used,
            limit=limit,
            remaining=None if limit is None else max(0, limit - session.analyses_used),
        )

    def check(self) -> Session:
        session = self._session()
        if quota_state(session) == QuotaState.EXHAUSTED:
            logger.info("Quota exhausted for %s (%s/%s)", session.id, session.role.value, session.plan.value)
            raise QuotaExceeded(
                f"Analysis limit of {analysis_limit(session)} reached for the {session.plan.value} plan. "
                "Upgrade to continue."
            )
        return session

    def reserve(self) -> Session:
        with _slot_lock:
            session = self.check()
            updated = session.model_copy(update={"analyses_used": session.analyses_used + 1})
            self.store.save(updated)
        return updated

    def release(self) -> None:
        with _slot_lock:
            session = self.store.load()
            if session is None or session.analyses_used == 0:
                return
            self.store.save(session.model_copy(update={"analyses_used": session.analyses_used - 1}))

    def upgrade(self, plan: PlanType = PlanType.PRO) -> Session:
        with _slot_lock:
            session = self._session()
            updated = session.model_copy(update={"plan": plan, "analyses_used": 0})
            self.store.save(updated)
        logger.info("Session %s moved to plan %s, quota reset", session.id, plan.value)
        return updated
