"""
Session liveness check shared by token refresh and request authentication.
"""

from datetime import datetime
from uuid import UUID

from kitchen_iam.app.services.unit_of_work import UnitOfWork
from kitchen_iam.domain.entities import SessionState


async def ensure_session_live(uow: UnitOfWork, session_id: UUID, now: datetime) -> bool:
    """
    Return True iff the session exists and has not expired.

    An expired row is deleted on the spot. The caller owns the transaction
    and must commit for the deletion to stick.
    """
    session = await uow.sessions.get_by_id(session_id)
    if session is None:
        return False

    if session.state(now) == SessionState.expired:
        await uow.sessions.delete(session_id)
        return False

    return True
