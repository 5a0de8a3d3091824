"""Session endpoints - evaluation on completion, and deletion that keeps podiums ranked."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from fitledger.core.errors import PersistenceError, SessionNotCompletedError
from fitledger.db.session import get_db
from fitledger.schemas.records import SessionStatusRead
from fitledger.services.evaluation import SessionEvaluator
from fitledger.services.record_store import SqlAlchemyRecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{session_id}/evaluate", response_model=SessionStatusRead)
async def evaluate_session(
    session_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Rank the session's performances into the podiums and stamp its calendar status."""
    store = SqlAlchemyRecordStore(db)
    session = await store.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    try:
        await SessionEvaluator(store).evaluate_session(session)
    except SessionNotCompletedError:
        raise HTTPException(status_code=409, detail="Session is not completed")
    if inspect(session).expired_attributes:
        # A failed save rolled back; report what is stored
        await db.refresh(session)
    return SessionStatusRead.model_validate(session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a session. Its records leave their podiums and the rest move up."""
    store = SqlAlchemyRecordStore(db)
    session = await store.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    try:
        await SessionEvaluator(store).delete_session(session)
    except PersistenceError:
        logger.exception("Could not delete session %s", session_id)
        raise HTTPException(status_code=500, detail="Could not delete session")
    return None
