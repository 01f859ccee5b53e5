from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload, sessionmaker

from errors import StorageError
from models import MathProblemSession, MathProblemSubmission
from schemas.problems import SessionOut, SubmissionOut

logger = logging.getLogger(__name__)

MAX_RECENT = 100


def _session_out(row: MathProblemSession, with_submissions: bool = False) -> SessionOut:
    return SessionOut(
        id=row.id,
        created_at=row.created_at,
        problem_text=row.problem_text,
        correct_answer=row.correct_answer,
        submissions=(
            [SubmissionOut.model_validate(s) for s in row.submissions] if with_submissions else None
        ),
    )


class ProblemStore:
    """
    Insert/read access to the sessions and submissions tables.

    Each call runs in its own DB session; nothing spans both tables.
    Any SQLAlchemy failure is re-raised as StorageError.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def create_session(self, problem_text: str, correct_answer: float) -> SessionOut:
        try:
            with self.session_factory() as db:
                row = MathProblemSession(problem_text=problem_text, correct_answer=correct_answer)
                db.add(row)
                db.commit()
                db.refresh(row)
                out = _session_out(row)
        except SQLAlchemyError as e:
            raise StorageError(f"could not create session: {type(e).__name__}") from e
        logger.info("created session %s", out.id)
        return out

    def create_submission(
        self, session_id: str, user_answer: float, is_correct: bool, feedback_text: str
    ) -> SubmissionOut:
        try:
            with self.session_factory() as db:
                row = MathProblemSubmission(
                    session_id=session_id,
                    user_answer=user_answer,
                    is_correct=is_correct,
                    feedback_text=feedback_text,
                )
                db.add(row)
                db.commit()
                db.refresh(row)
                out = SubmissionOut.model_validate(row)
        except SQLAlchemyError as e:
            raise StorageError(f"could not create submission: {type(e).__name__}") from e
        logger.info("created submission %s for session %s", out.id, session_id)
        return out

    def get_session(self, session_id: str) -> Optional[SessionOut]:
        try:
            with self.session_factory() as db:
                row = db.execute(
                    select(MathProblemSession)
                    .options(selectinload(MathProblemSession.submissions))
                    .where(MathProblemSession.id == session_id)
                ).scalar_one_or_none()
                if row is None:
                    return None
                return _session_out(row, with_submissions=True)
        except SQLAlchemyError as e:
            raise StorageError(f"could not read session: {type(e).__name__}") from e

    def recent_sessions(self, limit: int = 20) -> List[SessionOut]:
        limit = max(1, min(limit, MAX_RECENT))
        try:
            with self.session_factory() as db:
                rows = (
                    db.execute(
                        select(MathProblemSession)
                        .order_by(MathProblemSession.created_at.desc())
                        .limit(limit)
                    )
                    .scalars()
                    .all()
                )
                return [_session_out(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError(f"could not list sessions: {type(e).__name__}") from e
