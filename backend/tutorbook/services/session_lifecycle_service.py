# backend/tutorbook/services/session_lifecycle_service.py
"""
Session lifecycle transitions.

Only a booked session can move, and it moves once: to canceled, completed
or no_show. Sessions are never deleted. A canceled session stops blocking
the tutor's availability as soon as the transition commits.
"""

import logging
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, InvalidSessionTransition, SessionNotFound
from ..models.session import SessionStatus, TutoringSession
from ..repositories.factory import RepositoryFactory
from ..repositories.session_repository import SessionRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class SessionLifecycleService(BaseService):
    def __init__(self, db: Session, session_repository: Optional[SessionRepository] = None):
        super().__init__(db)
        self.session_repository = session_repository or RepositoryFactory.create_session_repository(db)

    def _get(self, session_id: str) -> TutoringSession:
        session = self.session_repository.get_by_id(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def _transition(
        self,
        session_id: str,
        target: SessionStatus,
        apply: Callable[[TutoringSession], None],
        allowed_actor: Callable[[TutoringSession, str], bool],
        actor_id: str,
    ) -> TutoringSession:
        with self.transaction():
            session = self._get(session_id)
            if not allowed_actor(session, actor_id):
                raise ForbiddenException(
                    "You cannot change this session",
                    code="SESSION_FORBIDDEN",
                    details={"session_id": session_id},
                )
            if session.status != SessionStatus.BOOKED.value:
                raise InvalidSessionTransition(session_id, str(session.status), target.value)
            apply(session)
            self.db.flush()

        self.log_operation(
            f"session_{target.value}",
            session_id=session_id,
            tutor_id=session.tutor_id,
            actor_id=actor_id,
        )
        return session

    @staticmethod
    def _is_participant(session: TutoringSession, actor_id: str) -> bool:
        return actor_id in (session.student_id, session.tutor_id)

    @staticmethod
    def _is_tutor(session: TutoringSession, actor_id: str) -> bool:
        return bool(actor_id == session.tutor_id)

    @BaseService.measure_operation("cancel_session")
    def cancel(self, session_id: str, actor_id: str) -> TutoringSession:
        """Cancel a booked session. Either participant may cancel."""
        return self._transition(
            session_id,
            SessionStatus.CANCELED,
            lambda s: s.cancel(),
            self._is_participant,
            actor_id,
        )

    @BaseService.measure_operation("complete_session")
    def complete(
        self, session_id: str, actor_id: str, notes: Optional[str] = None
    ) -> TutoringSession:
        """Mark a booked session completed. Tutor only; notes are appended to the session."""
        return self._transition(
            session_id,
            SessionStatus.COMPLETED,
            lambda s: s.complete(notes),
            self._is_tutor,
            actor_id,
        )

    @BaseService.measure_operation("mark_no_show")
    def mark_no_show(self, session_id: str, actor_id: str) -> TutoringSession:
        """Mark a booked session as a no-show. Tutor only."""
        return self._transition(
            session_id,
            SessionStatus.NO_SHOW,
            lambda s: s.mark_no_show(),
            self._is_tutor,
            actor_id,
        )

    @BaseService.measure_operation("list_tutor_sessions")
    def list_for_tutor(
        self, tutor_id: str, actor_id: str, status: Optional[str] = None
    ) -> List[TutoringSession]:
        """A tutor's own sessions, newest first."""
        if actor_id != tutor_id:
            raise ForbiddenException(
                "You can only list your own sessions",
                code="SESSION_FORBIDDEN",
                details={"tutor_id": tutor_id},
            )
        return self.session_repository.list_for_tutor(tutor_id, status=status)
