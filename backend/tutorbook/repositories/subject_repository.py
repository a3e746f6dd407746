# backend/tutorbook/repositories/subject_repository.py
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import RepositoryException
from ..models.subject import Subject
from .base_repository import BaseRepository


class SubjectRepository(BaseRepository[Subject]):
    def __init__(self, db: Session):
        super().__init__(db, Subject)

    def get_with_topics(self, subject_id: str) -> Optional[Subject]:
        try:
            return cast(
                Optional[Subject],
                self.db.query(Subject)
                .options(selectinload(Subject.topics))
                .filter(Subject.id == subject_id)
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting subject {subject_id}: {str(e)}")
            raise RepositoryException(f"Failed to get subject: {str(e)}")

    def list_with_topics(self) -> List[Subject]:
        try:
            return cast(
                List[Subject],
                self.db.query(Subject)
                .options(selectinload(Subject.topics))
                .order_by(Subject.name)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing subjects: {str(e)}")
            raise RepositoryException(f"Failed to list subjects: {str(e)}")
