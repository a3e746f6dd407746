# backend/tutorbook/services/subject_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.subject import Subject
from ..repositories.factory import RepositoryFactory
from ..repositories.subject_repository import SubjectRepository
from .base import BaseService


class SubjectService(BaseService):
    """Read access to the subject catalog used by booking requests."""

    def __init__(self, db: Session, subject_repository: Optional[SubjectRepository] = None):
        super().__init__(db)
        self.subject_repository = subject_repository or RepositoryFactory.create_subject_repository(db)

    @BaseService.measure_operation("list_subjects")
    def list_subjects(self) -> List[Subject]:
        return self.subject_repository.list_with_topics()
