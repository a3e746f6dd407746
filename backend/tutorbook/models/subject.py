# backend/tutorbook/models/subject.py
"""Subject catalog: subjects and the topics taught under each."""

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False, unique=True)

    topics = relationship(
        "Topic",
        back_populates="subject",
        cascade="all, delete-orphan",
        order_by="Topic.name",
    )

    def __repr__(self) -> str:
        return f"<Subject {self.id}: {self.name}>"


class Topic(Base):
    __tablename__ = "topics"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    subject_id = Column(
        String(26), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)

    subject = relationship("Subject", back_populates="topics")

    __table_args__ = (UniqueConstraint("subject_id", "name", name="uq_topics_subject_name"),)

    def __repr__(self) -> str:
        return f"<Topic {self.id}: {self.name} (subject={self.subject_id})>"
