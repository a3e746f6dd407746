from typing import List

from ._strict_base import CamelModel


class TopicResponse(CamelModel):
    id: str
    subject_id: str
    name: str


class SubjectResponse(CamelModel):
    id: str
    name: str
    topics: List[TopicResponse] = []
