# backend/tutorbook/routes/v1/subjects.py
import asyncio
from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_subject_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.subject import SubjectResponse
from ...services.subject_service import SubjectService

router = APIRouter(tags=["subjects-v1"])


@router.get("", response_model=List[SubjectResponse])
async def list_subjects(
    service: SubjectService = Depends(get_subject_service),
) -> List[SubjectResponse]:
    """Subjects with their topics, for the booking form."""
    try:
        subjects = await asyncio.to_thread(service.list_subjects)
        return [SubjectResponse.model_validate(s) for s in subjects]
    except DomainException as e:
        handle_domain_exception(e)
