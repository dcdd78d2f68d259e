"""Presentations controller"""

import structlog
from fastapi import Depends, HTTPException, status

from conference_tracker.api.deps import (
    get_current_user,
    get_presentation_repository,
    get_speaker_repository,
)
from conference_tracker.core.routing import ControllerRouter
from conference_tracker.db.tables import User
from conference_tracker.models import (
    APIResponse,
    PresentationCreate,
    PresentationResponse,
    PresentationUpdate,
    SpeakerResponse,
)
from conference_tracker.repositories import PresentationRepository, SpeakerRepository

logger = structlog.get_logger()

router = ControllerRouter("Presentations")


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Presentation not found")


async def _ensure_speaker(speakers: SpeakerRepository, speaker_id: int) -> None:
    if await speakers.get_by_id(speaker_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Speaker {speaker_id} does not exist",
        )


@router.action("Index", response_model=APIResponse[list[PresentationResponse]])
async def index(presentations: PresentationRepository = Depends(get_presentation_repository)):
    items = await presentations.get_all()
    return APIResponse.ok(data=[PresentationResponse.model_validate(p) for p in items])


@router.action("Details", path_params={"id"}, response_model=APIResponse[PresentationResponse])
async def details(
    id: int | None = None,
    presentations: PresentationRepository = Depends(get_presentation_repository),
):
    if id is None:
        raise _not_found()
    presentation = await presentations.get_by_id(id)
    if presentation is None:
        raise _not_found()
    return APIResponse.ok(data=PresentationResponse.model_validate(presentation))


@router.action("Create", methods=["POST"], response_model=APIResponse[PresentationResponse])
async def create(
    data: PresentationCreate,
    current_user: User = Depends(get_current_user),
    presentations: PresentationRepository = Depends(get_presentation_repository),
    speakers: SpeakerRepository = Depends(get_speaker_repository),
):
    await _ensure_speaker(speakers, data.speaker_id)
    presentation = await presentations.create(data)
    return APIResponse.ok(data=PresentationResponse.model_validate(presentation), message="Presentation created")


@router.action("Edit", path_params={"id"}, response_model=APIResponse[dict])
async def edit(
    id: int | None = None,
    presentations: PresentationRepository = Depends(get_presentation_repository),
    speakers: SpeakerRepository = Depends(get_speaker_repository),
):
    """Presentation plus the speakers it can be reassigned to"""
    logger.info(f"Getting presentation id:{id} for edit.")
    if id is None:
        logger.error("Presentation id was null.")
        raise _not_found()

    presentation = await presentations.get_by_id(id)
    if presentation is None:
        logger.warning(f"Presentation id,{id}, was not found.")
        raise _not_found()

    speaker_choices = [SpeakerResponse.model_validate(s).model_dump() for s in await speakers.get_all()]
    logger.info(f"Presentation id,{id}, was found. Returning 'Edit view'.")
    return APIResponse.ok(
        data={
            "presentation": PresentationResponse.model_validate(presentation).model_dump(),
            "speakers": speaker_choices,
        }
    )


@router.action("Edit", methods=["POST"], path_params={"id"}, response_model=APIResponse[PresentationResponse])
async def edit_post(
    data: PresentationUpdate,
    id: int | None = None,
    current_user: User = Depends(get_current_user),
    presentations: PresentationRepository = Depends(get_presentation_repository),
    speakers: SpeakerRepository = Depends(get_speaker_repository),
):
    if id is None:
        raise _not_found()
    presentation = await presentations.get_by_id(id)
    if presentation is None:
        raise _not_found()
    if data.speaker_id is not None:
        await _ensure_speaker(speakers, data.speaker_id)

    presentation = await presentations.update(presentation, data)
    return APIResponse.ok(data=PresentationResponse.model_validate(presentation), message="Presentation updated")


@router.action("Delete", methods=["POST"], path_params={"id"}, response_model=APIResponse[None])
async def delete(
    id: int | None = None,
    current_user: User = Depends(get_current_user),
    presentations: PresentationRepository = Depends(get_presentation_repository),
):
    if id is None:
        raise _not_found()
    presentation = await presentations.get_by_id(id)
    if presentation is None:
        raise _not_found()

    await presentations.delete(presentation)
    return APIResponse.ok(message="Presentation deleted")
