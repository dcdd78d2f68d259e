"""Speakers controller"""

from fastapi import Depends, HTTPException, status

from conference_tracker.api.deps import get_current_user, get_speaker_repository
from conference_tracker.core.routing import ControllerRouter
from conference_tracker.db.tables import User
from conference_tracker.models import APIResponse, SpeakerCreate, SpeakerResponse
from conference_tracker.repositories import SpeakerRepository

router = ControllerRouter("Speakers")


@router.action("Index", response_model=APIResponse[list[SpeakerResponse]])
async def index(speakers: SpeakerRepository = Depends(get_speaker_repository)):
    items = await speakers.get_all()
    return APIResponse.ok(data=[SpeakerResponse.model_validate(s) for s in items])


@router.action("Details", path_params={"id"}, response_model=APIResponse[SpeakerResponse])
async def details(
    id: int | None = None,
    speakers: SpeakerRepository = Depends(get_speaker_repository),
):
    speaker = await speakers.get_by_id(id) if id is not None else None
    if speaker is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Speaker not found")
    return APIResponse.ok(data=SpeakerResponse.model_validate(speaker))


@router.action("Create", methods=["POST"], response_model=APIResponse[SpeakerResponse])
async def create(
    data: SpeakerCreate,
    current_user: User = Depends(get_current_user),
    speakers: SpeakerRepository = Depends(get_speaker_repository),
):
    speaker = await speakers.create(data)
    return APIResponse.ok(data=SpeakerResponse.model_validate(speaker), message="Speaker created")
