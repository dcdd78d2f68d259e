"""Speaker repository"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conference_tracker.db.tables import Speaker
from conference_tracker.models import SpeakerCreate


class SpeakerRepository:
    """CRUD access to speakers over one session"""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_all(self) -> list[Speaker]:
        result = await self.session.execute(
            select(Speaker).order_by(Speaker.last_name, Speaker.first_name)
        )
        return list(result.scalars().all())

    async def get_by_id(self, speaker_id: int) -> Speaker | None:
        return await self.session.get(Speaker, speaker_id)

    async def create(self, data: SpeakerCreate) -> Speaker:
        speaker = Speaker(**data.model_dump())
        self.session.add(speaker)
        await self.session.commit()
        await self.session.refresh(speaker)
        return speaker
