"""Presentation repository"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conference_tracker.db.tables import Presentation
from conference_tracker.models import PresentationCreate, PresentationUpdate


class PresentationRepository:
    """CRUD access to presentations over one session"""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_all(self) -> list[Presentation]:
        result = await self.session.execute(select(Presentation).order_by(Presentation.id))
        return list(result.scalars().all())

    async def get_by_id(self, presentation_id: int) -> Presentation | None:
        return await self.session.get(Presentation, presentation_id)

    async def create(self, data: PresentationCreate) -> Presentation:
        presentation = Presentation(
            speaker_id=data.speaker_id,
            title=data.title,
            description=data.description,
        )
        self.session.add(presentation)
        await self.session.commit()
        await self.session.refresh(presentation)
        return presentation

    async def update(self, presentation: Presentation, data: PresentationUpdate) -> Presentation:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(presentation, field, value)
        await self.session.commit()
        await self.session.refresh(presentation)
        return presentation

    async def delete(self, presentation: Presentation) -> None:
        await self.session.delete(presentation)
        await self.session.commit()
