"""API dependencies"""
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from conference_tracker.core.services import ServiceRegistry
from conference_tracker.db.tables import User
from conference_tracker.repositories import PresentationRepository, SpeakerRepository


def get_services(request: Request) -> ServiceRegistry:
    """Services registered at startup"""
    return request.app.state.services


async def get_db(
    services: ServiceRegistry = Depends(get_services),
) -> AsyncGenerator[AsyncSession, None]:
    """Database session for one request"""
    async with services.database.session_scope() as session:
        yield session


def get_presentation_repository(
    services: ServiceRegistry = Depends(get_services),
    db: AsyncSession = Depends(get_db),
) -> PresentationRepository:
    return services.presentation_repository(db)


def get_speaker_repository(
    services: ServiceRegistry = Depends(get_services),
    db: AsyncSession = Depends(get_db),
) -> SpeakerRepository:
    return services.speaker_repository(db)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Signed-in user; rejects anonymous callers"""
    if not request.user.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await db.get(User, request.user.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User does not exist",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    return user
