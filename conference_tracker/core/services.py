"""Services built once at startup and shared by every request"""
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from conference_tracker.core.auth import IdentityOptions
from conference_tracker.core.config import Settings
from conference_tracker.core.cookies import CookiePolicyOptions
from conference_tracker.core.cors import CorsOptions
from conference_tracker.db import Database
from conference_tracker.repositories import PresentationRepository, SpeakerRepository


@dataclass(frozen=True)
class ServiceRegistry:
    """
    Everything the application resolves at request time.

    Repository entries are factories: every resolution builds a new
    instance over the request's session (transient lifetime).
    """

    settings: Settings
    secret_message: str | None
    cookie_policy: CookiePolicyOptions
    database: Database
    identity: IdentityOptions
    cors: CorsOptions
    presentation_repository: Callable[[AsyncSession], PresentationRepository]
    speaker_repository: Callable[[AsyncSession], SpeakerRepository]
