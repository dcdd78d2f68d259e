"""Repositories over the conference tables"""
from conference_tracker.repositories.presentations import PresentationRepository
from conference_tracker.repositories.speakers import SpeakerRepository

__all__ = ["PresentationRepository", "SpeakerRepository"]
