"""Controllers"""

from fastapi import APIRouter

from conference_tracker.api import home, identity, presentations, speakers

api_router = APIRouter()

# Conventional routes first; "/" belongs to Home.Index
api_router.include_router(home.router)
api_router.include_router(presentations.router)
api_router.include_router(speakers.router)
api_router.include_router(identity.router)
