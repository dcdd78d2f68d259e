"""
ConferenceTracker ASGI entrypoint
`uvicorn conference_tracker.main:app`
"""
from conference_tracker.core.config import get_settings
from conference_tracker.core.log_config import configure_logging
from conference_tracker.startup import create_app

settings = get_settings()
configure_logging(settings)

app = create_app(settings)


def run():
    """Run the server"""
    import uvicorn

    uvicorn.run(
        "conference_tracker.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
