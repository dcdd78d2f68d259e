"""Service registration and pipeline assembly tests"""

from unittest.mock import MagicMock

import pytest
import structlog
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.errors import ServerErrorMiddleware
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.requests import HTTPConnection

from conference_tracker.core.config import Settings
from conference_tracker.core.log_config import configure_logging
from conference_tracker.core.middleware import (
    CookiePolicyMiddleware,
    DatabaseErrorPageMiddleware,
    ExceptionHandlerMiddleware,
    HSTSMiddleware,
    StaticFilesMiddleware,
)
from conference_tracker.repositories import PresentationRepository, SpeakerRepository
from conference_tracker.startup import configure_pipeline, create_app, register_services
from tests.conftest import make_settings

FIXED_TAIL = [
    CORSMiddleware,
    HTTPSRedirectMiddleware,
    StaticFilesMiddleware,
    CookiePolicyMiddleware,
    AuthenticationMiddleware,
]


class TestRegisterServices:
    """register_services"""

    def test_missing_secret_message_does_not_fail(self):
        services = register_services(make_settings())
        assert services.secret_message is None

    def test_secret_message_is_read(self):
        services = register_services(make_settings(SecretMessage="Keep it secret, Keep it safe."))
        assert services.secret_message == "Keep it secret, Keep it safe."

    def test_cors_policy(self):
        services = register_services(make_settings())
        policy = services.cors.get_policy("_allowedOrigins")
        assert policy.origins == ("http://pluralsight.com",)
        assert policy.allows("http://pluralsight.com")
        assert not policy.allows("https://pluralsight.com")

    def test_cors_policies_are_read_only(self):
        services = register_services(make_settings())
        with pytest.raises(TypeError):
            services.cors.policies["other"] = services.cors.get_policy("_allowedOrigins")

        extended = services.cors.add_policy("other", ["http://evil.example"])
        assert extended.get_policy("other").origins == ("http://evil.example",)
        assert list(services.cors.policies) == ["_allowedOrigins"]

    def test_unknown_cors_policy(self):
        services = register_services(make_settings())
        with pytest.raises(KeyError):
            services.cors.get_policy("other")

    def test_cookie_policy(self):
        services = register_services(make_settings())
        connection = HTTPConnection({"type": "http", "headers": []})
        assert services.cookie_policy.check_consent_needed(connection) is True
        assert services.cookie_policy.minimum_same_site == "none"

    def test_identity_requires_confirmed_account(self):
        services = register_services(make_settings())
        assert services.identity.require_confirmed_account is True

    def test_database_is_named_in_memory_store(self):
        settings = Settings(_env_file=None)
        assert settings.database_url == (
            "sqlite+aiosqlite:///file:ConferenceTracker?mode=memory&cache=shared&uri=true"
        )

    def test_repositories_are_transient(self):
        services = register_services(make_settings())
        session = MagicMock()
        first = services.presentation_repository(session)
        second = services.presentation_repository(session)
        assert isinstance(first, PresentationRepository)
        assert first is not second
        assert isinstance(services.speaker_repository(session), SpeakerRepository)
        assert services.speaker_repository(session) is not services.speaker_repository(session)

    def test_malformed_configuration_aborts(self):
        with pytest.raises(ValidationError):
            make_settings(ENVIRONMENT="testing")

    def test_settings_are_immutable(self):
        settings = make_settings()
        with pytest.raises(ValidationError):
            settings.SECRET_MESSAGE = "changed"


class TestConfigurePipeline:
    """configure_pipeline"""

    def test_development_order(self):
        services = register_services(make_settings())
        pipeline = configure_pipeline(services, is_development=True, logger=MagicMock())
        assert [m.cls for m in pipeline] == [
            ServerErrorMiddleware,
            DatabaseErrorPageMiddleware,
            *FIXED_TAIL,
        ]

    def test_production_order(self):
        services = register_services(make_settings(ENVIRONMENT="production"))
        pipeline = configure_pipeline(services, is_development=False, logger=MagicMock())
        assert [m.cls for m in pipeline] == [
            ExceptionHandlerMiddleware,
            HSTSMiddleware,
            *FIXED_TAIL,
        ]

    def test_error_path(self):
        services = register_services(make_settings(ENVIRONMENT="production"))
        pipeline = configure_pipeline(services, is_development=False, logger=MagicMock())
        assert pipeline[0].kwargs["error_path"] == "/Home/Error"

    def test_development_is_logged(self):
        logger = MagicMock()
        services = register_services(make_settings())
        configure_pipeline(services, is_development=True, logger=logger)
        logger.info.assert_called_once_with("Environment is in development")

    def test_production_is_not_logged(self):
        logger = MagicMock()
        services = register_services(make_settings(ENVIRONMENT="production"))
        configure_pipeline(services, is_development=False, logger=logger)
        logger.info.assert_not_called()

    def test_pipeline_is_immutable(self):
        services = register_services(make_settings())
        pipeline = configure_pipeline(services, is_development=True, logger=MagicMock())
        assert isinstance(pipeline, tuple)


class TestCreateApp:
    """create_app"""

    def test_app_holds_services_and_pipeline(self):
        app = create_app(make_settings())
        assert app.state.services.settings.APP_NAME == "ConferenceTracker"
        assert [m.cls for m in app.user_middleware] == [m.cls for m in app.state.pipeline]

    @pytest.mark.parametrize("environment", ["development", "production"])
    def test_single_developer_exception_page(self, environment):
        app = create_app(make_settings(ENVIRONMENT=environment))
        assert app.debug is False
        debug_pages = [m for m in app.state.pipeline if m.cls is ServerErrorMiddleware]
        assert len(debug_pages) == (1 if environment == "development" else 0)

    def test_middleware_cannot_be_added_once_started(self, app, sync_client):
        with pytest.raises(RuntimeError):
            app.add_middleware(HSTSMiddleware, max_age=1)

    def test_production_refuses_default_secret(self):
        settings = Settings(_env_file=None, ENVIRONMENT="production")
        with pytest.raises(ValueError):
            settings.validate_secrets()


class TestConfigureLogging:
    """configure_logging"""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    @pytest.mark.parametrize(
        ("log_format", "renderer"),
        [("console", structlog.dev.ConsoleRenderer), ("json", structlog.processors.JSONRenderer)],
    )
    def test_renderer_follows_format(self, log_format, renderer):
        configure_logging(make_settings(LOG_FORMAT=log_format))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], renderer)
