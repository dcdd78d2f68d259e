"""
Authentication
Callers are identified by an access token sent as a bearer token or in the identity cookie
"""
from dataclasses import dataclass
from uuid import UUID

from starlette.authentication import AuthCredentials, AuthenticationBackend, BaseUser
from starlette.middleware import Middleware
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.requests import HTTPConnection

from conference_tracker.core.config import Settings
from conference_tracker.core.security import ACCESS_TOKEN, decode_token


@dataclass(frozen=True)
class IdentityOptions:
    """Account rules"""

    require_confirmed_account: bool = True


class AuthenticatedUser(BaseUser):
    """Caller identified from a valid access token"""

    def __init__(self, user_id: UUID, email: str) -> None:
        self.user_id = user_id
        self.email = email

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.email

    @property
    def identity(self) -> str:
        return str(self.user_id)


class TokenAuthBackend(AuthenticationBackend):
    """Read the access token from the Authorization header or the identity cookie"""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def get_token(self, conn: HTTPConnection) -> str | None:
        authorization = conn.headers.get("Authorization")
        if authorization:
            scheme, _, credentials = authorization.partition(" ")
            if scheme.lower() == "bearer" and credentials:
                return credentials.strip()
        return conn.cookies.get(self.settings.AUTH_COOKIE_NAME)

    async def authenticate(self, conn: HTTPConnection) -> tuple[AuthCredentials, BaseUser] | None:
        token = self.get_token(conn)
        if not token:
            return None

        # Bad or expired tokens leave the caller anonymous
        payload = decode_token(self.settings, token, expected_type=ACCESS_TOKEN)
        if not payload:
            return None
        try:
            user_id = UUID(payload["sub"])
        except (KeyError, ValueError):
            return None

        return AuthCredentials(["authenticated"]), AuthenticatedUser(user_id, payload.get("email", ""))


def authentication_middleware(settings: Settings) -> Middleware:
    return Middleware(AuthenticationMiddleware, backend=TokenAuthBackend(settings))
