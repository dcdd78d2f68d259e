"""
Pure ASGI middlewares of the request pipeline
- exception handler (redirects to the error page)
- database error page (development diagnostics for SQLAlchemy failures)
- HSTS
- static files
- cookie policy
"""
import html
import os
import stat

import structlog
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import URL, MutableHeaders
from starlette.requests import HTTPConnection
from starlette.responses import HTMLResponse, RedirectResponse
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from conference_tracker.core.cookies import CookiePolicyOptions, apply_cookie_policy, get_consent

logger = structlog.get_logger()


class ExceptionHandlerMiddleware:
    """Turn unhandled exceptions into a redirect to a fixed error path"""

    def __init__(self, app: ASGIApp, error_path: str) -> None:
        self.app = app
        self.error_path = error_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send)
        except Exception as exc:
            logger.error(
                "Unhandled exception",
                error=str(exc),
                error_type=type(exc).__name__,
                path=scope.get("path"),
            )
            if response_started:
                raise
            response = RedirectResponse(self.error_path, status_code=302)
            await response(scope, receive, send)


_DATABASE_ERROR_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Database error</title></head>
<body>
<h1>A database operation failed while processing the request.</h1>
<h2>{error_type}</h2>
<pre>{message}</pre>
{statement}
<p>If the tables are missing, the in-memory store may not have been created yet.
The store is created on application startup; restart the application to recreate it.</p>
</body>
</html>
"""


class DatabaseErrorPageMiddleware:
    """Render SQLAlchemy failures as a diagnostic page"""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send)
        except SQLAlchemyError as exc:
            logger.error("Database error", error=str(exc), path=scope.get("path"))
            if response_started:
                raise
            await self.render(exc)(scope, receive, send)

    @staticmethod
    def render(exc: SQLAlchemyError) -> HTMLResponse:
        statement = getattr(exc, "statement", None)
        content = _DATABASE_ERROR_TEMPLATE.format(
            error_type=html.escape(type(exc).__name__),
            message=html.escape(str(exc)),
            statement=f"<h3>Statement</h3><pre>{html.escape(statement)}</pre>" if statement else "",
        )
        return HTMLResponse(content, status_code=500)


class HSTSMiddleware:
    """Add Strict-Transport-Security to HTTPS responses"""

    def __init__(
        self,
        app: ASGIApp,
        max_age: int,
        include_subdomains: bool = False,
        preload: bool = False,
        excluded_hosts: list[str] | tuple[str, ...] = (),
    ) -> None:
        self.app = app
        self.excluded_hosts = {host.strip("[]").lower() for host in excluded_hosts}

        value = f"max-age={max_age}"
        if include_subdomains:
            value += "; includeSubDomains"
        if preload:
            value += "; preload"
        self.header_value = value

    def applies_to(self, scope: Scope) -> bool:
        if scope.get("scheme") != "https":
            return False
        hostname = (URL(scope=scope).hostname or "").lower()
        return hostname not in self.excluded_hosts

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.applies_to(scope):
            await self.app(scope, receive, send)
            return

        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers["Strict-Transport-Security"] = self.header_value
            await send(message)

        await self.app(scope, receive, _send)


class StaticFilesMiddleware:
    """Serve files under the static root; fall through for anything else"""

    def __init__(self, app: ASGIApp, directory: str | os.PathLike[str]) -> None:
        self.app = app
        self.files = StaticFiles(directory=directory, check_dir=False)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] in ("GET", "HEAD"):
            path = os.path.normpath(os.path.join(*scope["path"].split("/")))
            try:
                full_path, stat_result = await run_in_threadpool(self.files.lookup_path, path)
            except (OSError, ValueError):
                # Over-long names and NUL bytes cannot name a file on disk
                stat_result = None
            if stat_result is not None and stat.S_ISREG(stat_result.st_mode):
                response = self.files.file_response(full_path, stat_result, scope)
                await response(scope, receive, send)
                return

        await self.app(scope, receive, send)


class CookiePolicyMiddleware:
    """Apply consent and SameSite rules to every cookie a response writes"""

    def __init__(self, app: ASGIApp, options: CookiePolicyOptions) -> None:
        self.app = app
        self.options = options

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        consent = get_consent(self.options, HTTPConnection(scope))
        scope.setdefault("state", {})["cookie_consent"] = consent

        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                raw_headers = list(message.get("headers", []))
                set_cookies = [
                    value.decode("latin-1") for key, value in raw_headers if key.lower() == b"set-cookie"
                ]
                if set_cookies:
                    kept = apply_cookie_policy(self.options, consent, set_cookies)
                    others = [(key, value) for key, value in raw_headers if key.lower() != b"set-cookie"]
                    message["headers"] = others + [
                        (b"set-cookie", value.encode("latin-1")) for value in kept
                    ]
            await send(message)

        await self.app(scope, receive, _send)
