"""
Cookie policy
- tracking consent: non-essential cookies are only written once the caller consented
- minimum SameSite attribute enforced on every cookie written
"""
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from starlette.requests import HTTPConnection
from starlette.responses import Response

SameSiteMode = Literal["none", "lax", "strict"]

_SAME_SITE_RANK: dict[str, int] = {"none": 0, "lax": 1, "strict": 2}
_SAME_SITE_RE = re.compile(r";\s*samesite=(\w+)", re.IGNORECASE)

CONSENT_VALUE = "yes"
CONSENT_MAX_AGE = 365 * 24 * 60 * 60


def _always_needs_consent(connection: HTTPConnection) -> bool:
    return True


@dataclass(frozen=True)
class CookiePolicyOptions:
    """
    Cookie policy settings.

    The consent predicate answers true for every request: consent is always
    asked for. This is a demonstration simplification, not a compliance
    mechanism.
    """

    consent_cookie_name: str
    check_consent_needed: Callable[[HTTPConnection], bool] = _always_needs_consent
    minimum_same_site: SameSiteMode = "none"
    essential_cookies: frozenset[str] = field(default_factory=frozenset)

    def is_essential(self, cookie_name: str) -> bool:
        return cookie_name == self.consent_cookie_name or cookie_name in self.essential_cookies


@dataclass(frozen=True)
class CookieConsent:
    """Consent state of the current request"""

    is_consent_needed: bool
    has_consent: bool

    @property
    def can_track(self) -> bool:
        return not self.is_consent_needed or self.has_consent


def get_consent(options: CookiePolicyOptions, connection: HTTPConnection) -> CookieConsent:
    """Evaluate the consent state for a request"""
    needed = options.check_consent_needed(connection)
    has_consent = connection.cookies.get(options.consent_cookie_name) == CONSENT_VALUE
    return CookieConsent(is_consent_needed=needed, has_consent=has_consent)


def cookie_name(set_cookie: str) -> str:
    """Name of the cookie written by a Set-Cookie header value"""
    return set_cookie.split("=", 1)[0].strip()


def enforce_same_site(set_cookie: str, minimum: SameSiteMode) -> str:
    """Raise the SameSite attribute of a Set-Cookie value to at least `minimum`"""
    if minimum == "none":
        return set_cookie

    match = _SAME_SITE_RE.search(set_cookie)
    if match is None:
        return f"{set_cookie}; SameSite={minimum}"

    current = match.group(1).lower()
    if _SAME_SITE_RANK.get(current, 0) >= _SAME_SITE_RANK[minimum]:
        return set_cookie
    return f"{set_cookie[:match.start()]}; SameSite={minimum}{set_cookie[match.end():]}"


def apply_cookie_policy(
    options: CookiePolicyOptions,
    consent: CookieConsent,
    set_cookies: list[str],
) -> list[str]:
    """Filter and rewrite the Set-Cookie values of one response"""
    kept = []
    for value in set_cookies:
        if not consent.can_track and not options.is_essential(cookie_name(value)):
            continue
        kept.append(enforce_same_site(value, options.minimum_same_site))
    return kept


def grant_consent(options: CookiePolicyOptions, response: Response, secure: bool = True) -> None:
    """Write the consent cookie on a response"""
    response.set_cookie(
        options.consent_cookie_name,
        CONSENT_VALUE,
        max_age=CONSENT_MAX_AGE,
        path="/",
        secure=secure,
        samesite="lax",
    )


def withdraw_consent(options: CookiePolicyOptions, response: Response) -> None:
    """Expire the consent cookie"""
    response.delete_cookie(options.consent_cookie_name, path="/")
