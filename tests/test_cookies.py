"""Cookie policy tests"""

import pytest
from starlette.requests import HTTPConnection

from conference_tracker.core.cookies import (
    CookieConsent,
    CookiePolicyOptions,
    apply_cookie_policy,
    cookie_name,
    enforce_same_site,
    get_consent,
)

OPTIONS = CookiePolicyOptions(
    consent_cookie_name=".ConferenceTracker.Consent",
    essential_cookies=frozenset({".ConferenceTracker.Identity"}),
)


def connection(cookie: str = "") -> HTTPConnection:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    return HTTPConnection({"type": "http", "headers": headers})


class TestConsent:
    def test_consent_always_needed(self):
        consent = get_consent(OPTIONS, connection())
        assert consent.is_consent_needed is True
        assert consent.has_consent is False
        assert consent.can_track is False

    def test_consent_cookie_grants_tracking(self):
        consent = get_consent(OPTIONS, connection(".ConferenceTracker.Consent=yes"))
        assert consent.has_consent is True
        assert consent.can_track is True

    def test_other_consent_value_is_ignored(self):
        consent = get_consent(OPTIONS, connection(".ConferenceTracker.Consent=no"))
        assert consent.can_track is False


class TestApplyCookiePolicy:
    COOKIES = [
        "tracker=abc; Path=/; SameSite=lax",
        ".ConferenceTracker.Identity=token; HttpOnly; Path=/; SameSite=lax",
        ".ConferenceTracker.Consent=yes; Path=/; SameSite=lax",
    ]

    def test_without_consent_only_essential_cookies_remain(self):
        kept = apply_cookie_policy(OPTIONS, CookieConsent(True, False), self.COOKIES)
        assert [cookie_name(c) for c in kept] == [".ConferenceTracker.Identity", ".ConferenceTracker.Consent"]

    def test_with_consent_everything_remains(self):
        kept = apply_cookie_policy(OPTIONS, CookieConsent(True, True), self.COOKIES)
        assert kept == self.COOKIES

    def test_consent_not_needed(self):
        kept = apply_cookie_policy(OPTIONS, CookieConsent(False, False), self.COOKIES)
        assert kept == self.COOKIES


class TestEnforceSameSite:
    def test_none_leaves_cookie_alone(self):
        assert enforce_same_site("a=1; Path=/", "none") == "a=1; Path=/"

    def test_missing_attribute_is_added(self):
        assert enforce_same_site("a=1; Path=/", "lax") == "a=1; Path=/; SameSite=lax"

    @pytest.mark.parametrize("value", ["a=1; SameSite=None; Path=/", "a=1; samesite=none; Path=/"])
    def test_weaker_attribute_is_raised(self, value):
        assert enforce_same_site(value, "strict") == "a=1; SameSite=strict; Path=/"

    def test_stronger_attribute_is_kept(self):
        assert enforce_same_site("a=1; SameSite=Strict", "lax") == "a=1; SameSite=Strict"
