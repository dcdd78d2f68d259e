"""Home controller"""
from uuid import uuid4

from fastapi import Depends, Request, Response

from conference_tracker.api.deps import get_services
from conference_tracker.core.cookies import CookieConsent, grant_consent, withdraw_consent
from conference_tracker.core.routing import ControllerRouter
from conference_tracker.core.services import ServiceRegistry
from conference_tracker.models import APIResponse

router = ControllerRouter("Home")


@router.action("Index", response_model=APIResponse[dict])
async def index(
    request: Request,
    services: ServiceRegistry = Depends(get_services),
):
    """Landing page"""
    consent: CookieConsent = request.state.cookie_consent
    user = request.user
    return APIResponse.ok(
        data={
            "application": services.settings.APP_NAME,
            "user": user.display_name if user.is_authenticated else None,
            "cookie_consent": {
                "is_consent_needed": consent.is_consent_needed,
                "has_consent": consent.has_consent,
            },
        }
    )


@router.action("Privacy", response_model=APIResponse[dict])
async def privacy():
    return APIResponse.ok(
        data={"policy": "Cookies other than the identity and consent cookies are only written after consent."}
    )


@router.action("Consent", methods=["POST"], response_model=APIResponse[None])
async def consent(
    request: Request,
    response: Response,
    services: ServiceRegistry = Depends(get_services),
):
    """Grant tracking consent for this browser"""
    grant_consent(services.cookie_policy, response, secure=request.url.scheme == "https")
    return APIResponse.ok(message="Cookie consent granted")


@router.action("WithdrawConsent", methods=["POST"], response_model=APIResponse[None])
async def withdraw(
    response: Response,
    services: ServiceRegistry = Depends(get_services),
):
    withdraw_consent(services.cookie_policy, response)
    return APIResponse.ok(message="Cookie consent withdrawn")


@router.action("Error", methods=["GET", "POST"], response_model=APIResponse[None])
async def error(request: Request):
    """Error page shown outside development"""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    return APIResponse.fail(
        code="INTERNAL_ERROR",
        message="An error occurred while processing your request.",
        details={"request_id": request_id},
    )
