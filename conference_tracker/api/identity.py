"""Identity account endpoints"""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conference_tracker.api.deps import get_current_user, get_db, get_services
from conference_tracker.core.security import (
    EMAIL_CONFIRMATION_TOKEN,
    create_access_token,
    create_email_confirmation_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from conference_tracker.core.services import ServiceRegistry
from conference_tracker.db.tables import User
from conference_tracker.models import (
    APIResponse,
    RegisterConfirmation,
    Token,
    UserLogin,
    UserRegister,
    UserResponse,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/Identity/Account", tags=["Identity"])


@router.post("/Register", response_model=APIResponse[RegisterConfirmation])
async def register(
    user_in: UserRegister,
    request: Request,
    services: ServiceRegistry = Depends(get_services),
    db: AsyncSession = Depends(get_db),
):
    """Create an account; it cannot sign in until its e-mail is confirmed"""
    result = await db.execute(select(User).where(User.email == user_in.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="E-mail is already registered",
        )

    user = User(
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        email_confirmed=not services.identity.require_confirmed_account,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User created a new account with password", user_id=str(user.id))

    code = create_email_confirmation_token(services.settings, user.id)
    confirmation_url = request.url_for("Identity.ConfirmEmail").include_query_params(
        userId=str(user.id), code=code
    )
    return APIResponse.ok(
        data=RegisterConfirmation(
            user=UserResponse.model_validate(user),
            confirmation_url=str(confirmation_url),
        ),
        message="Registration succeeded, confirm your e-mail to sign in",
    )


@router.get("/ConfirmEmail", name="Identity.ConfirmEmail", response_model=APIResponse[UserResponse])
async def confirm_email(
    user_id: UUID = Query(..., alias="userId"),
    code: str = Query(...),
    services: ServiceRegistry = Depends(get_services),
    db: AsyncSession = Depends(get_db),
):
    """Confirm an account's e-mail address"""
    payload = decode_token(services.settings, code, expected_type=EMAIL_CONFIRMATION_TOKEN)
    if not payload or payload.get("sub") != str(user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid confirmation code",
        )

    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user.email_confirmed = True
    await db.commit()
    await db.refresh(user)
    return APIResponse.ok(data=UserResponse.model_validate(user), message="Thank you for confirming your email.")


@router.post("/Login", response_model=APIResponse[Token])
async def login(
    user_in: UserLogin,
    request: Request,
    response: Response,
    services: ServiceRegistry = Depends(get_services),
    db: AsyncSession = Depends(get_db),
):
    """Sign in; sets the identity cookie and returns the same token"""
    result = await db.execute(select(User).where(User.email == user_in.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(user_in.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid login attempt",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    if services.identity.require_confirmed_account and not user.email_confirmed:
        logger.warning("Sign-in refused for unconfirmed account", user_id=str(user.id))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account e-mail is not confirmed",
        )

    settings = services.settings
    access_token = create_access_token(settings, subject=str(user.id), extra_claims={"email": user.email})
    expires_in = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        access_token,
        max_age=expires_in,
        path="/",
        httponly=True,
        secure=request.url.scheme == "https",
        samesite="lax",
    )
    logger.info("User logged in", user_id=str(user.id))

    return APIResponse.ok(data=Token(access_token=access_token, expires_in=expires_in))


@router.post("/Logout", response_model=APIResponse[None])
async def logout(
    response: Response,
    services: ServiceRegistry = Depends(get_services),
):
    response.delete_cookie(services.settings.AUTH_COOKIE_NAME, path="/")
    return APIResponse.ok(message="Signed out")


@router.get("/Manage", response_model=APIResponse[UserResponse])
async def manage(current_user: User = Depends(get_current_user)):
    """Current user's account"""
    return APIResponse.ok(data=UserResponse.model_validate(current_user))
