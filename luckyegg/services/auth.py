"""
Account service.

Password sign-up/sign-in through the hosted backend's auth endpoints and
the binary admin/customer role stored on the `profiles` table. The first
account ever created becomes an admin.
"""

import logging

from luckyegg.backend import AuthSession, BackendClient, parse_row
from luckyegg.backend.tables import PROFILES
from luckyegg.models.failure import (
    AuthError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from luckyegg.models.order import Role, UserProfile

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


async def sign_up(
    client: BackendClient,
    email: str,
    password: str,
    confirm_password: str,
    first_name: str = "",
    last_name: str = "",
) -> AuthSession:
    """
    Create an account.

    The backend creates the profile row; if it is the only profile, it is
    promoted to admin.

    Raises:
        InvalidInputError: Passwords differ or are too short
        BackendError: The backend rejected the sign-up
    """
    if password != confirm_password:
        raise InvalidInputError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )

    session = await client.sign_up(
        email.strip(),
        password,
        metadata={"first_name": first_name, "last_name": last_name},
    )
    logger.info("Signed up user %s", session.user_id)

    user_client = client.as_user(session.access_token) if session.access_token else client
    if await user_client.count(PROFILES) <= 1:
        await user_client.update(PROFILES, {"role": Role.ADMIN.value}, filters={"id": session.user_id})
        logger.info("First account %s promoted to admin", session.user_id)

    return session


async def sign_in(client: BackendClient, email: str, password: str) -> AuthSession:
    session = await client.sign_in(email.strip(), password)
    logger.info("Signed in user %s", session.user_id)
    return session


async def sign_out(client: BackendClient, access_token: str) -> None:
    await client.as_user(access_token).sign_out()


async def get_profile(client: BackendClient, user_id: str) -> UserProfile | None:
    row = await client.select_one(PROFILES, {"id": user_id})
    return parse_row(UserProfile, row, PROFILES) if row else None


async def is_admin(client: BackendClient, user_id: str) -> bool:
    profile = await get_profile(client, user_id)
    return profile is not None and profile.is_admin


async def current_profile(client: BackendClient, access_token: str) -> UserProfile:
    """
    Resolve an access token to the caller's profile.

    Raises:
        AuthError: Token invalid or no profile exists for the user
    """
    user_client = client.as_user(access_token)
    session = await user_client.get_user()
    profile = await get_profile(user_client, session.user_id)
    if profile is None:
        raise AuthError("No profile for this account")
    return profile


async def require_admin(client: BackendClient, access_token: str) -> UserProfile:
    """
    Resolve the caller and insist on the admin role.

    Raises:
        AuthError: Token invalid
        PermissionDeniedError: Caller is not an admin
    """
    profile = await current_profile(client, access_token)
    if not profile.is_admin:
        raise PermissionDeniedError()
    return profile


async def promote_to_admin(client: BackendClient, email: str) -> UserProfile:
    """
    Give an existing account the admin role.

    Raises:
        NotFoundError: No profile has this email; the user must sign up first
    """
    email = email.strip()
    rows = await client.update(PROFILES, {"role": Role.ADMIN.value}, filters={"email": email})
    if not rows:
        raise NotFoundError("Profile", email)
    logger.info("Promoted %s to admin", email)
    return parse_row(UserProfile, rows[0], PROFILES)
