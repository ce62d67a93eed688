"""Newsletter sign-ups."""

import logging
from dataclasses import dataclass

from luckyegg.backend import BackendClient, parse_rows
from luckyegg.backend.tables import EMAIL_SUBSCRIBERS
from luckyegg.models.failure import BackendError, InvalidInputError
from luckyegg.models.order import EmailSubscriber

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "website_newsletter"


@dataclass(frozen=True, slots=True)
class SubscribeResult:
    email: str
    already_subscribed: bool


async def subscribe(
    client: BackendClient,
    email: str,
    first_name: str = "",
    source: str = DEFAULT_SOURCE,
) -> SubscribeResult:
    """
    Add an email to the subscriber list.

    Subscribing twice is not an error: the backend's unique violation is
    reported as `already_subscribed`.
    """
    email = email.strip()
    if not email or "@" not in email:
        raise InvalidInputError("Please enter a valid email address")

    try:
        await client.insert(
            EMAIL_SUBSCRIBERS,
            {"email": email, "first_name": first_name.strip() or None, "subscription_source": source},
        )
    except BackendError as e:
        if e.is_unique_violation:
            return SubscribeResult(email=email, already_subscribed=True)
        raise

    logger.info("New newsletter subscriber from %s", source)
    return SubscribeResult(email=email, already_subscribed=False)


async def list_subscribers(client: BackendClient) -> list[EmailSubscriber]:
    rows = await client.select(EMAIL_SUBSCRIBERS, order="created_at", descending=True)
    return parse_rows(EmailSubscriber, rows, EMAIL_SUBSCRIBERS)
