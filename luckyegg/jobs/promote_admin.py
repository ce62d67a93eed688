"""
Grant the admin role to an existing account.

The account must already have signed up. Run with the backend's service
key so the profile update bypasses row-level security:

    LUCKYEGG_BACKEND_ANON_KEY=<service key> python -m luckyegg.jobs.promote_admin owner@example.com
"""

import argparse
import asyncio
import logging

from luckyegg.backend import BackendClient
from luckyegg.models.failure import KnownError
from luckyegg.services.auth import promote_to_admin

logger = logging.getLogger(__name__)


async def run_promote(email: str) -> bool:
    """
    Promote one account.

    Returns:
        True if the profile was updated
    """
    async with BackendClient.from_settings() as client:
        try:
            profile = await promote_to_admin(client, email)
        except KnownError as e:
            logger.error("Could not promote %s: %s (%s)", email, e.message, e.detail)
            return False

    logger.info("%s is now an admin (profile %s)", profile.email, profile.id)
    return True


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Grant the admin role to an account")
    parser.add_argument("email", help="Email of an account that has already signed up")
    args = parser.parse_args()

    ok = asyncio.run(run_promote(args.email))
    raise SystemExit(0 if ok else 1)


if __name__ == "__main__":
    main()
