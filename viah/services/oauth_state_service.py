"""
OAuth state parameters for calendar authorization.

Each state is a random token stored in Redis against the user and provider
that requested it, expiring after STATE_TTL_SECONDS.
"""

import secrets

from viah.infrastructure.observability.logging import get_logger
from viah.services.redis_store import set_with_ttl

logger = get_logger(__name__)

STATE_TTL_SECONDS = 900  # 15 minutes
STATE_KEY_PREFIX = "oauth_state"
STATE_LENGTH = 32  # bytes


class OAuthStateError(Exception):
    """State could not be stored; the authorization flow cannot start."""


def state_key(state: str) -> str:
    return f"{STATE_KEY_PREFIX}:{state}"


async def generate_oauth_state(user_id: str, provider: str) -> str:
    """
    Create and store a CSRF state for an authorization request.

    Raises:
        OAuthStateError: Redis did not accept the state
    """
    state = secrets.token_urlsafe(STATE_LENGTH)
    stored = await set_with_ttl(state_key(state), f"{user_id}:{provider}", STATE_TTL_SECONDS)
    if not stored:
        logger.error("Failed to store OAuth state", user_id=user_id, provider=provider)
        raise OAuthStateError("Failed to store OAuth state")

    logger.info(
        "OAuth state generated",
        user_id=user_id,
        provider=provider,
        ttl_seconds=STATE_TTL_SECONDS,
    )
    return state
