"""
Module: secret.py
Description: Event secret generation and the moderation gate.

An event's secret is minted once when the event is created and shown
only to its creator. Moderation (full listing, toggling flags) requires
presenting it again; voting and asking never do.

Key Components:
- generate_secret(): Mint a new URL-safe event secret
- secrets_match(): Byte-for-byte, constant-time secret comparison
- authorize(): Gate that raises ForbiddenError unless the secret matches

Dependencies: secrets, hmac
"""

import hmac
import secrets
from typing import TYPE_CHECKING, Optional

from qanda.models.event import Authorization
from qanda.storage.errors import ForbiddenError
from qanda.utils.logger import get_logger

if TYPE_CHECKING:
    from qanda.storage.base import QuestionStore

logger = get_logger(__name__)

SECRET_BYTES = 24


def generate_secret() -> str:
    """
    Generate a new event secret.

    Returns:
        URL-safe random token (32 characters for the default 24 bytes)
    """
    return secrets.token_urlsafe(SECRET_BYTES)


def secrets_match(stored: Optional[str], supplied: Optional[str]) -> bool:
    """
    Compare a stored secret with a caller-supplied one.

    Comparison is over the UTF-8 bytes and takes the same time
    regardless of where the first difference is. A missing value on
    either side never matches.
    """
    if not stored or supplied is None:
        return False
    return hmac.compare_digest(stored.encode('utf-8'), supplied.encode('utf-8'))


async def authorize(store: "QuestionStore", event_id: str, secret: str) -> None:
    """
    Require that secret is the moderation secret of event_id.

    Args:
        store: Active storage backend
        event_id: Event being moderated
        secret: Secret supplied by the caller

    Raises:
        ForbiddenError: If the secret does not match (or the event is unknown)
        StoreUnavailableError: If the backend could not be consulted
    """
    result = await store.check_secret(event_id, secret)
    if result is not Authorization.AUTHORIZED:
        logger.warning(
            "Attempted to moderate event with incorrect secret",
            event_id=event_id
        )
        raise ForbiddenError(event_id)
