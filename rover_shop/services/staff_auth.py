"""Staff gate: username allow-list plus a shared 4-digit PIN"""
import hmac
import logging
from typing import Optional

from rover_shop.config import Settings


logger = logging.getLogger(__name__)


def verify_staff(username: Optional[str], pin: Optional[str], settings: Settings) -> Optional[str]:
    """
    Check staff credentials

    Returns:
        Canonical username when accepted, None otherwise
    """
    if not username or not pin:
        return None

    allowed = {user.lower(): user for user in settings.staff_users}
    canonical = allowed.get(username.strip().lower())
    if canonical is None:
        logger.warning(f"Staff login rejected: unknown user {username!r}")
        return None

    if not hmac.compare_digest(pin.strip(), settings.staff_pin):
        logger.warning(f"Staff login rejected: wrong PIN for {canonical}")
        return None

    return canonical
