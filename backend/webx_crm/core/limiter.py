"""Request rate limiting."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from webx_crm.core.config import settings

DEFAULT_LIMIT = f"{settings.RATE_LIMIT_PER_MINUTE}/minute"

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)
