# paintperfect/core/rate_limit.py
from slowapi import Limiter
from slowapi.util import get_remote_address

from paintperfect.core.settings import settings

# one shared limiter for the whole app
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# sign-in / sign-up forms and their JSON twins
auth_limit = limiter.limit(settings.RATE_LIMIT_AUTH)
