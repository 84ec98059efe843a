from slowapi import Limiter
from slowapi.util import get_remote_address

from vacation.config import get_settings

limiter = Limiter(key_func=get_remote_address)

# Applied to every endpoint that changes leave state
WRITE_LIMIT = get_settings().write_rate_limit
