from slowapi import Limiter
from slowapi.util import get_remote_address
from microfeed.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Applied to every endpoint that writes
write_limit = settings.RATE_LIMIT_WRITE
