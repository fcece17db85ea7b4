# alerte_meteo/redis_client.py
# ------------------------------------------------------------
# Centralized Redis connection helper.
#
# The connection pool is created lazily once per process; every
# caller shares it.
# ------------------------------------------------------------

from functools import lru_cache

import redis
from .config import settings


@lru_cache(maxsize=1)
def get_redis() -> redis.Redis:
    """
    Returns the shared Redis client instance.

    - decode_responses=True ensures all values are returned as str
      (the alert document is stored as a JSON string).
    - short socket timeouts: a slow Redis must degrade the public
      read to "no alert" rather than hang the request.
    """
    return redis.Redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=3,
        socket_timeout=3,
    )
