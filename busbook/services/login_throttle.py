import logging

from busbook.config import settings
from busbook.exceptions import TooManyAttempts
from busbook.redis_client import redis_client

logger = logging.getLogger(__name__)

RATE_LIMIT_KEY_TPL = "rl:login:{identifier}"


class LoginThrottle:
    """Counts failed logins per email in Redis over a fixed window."""

    def __init__(self, redis, max_attempts: int, window_seconds: int):
        self.redis = redis
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds

    def _key(self, identifier: str) -> str:
        return RATE_LIMIT_KEY_TPL.format(identifier=identifier.lower())

    async def check(self, identifier: str):
        attempts = await self.redis.get(self._key(identifier))
        if attempts and int(attempts) >= self.max_attempts:
            logger.warning("Login throttled", extra={"identifier": identifier})
            raise TooManyAttempts()

    async def record_failure(self, identifier: str):
        key = self._key(identifier)
        await self.redis.incr(key)
        await self.redis.expire(key, self.window_seconds)

    async def reset(self, identifier: str):
        await self.redis.delete(self._key(identifier))


def get_login_throttle() -> LoginThrottle:
    return LoginThrottle(
        redis_client,
        max_attempts=settings.LOGIN_RATE_LIMIT_ATTEMPTS,
        window_seconds=settings.LOGIN_RATE_LIMIT_WINDOW_SECONDS,
    )
