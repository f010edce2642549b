"""
Ограничение попыток входа по IP (Redis, фиксированное окно).
Redis недоступен -> вход разрешается: лимит не должен блокировать покупателей.
"""
import logging

import redis
from starlette.requests import Request

from notestore.core.config import settings

logger = logging.getLogger("auth")


def get_client_ip(request: Request) -> str:
    """IP клиента; X-Forwarded-For учитывается только от доверенного прокси в production."""
    forwarded = request.headers.get("X-Forwarded-For")
    peer = request.client.host if request.client else None
    if forwarded and settings.app_env == "production" and peer in settings.trusted_proxy_ips_set:
        return forwarded.split(",")[0].strip()
    return peer or "127.0.0.1"


class LoginRateLimiter:
    KEY_PREFIX = "login_attempts:"

    def __init__(
        self,
        client: redis.Redis | None = None,
        attempts: int | None = None,
        window_seconds: int | None = None,
    ) -> None:
        self._client = client
        self.attempts = attempts or settings.login_rate_limit_attempts
        self.window_seconds = window_seconds or settings.login_rate_limit_window_seconds

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=1,
                socket_timeout=1,
            )
        return self._client

    def hit(self, client_ip: str) -> bool:
        """Засчитать попытку. True - попытка разрешена."""
        key = self.KEY_PREFIX + client_ip
        try:
            current = self.client.incr(key)
            if current == 1:
                self.client.expire(key, self.window_seconds)
        except redis.RedisError as e:
            logger.warning("login_rate_limit_redis_error", extra={"ip": client_ip, "error": str(e)})
            return True
        if current > self.attempts:
            logger.warning("login_rate_limited", extra={"ip": client_ip, "attempts": current})
            return False
        return True

    def reset(self, client_ip: str) -> None:
        """После успешного входа счётчик сбрасывается."""
        try:
            self.client.delete(self.KEY_PREFIX + client_ip)
        except redis.RedisError as e:
            logger.debug("login_rate_limit_reset_failed", extra={"ip": client_ip, "error": str(e)})


login_limiter = LoginRateLimiter()
