import uuid

import redis
from redis.exceptions import RedisError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    retry_if_result,
)

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, STOCK_LOCK_TTL_SECONDS, STOCK_LOCK_ATTEMPTS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL


def _lock_key(product_id: int) -> str:
    return f"product:{product_id}:stock-lock"


class LockService:
    """
    -blokada stanu magazynowego produktu (lock per produkt)
    -zwalnianie locka tylko przez wlasciciela tokena
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = STOCK_LOCK_TTL_SECONDS,
        attempts: int = STOCK_LOCK_ATTEMPTS,
    ):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl
        self.attempts = attempts

    def acquire_stock_lock(self, product_id: int) -> str | None:
        """
        Zwraca token locka albo None, jesli po wszystkich probach
        lock nadal trzyma ktos inny.
        """
        key = _lock_key(product_id)
        token = uuid.uuid4().hex

        @retry(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
            retry=retry_if_exception_type(RedisError) | retry_if_result(lambda ok: not ok),
            retry_error_callback=lambda state: False,
        )
        def _try_set() -> bool:
            #SET product:1:stock-lock <token> NX EX 10
            return bool(self.redis.set(name=key, value=token, nx=True, ex=self.ttl))

        if not _try_set():
            logger.warning(f"Nie udalo sie zablokowac {key}")
            return None

        logger.info(f"Acquire lock {key}")
        return token

    @redis_retry()
    def release_stock_lock(self, product_id: int, token: str) -> bool:
        key = _lock_key(product_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
