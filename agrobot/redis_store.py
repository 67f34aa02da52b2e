import logging

from redis.asyncio import Redis
from redis.asyncio.cluster import RedisCluster

from agrobot.config import Config

logger = logging.getLogger("redis_store")

MESSAGE_SEEN_TTL = 3600
CONTACT_SEEN_TTL = 30 * 24 * 3600

_client = None

def get_client():
    """Lazily build the Redis client (single node or managed cluster)."""
    global _client

    if _client is not None:
        return _client

    if Config.use_local_redis:
        logger.info("[REDIS] Using LOCAL single-node Redis")
        _client = Redis(
            host=Config.redis_host,
            port=Config.redis_port,
            password=Config.redis_password or None,
            ssl=Config.redis_ssl,
            decode_responses=True,
            socket_timeout=2,
        )
    else:
        logger.info("[REDIS] Using CLUSTER Redis (managed)")
        _client = RedisCluster(
            host=Config.redis_host,
            port=Config.redis_port,
            password=Config.redis_password or None,
            ssl=Config.redis_ssl,
            decode_responses=True,
            socket_timeout=2,
        )
    return _client


async def _mark_first_seen(key, ttl_s):
    try:
        # SET NX EX = atomic idempotency lock
        ok = await get_client().set(key, "1", nx=True, ex=int(ttl_s))
        return bool(ok)
    except Exception as exc:
        # If Redis is down, don't break the bot; process normally
        logger.warning("Redis unavailable for %s, skipping dedupe: %s", key, exc)
        return True

async def mark_incoming_message_seen(message_id: str, ttl_s: int = MESSAGE_SEEN_TTL) -> bool:
    """
    Returns True if this message_id is seen for the first time.
    Returns False if we've already processed it recently.
    """
    if not message_id:
        return True  # can't dedupe
    return await _mark_first_seen(f"seen:wa:msg:{message_id}", ttl_s)

async def mark_contact_seen(phone_number: str, ttl_s: int = CONTACT_SEEN_TTL) -> bool:
    """Returns True the first time a contact is welcomed."""
    if not phone_number:
        return True
    return await _mark_first_seen(f"seen:wa:contact:{phone_number}", ttl_s)

async def forget_contact(phone_number: str) -> None:
    """Drop the welcome marker so the next connect attempt retries."""
    try:
        await get_client().delete(f"seen:wa:contact:{phone_number}")
    except Exception as exc:
        logger.warning("Redis unavailable, could not forget contact %s: %s", phone_number, exc)
