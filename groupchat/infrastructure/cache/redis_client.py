"""
Async Redis Client Factory.

Creates the Redis client shared by the document store and the task queue.
Uses redis.asyncio with connection pooling (automatic with from_url).
"""

import logging

import redis.asyncio as redis
from redis.asyncio import Redis

from groupchat.config.settings import Config

logger = logging.getLogger(__name__)


async def create_redis_client(url: str = None) -> Redis:
    """
    Create async Redis client and verify the connection.

    Raises:
        redis.ConnectionError: If Redis is not reachable

    Note:
        decode_responses=True, so every reply is a str.
    """
    url = url or Config.REDIS_URL
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        # no read timeout: the task worker blocks in BRPOP
        socket_connect_timeout=5.0,
    )

    await client.ping()
    logger.info(f"[Redis] Connected to {url}")

    return client


async def close_redis_client(client: Redis) -> None:
    """Close Redis client connection on shutdown."""
    if client:
        await client.aclose()
        logger.info("[Redis] Connection closed")
