"""
Order Service — 接続管理

DB エンジン・セッションファクトリ・Redis クライアントを設定から組み立てる。
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import Settings

logger = logging.getLogger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, echo=settings.sql_echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def redis_client(settings: Settings) -> AsyncIterator[aioredis.Redis]:
    """イベント発行用の Redis 接続。終了時に必ず閉じる。"""
    client = aioredis.from_url(settings.redis_url, decode_responses=True)
    logger.info("Connected to redis at %s", settings.redis_url)
    try:
        yield client
    finally:
        await client.aclose()
