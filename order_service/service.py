"""
Order Service — サービスの組み立て

設定からエンジン・セッションファクトリ・Redis を用意し、
1回の呼び出しごとにセッションを開いてコマンド/クエリを実行する。

  async with open_service() as service:
      order = await service.create_order(request)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from . import commands, queries
from .config import Settings, load_settings
from .database import create_engine, create_session_factory, redis_client
from .logging_config import setup_logging
from .models import CreateOrderRequest, Order
from .schema import create_schema

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        redis: aioredis.Redis | None = None,
    ):
        self.session_factory = session_factory
        self.redis = redis

    async def create_order(self, request: CreateOrderRequest) -> Order:
        async with self.session_factory() as session:
            return await commands.create_order(
                session,
                self.redis,
                request.customer_id,
                request.requested_lines(),
            )

    async def get_order(self, order_id: UUID | str) -> dict | None:
        async with self.session_factory() as session:
            return await queries.get_order(session, order_id)

    async def list_orders(self) -> list[dict]:
        async with self.session_factory() as session:
            return await queries.list_orders(session)


@asynccontextmanager
async def open_service(
    settings: Settings | None = None,
    init_schema: bool = False,
) -> AsyncIterator[OrderService]:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    engine = create_engine(settings)
    try:
        if init_schema:
            await create_schema(engine)
            logger.info("Database schema ensured")
        async with redis_client(settings) as redis:
            yield OrderService(create_session_factory(engine), redis)
    finally:
        await engine.dispose()
