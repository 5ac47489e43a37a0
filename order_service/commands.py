"""
Order Service — コマンドハンドラ (Write 側)

セッションと Redis から SQL アダプタを組み立て、
注文作成ワークフローを実行する。
"""

from collections.abc import Iterable, Mapping

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order, RequestedLine
from .repositories import SqlCustomerDirectory, SqlInventoryCatalog, SqlOrderLedger
from .workflow import CreateOrderWorkflow


def build_workflow(
    session: AsyncSession,
    redis: aioredis.Redis | None = None,
) -> CreateOrderWorkflow:
    return CreateOrderWorkflow(
        customers=SqlCustomerDirectory(session),
        products=SqlInventoryCatalog(session, redis),
        orders=SqlOrderLedger(session, redis),
    )


async def create_order(
    session: AsyncSession,
    redis: aioredis.Redis | None,
    customer_id: str,
    products: Iterable[RequestedLine | Mapping],
) -> Order:
    """
    注文作成コマンド

    検証エラー (OrderError のサブクラス) はそのまま呼び出し側へ伝播する。
    その場合 DB への書き込みは行われていない。
    """
    workflow = build_workflow(session, redis)
    return await workflow.execute(customer_id, products)
