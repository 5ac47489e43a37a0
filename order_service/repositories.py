"""
Order Service — SQL アダプタ

ports.py の契約を SQLAlchemy (AsyncSession + 生 SQL) で実装する。
書き込み系はそれぞれ自分でコミットし、コミット後に Redis Pub/Sub で
イベントを発行する(redis を渡さなければ発行しない)。

注文の保存と在庫の更新は別のトランザクションになる。
"""

import json
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import redis.asyncio as aioredis
from sqlalchemy import DateTime, Numeric, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from . import event_store
from .events import InventoryUpdated, OrderCreated, OrderCreatedLine, StockLevel
from .models import Customer, Order, OrderLine, Product, ProductQuantityUpdate

logger = logging.getLogger(__name__)

ORDER_EVENTS_CHANNEL = "order_events"
INVENTORY_EVENTS_CHANNEL = "inventory_events"

_TIMESTAMP = DateTime(timezone=True)
_MONEY = Numeric(10, 2)


def _to_decimal(value) -> Decimal:
    # SQLite は NUMERIC を float で返すため文字列経由で変換する
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


async def _publish(redis: aioredis.Redis | None, channel: str, event_type: str, data: dict) -> None:
    if redis is None:
        return
    await redis.publish(
        channel,
        json.dumps({"event_type": event_type, "data": data}, default=str),
    )


class SqlCustomerDirectory:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, customer_id: str) -> Customer | None:
        result = await self.session.execute(
            text("SELECT id, name, email FROM customers WHERE id = :id"),
            {"id": customer_id},
        )
        row = result.fetchone()
        if not row:
            return None
        return Customer(id=row.id, name=row.name, email=row.email)


class SqlInventoryCatalog:
    """products テーブルに対する検索と在庫数の更新"""

    _FIND_ALL = text(
        "SELECT id, name, price, quantity FROM products WHERE id IN :ids"
    ).bindparams(bindparam("ids", expanding=True))

    _UPDATE_QUANTITY = text("""
        UPDATE products
        SET quantity = :quantity, updated_at = :now
        WHERE id = :id
    """).bindparams(bindparam("now", type_=_TIMESTAMP))

    def __init__(self, session: AsyncSession, redis: aioredis.Redis | None = None):
        self.session = session
        self.redis = redis

    async def find_all_by_id(self, ids: Iterable[str]) -> list[Product]:
        ids = list(ids)
        if not ids:
            return []
        result = await self.session.execute(self._FIND_ALL, {"ids": ids})
        return [
            Product(
                id=row.id,
                name=row.name,
                price=_to_decimal(row.price),
                quantity=row.quantity,
            )
            for row in result.fetchall()
        ]

    async def update_quantity(self, updates: Sequence[ProductQuantityUpdate]) -> None:
        if not updates:
            return
        now = datetime.now(timezone.utc)
        await self.session.execute(
            self._UPDATE_QUANTITY,
            [{"id": u.id, "quantity": u.quantity, "now": now} for u in updates],
        )
        await self.session.commit()
        logger.info("Updated stock levels for %d products", len(updates))

        event = InventoryUpdated(
            products=[StockLevel(product_id=u.id, quantity=u.quantity) for u in updates],
            timestamp=now,
        )
        await _publish(
            self.redis,
            INVENTORY_EVENTS_CHANNEL,
            "InventoryUpdated",
            event.model_dump(mode="json"),
        )


class SqlOrderLedger:
    """
    注文の保存

    1. orders に注文を INSERT
    2. orders_products に明細を INSERT (要求順を line_number で保持)
    3. OrderCreated イベントをイベントストアに追記
    4. コミット後、Redis Pub/Sub でイベントを発行
    """

    _INSERT_ORDER = text("""
        INSERT INTO orders (id, customer_id, created_at, updated_at)
        VALUES (:id, :customer_id, :now, :now)
    """).bindparams(bindparam("now", type_=_TIMESTAMP))

    _INSERT_LINE = text("""
        INSERT INTO orders_products
            (id, order_id, product_id, line_number, price, quantity, created_at, updated_at)
        VALUES
            (:id, :order_id, :product_id, :line_number, :price, :quantity, :now, :now)
    """).bindparams(
        bindparam("price", type_=_MONEY),
        bindparam("now", type_=_TIMESTAMP),
    )

    def __init__(self, session: AsyncSession, redis: aioredis.Redis | None = None):
        self.session = session
        self.redis = redis

    async def create(self, customer: Customer, lines: Sequence[OrderLine]) -> Order:
        order_id = uuid4()
        now = datetime.now(timezone.utc)

        await self.session.execute(
            self._INSERT_ORDER,
            {"id": str(order_id), "customer_id": customer.id, "now": now},
        )
        if lines:
            await self.session.execute(
                self._INSERT_LINE,
                [
                    {
                        "id": str(uuid4()),
                        "order_id": str(order_id),
                        "product_id": line.product_id,
                        "line_number": number,
                        "price": line.price,
                        "quantity": line.quantity,
                        "now": now,
                    }
                    for number, line in enumerate(lines)
                ],
            )

        order = Order(
            id=order_id,
            customer=customer,
            products=tuple(lines),
            created_at=now,
            updated_at=now,
        )
        event = OrderCreated(
            order_id=order_id,
            customer_id=customer.id,
            products=[
                OrderCreatedLine(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    price=line.price,
                )
                for line in lines
            ],
            total_price=order.total,
            timestamp=now,
        )
        event_data = event.model_dump(mode="json")
        await event_store.append_event(
            self.session, order_id, "Order", "OrderCreated", event_data, 0
        )
        await self.session.commit()
        logger.info("Persisted order %s with %d lines", order_id, len(lines))

        await _publish(self.redis, ORDER_EVENTS_CHANNEL, "OrderCreated", event_data)
        return order
