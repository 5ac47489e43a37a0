"""
Order Service — クエリハンドラ (Read 側)

保存済みの注文を明細付きで返す。明細の price は注文時点の単価。
"""

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

_TIMESTAMP = DateTime(timezone=True)


def _lines_query():
    return text("""
        SELECT order_id, product_id, price, quantity
        FROM orders_products
        WHERE order_id IN :ids
        ORDER BY order_id, line_number
    """).bindparams(bindparam("ids", expanding=True))


async def _load_lines(session: AsyncSession, order_ids: list[str]) -> dict[str, list[dict]]:
    lines: dict[str, list[dict]] = defaultdict(list)
    if not order_ids:
        return lines
    result = await session.execute(_lines_query(), {"ids": order_ids})
    for row in result.fetchall():
        lines[row.order_id].append(
            {
                "product_id": row.product_id,
                "quantity": row.quantity,
                "price": float(row.price),
            }
        )
    return lines


def _to_dict(row, lines: list[dict]) -> dict:
    total = sum(
        (Decimal(str(line["price"])) * line["quantity"] for line in lines),
        Decimal("0"),
    )
    return {
        "id": row.id,
        "customer_id": row.customer_id,
        "products": lines,
        "total_price": float(total),
        "created_at": row.created_at.isoformat() if row.created_at else None,
        "updated_at": row.updated_at.isoformat() if row.updated_at else None,
    }


async def get_order(session: AsyncSession, order_id: UUID | str) -> dict | None:
    result = await session.execute(
        text("""
            SELECT id, customer_id, created_at, updated_at
            FROM orders WHERE id = :id
        """).columns(created_at=_TIMESTAMP, updated_at=_TIMESTAMP),
        {"id": str(order_id)},
    )
    row = result.fetchone()
    if not row:
        return None
    lines = await _load_lines(session, [row.id])
    return _to_dict(row, lines[row.id])


async def list_orders(session: AsyncSession) -> list[dict]:
    """全注文を新しい順に返す。"""
    result = await session.execute(
        text("""
            SELECT id, customer_id, created_at, updated_at
            FROM orders ORDER BY created_at DESC
        """).columns(created_at=_TIMESTAMP, updated_at=_TIMESTAMP),
    )
    rows = result.fetchall()
    lines = await _load_lines(session, [row.id for row in rows])
    return [_to_dict(row, lines[row.id]) for row in rows]
