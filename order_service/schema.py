"""
Order Service — テーブル定義

customers / products は外部で管理されるマスタだが、
ローカル開発とテストのために同じ DB に作成できるようにしておく。
orders.customer_id は顧客削除時に NULL にする (ON DELETE SET NULL)。
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

TABLES = [
    (
        "customers",
        """
        CREATE TABLE IF NOT EXISTS customers (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            email VARCHAR(255) NOT NULL,
            created_at TIMESTAMPTZ,
            updated_at TIMESTAMPTZ
        )
        """,
    ),
    (
        "products",
        """
        CREATE TABLE IF NOT EXISTS products (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            price NUMERIC(10, 2) NOT NULL,
            quantity INTEGER NOT NULL,
            created_at TIMESTAMPTZ,
            updated_at TIMESTAMPTZ
        )
        """,
    ),
    (
        "orders",
        """
        CREATE TABLE IF NOT EXISTS orders (
            id VARCHAR(36) PRIMARY KEY,
            customer_id VARCHAR(36) NULL
                REFERENCES customers (id) ON DELETE SET NULL ON UPDATE CASCADE,
            created_at TIMESTAMPTZ NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL
        )
        """,
    ),
    (
        "orders_products",
        """
        CREATE TABLE IF NOT EXISTS orders_products (
            id VARCHAR(36) PRIMARY KEY,
            order_id VARCHAR(36) NOT NULL
                REFERENCES orders (id) ON DELETE CASCADE,
            product_id VARCHAR(36) NULL
                REFERENCES products (id) ON DELETE SET NULL,
            line_number INTEGER NOT NULL,
            price NUMERIC(10, 2) NOT NULL,
            quantity INTEGER NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL
        )
        """,
    ),
    (
        "event_store",
        # (aggregate_id, version) の一意性で同時書き込みを検知する
        """
        CREATE TABLE IF NOT EXISTS event_store (
            aggregate_id VARCHAR(36) NOT NULL,
            aggregate_type VARCHAR(50) NOT NULL,
            event_type VARCHAR(100) NOT NULL,
            event_data TEXT NOT NULL,
            version INTEGER NOT NULL,
            created_at TIMESTAMPTZ NOT NULL,
            PRIMARY KEY (aggregate_id, version)
        )
        """,
    ),
]


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        for _, ddl in TABLES:
            await conn.execute(text(ddl))


async def drop_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        for name, _ in reversed(TABLES):
            await conn.execute(text(f"DROP TABLE IF EXISTS {name}"))
