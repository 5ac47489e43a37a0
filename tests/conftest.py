"""Shared fixtures: in-memory collaborators and a throwaway SQLite database."""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from order_service.models import Customer, Order, OrderLine, Product, ProductQuantityUpdate
from order_service.schema import create_schema, drop_schema
from order_service.workflow import CreateOrderWorkflow


class InMemoryCustomerDirectory:
    def __init__(self, customers: Iterable[Customer] = ()):
        self.customers = {c.id: c for c in customers}
        self.lookups: list[str] = []

    async def find_by_id(self, customer_id: str) -> Customer | None:
        self.lookups.append(customer_id)
        return self.customers.get(customer_id)


class InMemoryInventoryCatalog:
    """Returns matches in catalog order, like a table scan would."""

    def __init__(self, products: Iterable[Product] = ()):
        self.products = {p.id: p for p in products}
        self.lookups: list[list[str]] = []
        self.updates: list[list[ProductQuantityUpdate]] = []

    async def find_all_by_id(self, ids: Iterable[str]) -> list[Product]:
        ids = list(ids)
        self.lookups.append(ids)
        return [p for p in self.products.values() if p.id in ids]

    async def update_quantity(self, updates: Sequence[ProductQuantityUpdate]) -> None:
        self.updates.append(list(updates))
        for update in updates:
            product = self.products[update.id]
            self.products[update.id] = product.model_copy(update={"quantity": update.quantity})

    def stock(self, product_id: str) -> int:
        return self.products[product_id].quantity

    def set_price(self, product_id: str, price: Decimal) -> None:
        product = self.products[product_id]
        self.products[product_id] = product.model_copy(update={"price": price})


class InMemoryOrderLedger:
    def __init__(self):
        self.orders: list[Order] = []

    async def create(self, customer: Customer, lines: Sequence[OrderLine]) -> Order:
        now = datetime.now(timezone.utc)
        order = Order(
            id=uuid4(),
            customer=customer,
            products=tuple(lines),
            created_at=now,
            updated_at=now,
        )
        self.orders.append(order)
        return order


@pytest.fixture
def customers():
    return InMemoryCustomerDirectory([Customer(id="C1", name="Jane Doe", email="jane@example.com")])


@pytest.fixture
def catalog():
    return InMemoryInventoryCatalog(
        [
            Product(id="P1", name="Mouse", price=Decimal("10.00"), quantity=5),
            Product(id="P2", name="Keyboard", price=Decimal("20.00"), quantity=1),
        ]
    )


@pytest.fixture
def ledger():
    return InMemoryOrderLedger()


@pytest.fixture
def workflow(customers, catalog, ledger):
    return CreateOrderWorkflow(customers, catalog, ledger)


# ── SQLite ──────────────────────────────────────────


async def seed(session: AsyncSession) -> None:
    await session.execute(
        text("INSERT INTO customers (id, name, email) VALUES (:id, :name, :email)"),
        [{"id": "C1", "name": "Jane Doe", "email": "jane@example.com"}],
    )
    await session.execute(
        text("INSERT INTO products (id, name, price, quantity) VALUES (:id, :name, :price, :quantity)"),
        [
            {"id": "P1", "name": "Mouse", "price": "10.00", "quantity": 5},
            {"id": "P2", "name": "Keyboard", "price": "20.00", "quantity": 1},
        ],
    )
    await session.commit()


async def stock_levels(session: AsyncSession) -> dict[str, int]:
    result = await session.execute(text("SELECT id, quantity FROM products"))
    return {row.id: row.quantity for row in result.fetchall()}


async def count_rows(session: AsyncSession, table: str) -> int:
    result = await session.execute(text(f"SELECT COUNT(*) FROM {table}"))
    return result.scalar_one()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    engine = create_async_engine(database_url)
    await create_schema(engine)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        await seed(session)
        yield session


@pytest.fixture
def redis():
    return AsyncMock()
