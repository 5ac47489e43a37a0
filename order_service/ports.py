"""
Order Service — 外部コラボレーターの契約

ワークフローは具体的な保管先を知らない。呼び出し側が
この Protocol を満たすアダプタ(SQL 実装やテスト用のインメモリ実装)を
コンストラクタで注入する。
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from .models import Customer, Order, OrderLine, Product, ProductQuantityUpdate


class CustomerDirectory(Protocol):
    async def find_by_id(self, customer_id: str) -> Customer | None: ...


class InventoryCatalog(Protocol):
    async def find_all_by_id(self, ids: Iterable[str]) -> list[Product]:
        """存在する商品だけを返す。存在しない ID はエラーにせず省く。"""
        ...

    async def update_quantity(self, updates: Sequence[ProductQuantityUpdate]) -> None: ...


class OrderLedger(Protocol):
    async def create(self, customer: Customer, lines: Sequence[OrderLine]) -> Order:
        """注文と明細を1単位として保存し、保存済みの Order を返す。"""
        ...
