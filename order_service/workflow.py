"""
Order Service — 注文作成ワークフロー

このサービスで唯一の業務ルールを持つユースケース。
検証してからコミットする、一直線の処理:

  ┌─────────────────────────────────────────────────────────┐
  │  1. 顧客を検索               → なければ CustomerNotFound   │
  │  2. 商品をまとめて検索       → 0件なら NoProductsFound     │
  │  3. 存在しない商品を確認     → あれば ProductNotFound      │
  │  4. 在庫数を確認             → 不足なら InsufficientStock  │
  │  5. 明細を組み立て(単価はスナップショット)                │
  │  6. 注文を保存 (OrderLedger)                               │
  │  7. 在庫数をまとめて更新 (InventoryCatalog)                │
  └─────────────────────────────────────────────────────────┘

1〜4 の検証で失敗した場合は一切書き込まない。
6 と 7 は別々の書き込みで、7 が失敗しても 6 は取り消されない。
"""

import logging
from collections.abc import Iterable, Mapping

from .errors import CustomerNotFound, InsufficientStock, NoProductsFound, ProductNotFound
from .models import Order, OrderLine, Product, ProductQuantityUpdate, RequestedLine
from .ports import CustomerDirectory, InventoryCatalog, OrderLedger

logger = logging.getLogger(__name__)


class CreateOrderWorkflow:
    """注文作成ユースケース。呼び出し間で状態を持たない。"""

    def __init__(
        self,
        customers: CustomerDirectory,
        products: InventoryCatalog,
        orders: OrderLedger,
    ):
        self.customers = customers
        self.products = products
        self.orders = orders

    async def execute(
        self,
        customer_id: str,
        requested_lines: Iterable[RequestedLine | Mapping],
    ) -> Order:
        lines = [_as_requested_line(line) for line in requested_lines]
        logger.info(
            "Creating order for customer %s (%d lines)", customer_id, len(lines)
        )

        # ── Step 1: 顧客 ────────────────────────────
        customer = await self.customers.find_by_id(customer_id)
        if customer is None:
            logger.warning("Order rejected: customer %s not found", customer_id)
            raise CustomerNotFound(customer_id)

        # ── Step 2: 商品 (重複を除いた ID を要求順で) ─
        registered = await self.products.find_all_by_id(
            list(dict.fromkeys(line.id for line in lines))
        )
        if not registered:
            logger.warning("Order rejected: none of the requested products exist")
            raise NoProductsFound()

        # 同じ ID が複数あれば最初のものが勝つ
        catalog: dict[str, Product] = {}
        for product in registered:
            catalog.setdefault(product.id, product)

        # ── Step 3: 存在しない商品 (要求順で最初のもの) ─
        inexistent = [line for line in lines if line.id not in catalog]
        if inexistent:
            logger.warning("Order rejected: product %s not found", inexistent[0].id)
            raise ProductNotFound(inexistent[0].id)

        # ── Step 4: 在庫不足 (検索結果の順で最初のもの) ─
        requested: dict[str, RequestedLine] = {}
        for line in lines:
            requested.setdefault(line.id, line)

        insufficient = [
            product
            for product in registered
            if requested[product.id].quantity > product.quantity
        ]
        if insufficient:
            product = insufficient[0]
            logger.warning(
                "Order rejected: product %s has %d in stock, %d requested",
                product.id,
                product.quantity,
                requested[product.id].quantity,
            )
            raise InsufficientStock(
                product.id, requested[product.id].quantity, product.quantity
            )

        # ── Step 5: 明細 (要求順、単価は現時点の価格) ──
        ordered_products = [
            OrderLine(
                product_id=line.id,
                quantity=line.quantity,
                price=catalog[line.id].price,
            )
            for line in lines
        ]

        # ── Step 6: 注文を保存 ──────────────────────
        order = await self.orders.create(customer, ordered_products)

        # ── Step 7: 在庫を減らす ────────────────────
        # 新しい在庫数は明細ごとに「検索時点の在庫 - 明細の数量」で求める。
        # 同じ商品が複数行ある場合は累積されず、後の行の値で上書きされる。
        await self.products.update_quantity(
            [
                ProductQuantityUpdate(
                    id=line.product_id,
                    quantity=catalog[line.product_id].quantity - line.quantity,
                )
                for line in ordered_products
            ]
        )

        logger.info(
            "Order %s created for customer %s (%d lines)",
            order.id,
            customer.id,
            len(order.products),
        )
        return order


def _as_requested_line(line: RequestedLine | Mapping) -> RequestedLine:
    if isinstance(line, RequestedLine):
        return line
    return RequestedLine.model_validate(line)
