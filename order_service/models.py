"""
Order Service — ドメインモデル

注文作成ユースケースが扱うデータ構造。
Customer と Product は外部の保管先が所有し、このサービスからは読み取り専用
(在庫数の減算を除く)。Order と OrderLine は作成後に変更しないため frozen にする。
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    email: str = ""


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    price: Decimal
    quantity: int


class RequestedLine(BaseModel):
    """呼び出し元が指定する (商品 ID, 数量) の組。数量の正値チェックはしない。"""

    id: str
    quantity: int


class ProductQuantityUpdate(BaseModel):
    """在庫更新の指示。新しい在庫数そのものを持つ(差分ではない)"""

    id: str
    quantity: int


class OrderLine(BaseModel):
    """
    注文明細。price は注文時点の単価のスナップショットで、
    その後カタログの価格が変わっても変化しない。
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    quantity: int
    price: Decimal


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    customer: Customer
    products: tuple[OrderLine, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def total(self) -> Decimal:
        return sum(
            (line.price * line.quantity for line in self.products), Decimal("0")
        )


# ── Request Models (バリデーション層) ─────────────


class RequestedProduct(BaseModel):
    id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)


class CreateOrderRequest(BaseModel):
    """
    注文作成リクエスト。

    ワークフロー自体は数量の正値を強制しないため、
    入口でのバリデーションはこのモデルが担う。
    """

    customer_id: str = Field(..., min_length=1)
    products: list[RequestedProduct] = Field(..., min_length=1)

    def requested_lines(self) -> list[RequestedLine]:
        return [RequestedLine(id=p.id, quantity=p.quantity) for p in self.products]
