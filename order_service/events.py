"""
Order Service — イベント定義

保存・在庫更新の後に発行する事実。過去形で命名し、不変として扱う。
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class OrderCreatedLine(BaseModel):
    product_id: str
    quantity: int
    price: Decimal


class OrderCreated(BaseModel):
    """注文が作成された"""
    order_id: UUID
    customer_id: str
    products: list[OrderCreatedLine]
    total_price: Decimal
    timestamp: datetime


class StockLevel(BaseModel):
    product_id: str
    quantity: int


class InventoryUpdated(BaseModel):
    """注文により在庫数が更新された"""
    products: list[StockLevel]
    timestamp: datetime
