"""Order Service — 注文作成ユースケースと、その永続化アダプタ。"""

from .errors import (
    CustomerNotFound,
    InsufficientStock,
    NoProductsFound,
    OrderError,
    ProductNotFound,
)
from .models import (
    CreateOrderRequest,
    Customer,
    Order,
    OrderLine,
    Product,
    ProductQuantityUpdate,
    RequestedLine,
)
from .workflow import CreateOrderWorkflow

__version__ = "0.1.0"

__all__ = [
    "CreateOrderRequest",
    "CreateOrderWorkflow",
    "Customer",
    "CustomerNotFound",
    "InsufficientStock",
    "NoProductsFound",
    "Order",
    "OrderError",
    "OrderLine",
    "Product",
    "ProductNotFound",
    "ProductQuantityUpdate",
    "RequestedLine",
]
