"""
Order Service — ドメインエラー

注文作成が業務ルールで拒否された場合に送出する例外。
すべて「リクエスト拒否」として同格で、code と message で区別する。
message はそのまま利用者に表示できる文言にする。
"""


class OrderError(Exception):
    """注文作成を拒否したことを表す基底例外"""

    code = "order_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class CustomerNotFound(OrderError):
    code = "customer_not_found"

    def __init__(self, customer_id: str) -> None:
        super().__init__("Could not find customer with this id.")
        self.customer_id = customer_id


class NoProductsFound(OrderError):
    """要求された商品 ID が1件も解決できなかった"""

    code = "no_products_found"

    def __init__(self) -> None:
        super().__init__("Could not find any products.")


class ProductNotFound(OrderError):
    """一部の商品 ID が存在しない（要求順で最初のものを保持）"""

    code = "product_not_found"

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Could not find the product {product_id}.")
        self.product_id = product_id


class InsufficientStock(OrderError):
    code = "insufficient_stock"

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Ordered quantity of the product {product_id} is not available."
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available
