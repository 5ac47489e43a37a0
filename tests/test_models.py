"""Tests for the domain records and request validation."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from order_service.models import CreateOrderRequest, Customer, Order, OrderLine, RequestedLine


def test_request_builds_requested_lines():
    request = CreateOrderRequest(
        customer_id="C1",
        products=[{"id": "P1", "quantity": 2}, {"id": "P2", "quantity": 1}],
    )

    assert request.requested_lines() == [
        RequestedLine(id="P1", quantity=2),
        RequestedLine(id="P2", quantity=1),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        {"customer_id": "C1", "products": []},
        {"customer_id": "", "products": [{"id": "P1", "quantity": 1}]},
        {"customer_id": "C1", "products": [{"id": "P1", "quantity": 0}]},
        {"customer_id": "C1", "products": [{"id": "P1", "quantity": -3}]},
    ],
)
def test_request_rejects_invalid_payloads(payload):
    with pytest.raises(ValidationError):
        CreateOrderRequest(**payload)


def test_requested_line_does_not_enforce_positive_quantity():
    assert RequestedLine(id="P1", quantity=0).quantity == 0


def test_order_total_uses_snapshot_prices():
    order = Order(
        id=uuid4(),
        customer=Customer(id="C1"),
        products=[
            OrderLine(product_id="P1", quantity=3, price=Decimal("10.50")),
            OrderLine(product_id="P2", quantity=1, price=Decimal("0.25")),
        ],
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )

    assert isinstance(order.products, tuple)
    assert order.total == Decimal("31.75")
