"""Integration tests for the Checkout use case.

Uses the in-memory fake catalog, a fixed clock and a fixed order id.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from receipts.application.checkout import CheckoutHandler, new_order_id
from receipts.application.dto import CartItemSpec, CustomerSpec
from receipts.domain.exceptions import EntityNotFoundError, ValidationError
from receipts.domain.model.cart import DiscountType
from receipts.domain.model.document_kind import CARWASH_PROFILE, COFFEE_PROFILE, DocumentKind
from receipts.domain.model.receipt import PaymentMethod
from receipts.domain.service.escpos_encoder import encode
from tests.fakes import FakeCatalogRepository
from tests.samples import TIMESTAMP, catalog_items


def _handler() -> CheckoutHandler:
    return CheckoutHandler(
        FakeCatalogRepository(catalog_items()),
        clock=lambda: datetime(2025, 3, 14, 9, 30),
        order_ids=lambda: "ORD-0000abcd",
    )


class TestCheckoutHappyPath:

    def test_coffee_order_with_senior_discount(self):
        request = _handler().handle(
            COFFEE_PROFILE,
            [CartItemSpec("Latte", "Hot", 1), CartItemSpec("americano", "cold", 2)],
            PaymentMethod.DIGITAL_WALLET,
            discount=DiscountType.SENIOR,
        )
        assert request.order_id == "ORD-0000abcd"
        assert request.timestamp == TIMESTAMP
        assert request.subtotal == Decimal("335.00")
        assert request.discount.amount == Decimal("67.00")
        assert request.total == Decimal("268.00")
        assert request.items[1].display_name == "Americano (Cold)"

    def test_carwash_cash_order(self):
        request = _handler().handle(
            CARWASH_PROFILE,
            [CartItemSpec("Detailed Wash", "SUV", 1)],
            PaymentMethod.CASH,
            cash_tendered="500",
            customer=CustomerSpec(name="Ana", phone="0917"),
        )
        assert request.total == Decimal("300.00")
        assert request.change_due == Decimal("200.00")
        assert request.customer_name == "Ana"

    def test_checked_out_order_encodes(self):
        request = _handler().handle(
            COFFEE_PROFILE,
            [CartItemSpec("Croissant", None, 2)],
            PaymentMethod.CASH,
            cash_tendered="200",
        )
        assert encode(request, DocumentKind.COFFEE).ok


class TestCheckoutFailures:

    def test_unknown_item(self):
        with pytest.raises(EntityNotFoundError, match="No coffee item named 'Mocha'"):
            _handler().handle(
                COFFEE_PROFILE, [CartItemSpec("Mocha", "Hot", 1)], PaymentMethod.CASH, "500"
            )

    def test_item_of_other_kind_is_not_found(self):
        with pytest.raises(EntityNotFoundError):
            _handler().handle(
                COFFEE_PROFILE,
                [CartItemSpec("Detailed Wash", "Sedan", 1)],
                PaymentMethod.DIGITAL_WALLET,
            )

    def test_cash_short_of_total(self):
        with pytest.raises(ValidationError, match="less than total"):
            _handler().handle(
                CARWASH_PROFILE,
                [CartItemSpec("Detailed Wash", "Sedan", 1)],
                PaymentMethod.CASH,
                cash_tendered="150",
            )

    def test_carwash_discount_rejected(self):
        with pytest.raises(ValidationError, match="Discounts are not enabled"):
            _handler().handle(
                CARWASH_PROFILE,
                [CartItemSpec("Detailed Wash", "Sedan", 1)],
                PaymentMethod.DIGITAL_WALLET,
                discount=DiscountType.PWD,
            )

    def test_no_items(self):
        with pytest.raises(ValidationError, match="Cart is empty"):
            _handler().handle(COFFEE_PROFILE, [], PaymentMethod.DIGITAL_WALLET)


def test_new_order_id_format():
    order_id = new_order_id()
    assert order_id.startswith("ORD-")
    assert len(order_id) == 12
    assert new_order_id() != order_id
