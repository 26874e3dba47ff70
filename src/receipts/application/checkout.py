"""Application service: Checkout use case.

Resolves the requested items against the catalog, rings them up in a
Cart, and snapshots the result into a ReceiptRequest ready to encode.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable

import structlog

from receipts.application.dto import CartItemSpec, CustomerSpec
from receipts.domain.exceptions import EntityNotFoundError
from receipts.domain.model.cart import Cart, DiscountType
from receipts.domain.model.document_kind import DocumentProfile
from receipts.domain.model.receipt import PaymentMethod, ReceiptRequest
from receipts.domain.model.value_objects import Money
from receipts.domain.repository.catalog_repository import CatalogRepository

TIMESTAMP_FORMAT = "%Y-%m-%d %I:%M %p"

logger = structlog.get_logger()


def new_order_id() -> str:
    return f"ORD-{uuid.uuid4().hex[:8]}"


class CheckoutHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        clock: Callable[[], datetime] = datetime.now,
        order_ids: Callable[[], str] = new_order_id,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._clock = clock
        self._order_ids = order_ids

    def handle(
        self,
        profile: DocumentProfile,
        item_specs: list[CartItemSpec],
        payment_method: PaymentMethod,
        cash_tendered: str | None = None,
        discount: DiscountType | None = None,
        customer: CustomerSpec | None = None,
    ) -> ReceiptRequest:
        """Ring up an order and return its receipt request.

        Steps:
        1. Resolve each item name to a CatalogItem of the right kind.
        2. Add it to a Cart (price locked from the catalog).
        3. Apply the discount and cash arithmetic.
        4. Stamp the order id and timestamp.
        """
        cart = Cart(profile=profile)

        for spec in item_specs:
            item = self._catalog_repo.get_by_name(spec.name, profile.kind)
            if item is None:
                raise EntityNotFoundError(
                    f"No {profile.kind.value} item named '{spec.name}'"
                )
            cart.add(item, spec.qualifier, spec.quantity)

        cart.apply_discount(discount)

        cash = Money.of(cash_tendered) if cash_tendered is not None else None
        customer = customer or CustomerSpec()
        request = cart.to_receipt_request(
            order_id=self._order_ids(),
            timestamp=self._clock().strftime(TIMESTAMP_FORMAT),
            payment_method=payment_method,
            cash_tendered=cash,
            customer_name=customer.name,
            customer_phone=customer.phone,
        )

        logger.info(
            "order_checked_out",
            order_id=request.order_id,
            kind=profile.kind.value,
            lines=len(request.items),
            total=str(cart.total),
            payment=payment_method.value,
        )
        return request
