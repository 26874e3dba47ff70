"""Cart aggregate: the in-memory order being rung up at the counter.

Owns the line items, the optional flat-rate discount and the cash
arithmetic.  ``to_receipt_request()`` snapshots it into the immutable
ReceiptRequest the receipt encoder consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from receipts.domain.exceptions import ValidationError
from receipts.domain.model.catalog import CatalogItem
from receipts.domain.model.document_kind import DocumentProfile
from receipts.domain.model.receipt import Discount, LineItem, PaymentMethod, ReceiptRequest
from receipts.domain.model.value_objects import Money, Quantity

DISCOUNT_RATE = Decimal("0.20")
MAX_CART_LINES = 50


class DiscountType(Enum):
    SENIOR = "Senior"
    PWD = "PWD"
    EMPLOYEE = "Employee"

    @staticmethod
    def parse(raw: str) -> DiscountType:
        for discount in DiscountType:
            if discount.value.lower() == raw.strip().lower():
                return discount
        choices = ", ".join(d.value for d in DiscountType)
        raise ValidationError(
            f"Unknown discount '{raw}'. Expected one of: {choices}", field="discount"
        )


@dataclass
class CartLine:
    item_id: str
    name: str
    qualifier: str | None
    unit_price: Money  # locked when the line is added
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Cart:
    profile: DocumentProfile
    lines: list[CartLine] = field(default_factory=list)
    discount_type: DiscountType | None = None

    # --- Mutations ------------------------------------------------------------

    def add(self, item: CatalogItem, qualifier: str | None = None, quantity: int = 1) -> CartLine:
        """Add ``quantity`` of an item, merging with an existing identical line."""
        if item.kind is not self.profile.kind:
            raise ValidationError(
                f"'{item.name}' is a {item.kind.value} item, not {self.profile.kind.value}"
            )
        price = item.price_for(qualifier)
        qualifier = item.canonical_qualifier(qualifier)
        qty = Quantity(quantity)

        existing = self._find(item.id, qualifier)
        if existing is not None:
            existing.quantity = Quantity(existing.quantity.value + qty.value)
            return existing

        if len(self.lines) >= MAX_CART_LINES:
            raise ValidationError(f"Maximum {MAX_CART_LINES} lines per cart")
        line = CartLine(
            item_id=item.id,
            name=item.name,
            qualifier=qualifier,
            unit_price=price,
            quantity=qty,
        )
        self.lines.append(line)
        return line

    def set_quantity(self, item_id: str, qualifier: str | None, quantity: int) -> None:
        line = self._require(item_id, qualifier)
        line.quantity = Quantity(quantity)

    def remove(self, item_id: str, qualifier: str | None = None) -> None:
        line = self._require(item_id, qualifier)
        self.lines.remove(line)

    def clear(self) -> None:
        self.lines.clear()
        self.discount_type = None

    def apply_discount(self, discount_type: DiscountType | None) -> None:
        """Select one of the mutually exclusive discounts, or None to clear it."""
        if discount_type is not None and not self.profile.allows_discount:
            raise ValidationError(
                f"Discounts are not enabled for {self.profile.kind.value} orders",
                field="discount",
            )
        self.discount_type = discount_type

    # --- Computed properties --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def discount_amount(self) -> Money:
        if self.discount_type is None:
            return Money.zero()
        return self.subtotal.percent(DISCOUNT_RATE)

    @property
    def total(self) -> Money:
        return self.subtotal - self.discount_amount

    def change_for(self, cash: Money) -> Money:
        if cash < self.total:
            raise ValidationError(
                f"Cash tendered {cash} is less than total {self.total}",
                field="cash_tendered",
            )
        return cash - self.total

    # --- Snapshot -------------------------------------------------------------

    def to_receipt_request(
        self,
        order_id: str,
        timestamp: str,
        payment_method: PaymentMethod,
        cash_tendered: Money | None = None,
        customer_name: str | None = None,
        customer_phone: str | None = None,
    ) -> ReceiptRequest:
        if self.is_empty:
            raise ValidationError("Cart is empty", field="items")

        cash: Decimal | None = None
        change: Decimal | None = None
        if payment_method is not PaymentMethod.CASH and cash_tendered is not None:
            raise ValidationError(
                f"Cash tendered only applies to cash payments, not {payment_method.value}",
                field="cash_tendered",
            )
        if payment_method is PaymentMethod.CASH:
            if cash_tendered is None:
                raise ValidationError(
                    "Cash tendered is required for cash payments", field="cash_tendered"
                )
            if not cash_tendered.is_whole_cents:
                raise ValidationError(
                    f"Cash tendered cannot include fractions of a cent, got {cash_tendered.amount}",
                    field="cash_tendered",
                )
            cash = cash_tendered.amount
            change = self.change_for(cash_tendered).amount

        discount = None
        if self.discount_type is not None:
            discount = Discount(label=self.discount_type.value, amount=self.discount_amount.amount)

        return ReceiptRequest(
            order_id=order_id,
            items=tuple(
                LineItem(
                    label=line.name,
                    qualifier=line.qualifier,
                    quantity=line.quantity.value,
                    unit_price=line.unit_price.amount,
                )
                for line in self.lines
            ),
            subtotal=self.subtotal.amount,
            discount=discount,
            total=self.total.amount,
            payment_method=payment_method,
            cash_tendered=cash,
            change_due=change,
            timestamp=timestamp,
            customer_name=customer_name or None,
            customer_phone=customer_phone or None,
        )

    # --- Internal helpers -----------------------------------------------------

    def _find(self, item_id: str, qualifier: str | None) -> CartLine | None:
        for line in self.lines:
            if line.item_id == item_id and _same_qualifier(line.qualifier, qualifier):
                return line
        return None

    def _require(self, item_id: str, qualifier: str | None) -> CartLine:
        line = self._find(item_id, qualifier)
        if line is None:
            raise ValidationError(f"Item '{item_id}' is not in the cart")
        return line


def _same_qualifier(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()
