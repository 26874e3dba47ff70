"""Receipt request: the order summary handed to the receipt encoder.

A ReceiptRequest is a plain snapshot built by the caller from its cart
state.  It holds raw Decimals and ints rather than value objects so that a
malformed request can still be constructed and then rejected field by
field by ``validate()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from receipts.domain.exceptions import ValidationError
from receipts.domain.model.document_kind import DocumentProfile
from receipts.domain.model.value_objects import Money, Quantity


class PaymentMethod(Enum):
    CASH = "Cash"
    DIGITAL_WALLET = "GCash"

    @staticmethod
    def parse(raw: str) -> PaymentMethod:
        if not isinstance(raw, str):
            raise ValidationError(
                f"payment method must be a string, got {raw!r}", field="payment_method"
            )
        normalized = raw.strip().lower()
        for method in PaymentMethod:
            if normalized in (method.value.lower(), method.name.lower()):
                return method
        raise ValidationError(
            f"Unknown payment method '{raw}'. Expected Cash or GCash",
            field="payment_method",
        )


@dataclass(frozen=True)
class LineItem:
    label: str
    quantity: int
    unit_price: Decimal
    qualifier: str | None = None  # temperature option or vehicle type

    @property
    def display_name(self) -> str:
        if self.qualifier:
            return f"{self.label} ({self.qualifier})"
        return self.label


@dataclass(frozen=True)
class Discount:
    label: str  # e.g. "Senior", "PWD", "Employee"
    amount: Decimal


@dataclass(frozen=True)
class ReceiptRequest:
    order_id: str
    items: tuple[LineItem, ...]
    subtotal: Decimal
    total: Decimal
    payment_method: PaymentMethod
    timestamp: str  # pre-formatted by the caller
    discount: Discount | None = None
    cash_tendered: Decimal | None = None
    change_due: Decimal | None = None
    customer_name: str | None = None
    customer_phone: str | None = None

    def validate(self, profile: DocumentProfile) -> ValidatedReceipt:
        """Check every field and return the amounts as value objects.

        Raises ValidationError naming the first offending field.
        """
        if not _is_text(self.order_id):
            raise ValidationError("order id is required", field="order_id")
        if not _is_text(self.timestamp):
            raise ValidationError("timestamp is required", field="timestamp")
        for name in ("customer_name", "customer_phone"):
            if not isinstance(getattr(self, name), (str, type(None))):
                raise ValidationError(f"{name} must be text", field=name)
        if not isinstance(self.items, (tuple, list)):
            raise ValidationError("line items must be a sequence", field="items")
        if not self.items:
            raise ValidationError("receipt must contain at least one line item", field="items")

        lines = [_validate_line(i, item) for i, item in enumerate(self.items)]

        subtotal = _money("subtotal", self.subtotal)
        extensions_sum = Money.zero()
        for line in lines:
            extensions_sum = extensions_sum + line.extension
        if subtotal != extensions_sum:
            raise ValidationError(
                f"subtotal {subtotal} does not match the sum of line items {extensions_sum}",
                field="subtotal",
            )

        discount_amount = Money.zero()
        if self.discount is not None:
            if not profile.allows_discount:
                raise ValidationError(
                    f"discounts are not enabled for {profile.kind.value} receipts",
                    field="discount",
                )
            if not isinstance(self.discount, Discount):
                raise ValidationError("discount must have a label and an amount", field="discount")
            if not _is_text(self.discount.label):
                raise ValidationError("discount label is required", field="discount.label")
            discount_amount = _money("discount.amount", self.discount.amount)
            if discount_amount > subtotal:
                raise ValidationError(
                    f"discount {discount_amount} exceeds subtotal {subtotal}",
                    field="discount.amount",
                )

        total = _money("total", self.total)
        if total != subtotal - discount_amount:
            raise ValidationError(
                f"total {total} must equal subtotal {subtotal} less discount {discount_amount}",
                field="total",
            )

        if not isinstance(self.payment_method, PaymentMethod):
            raise ValidationError("payment method is required", field="payment_method")

        cash: Money | None = None
        change: Money | None = None
        if self.payment_method is PaymentMethod.CASH:
            if self.cash_tendered is None:
                raise ValidationError(
                    "cash tendered is required for cash payments", field="cash_tendered"
                )
            cash = _money("cash_tendered", self.cash_tendered)
            if cash < total:
                raise ValidationError(
                    f"cash tendered {cash} does not cover total {total}",
                    field="cash_tendered",
                )
            change = cash - total
            if self.change_due is not None and _money("change_due", self.change_due) != change:
                raise ValidationError(
                    f"change due must equal cash tendered less total ({change})",
                    field="change_due",
                )
        else:
            if self.cash_tendered is not None:
                raise ValidationError(
                    f"cash tendered only applies to cash payments, not {self.payment_method.value}",
                    field="cash_tendered",
                )
            if self.change_due is not None:
                raise ValidationError(
                    f"change due only applies to cash payments, not {self.payment_method.value}",
                    field="change_due",
                )

        return ValidatedReceipt(
            request=self,
            lines=tuple(lines),
            subtotal=subtotal,
            discount=discount_amount if self.discount is not None else None,
            total=total,
            cash_tendered=cash,
            change_due=change,
        )


@dataclass(frozen=True)
class ValidatedLine:
    item: LineItem
    quantity: Quantity
    unit_price: Money

    @property
    def extension(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class ValidatedReceipt:
    """A request whose amounts have been checked and converted to Money."""

    request: ReceiptRequest
    lines: tuple[ValidatedLine, ...]
    subtotal: Money
    discount: Money | None
    total: Money
    cash_tendered: Money | None
    change_due: Money | None


# --- Internal helpers ---------------------------------------------------------


def _validate_line(index: int, item: LineItem) -> ValidatedLine:
    prefix = f"items[{index}]"
    if not isinstance(item, LineItem):
        raise ValidationError(f"line item must be a LineItem, got {item!r}", field=prefix)
    if not _is_text(item.label):
        raise ValidationError("line item label is required", field=f"{prefix}.label")
    if not isinstance(item.qualifier, (str, type(None))):
        raise ValidationError(
            f"line item qualifier must be text, got {item.qualifier!r}",
            field=f"{prefix}.qualifier",
        )
    if not isinstance(item.quantity, int) or isinstance(item.quantity, bool) or item.quantity < 1:
        raise ValidationError(
            f"line item quantity must be >= 1, got {item.quantity!r}",
            field=f"{prefix}.quantity",
        )
    return ValidatedLine(
        item=item,
        quantity=Quantity(item.quantity),
        unit_price=_money(f"{prefix}.unit_price", item.unit_price),
    )


def _money(field_name: str, value: Decimal) -> Money:
    try:
        money = Money(value)
    except ValidationError as exc:
        raise ValidationError(f"{field_name}: {exc}", field=field_name) from exc
    if not money.is_whole_cents:
        raise ValidationError(
            f"{field_name}: amount {value} has fractions of a cent", field=field_name
        )
    return money


def _is_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())
