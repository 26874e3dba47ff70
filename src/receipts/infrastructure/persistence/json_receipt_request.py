"""Reads and writes ReceiptRequest documents as JSON.

Amounts are stored as strings (``"145.00"``) so they survive the round
trip without passing through float.
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from receipts.domain.exceptions import EntityNotFoundError, ValidationError
from receipts.domain.model.receipt import Discount, LineItem, PaymentMethod, ReceiptRequest


def load_receipt_request(path: Path) -> ReceiptRequest:
    if not path.exists():
        raise EntityNotFoundError(f"Order file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Order file {path} is not valid JSON: {exc}") from exc
    return from_raw(raw)


def save_receipt_request(request: ReceiptRequest, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_raw(request), indent=2) + "\n", encoding="utf-8")


def to_raw(request: ReceiptRequest) -> dict:
    return {
        "order_id": request.order_id,
        "timestamp": request.timestamp,
        "items": [
            {
                "label": item.label,
                "qualifier": item.qualifier,
                "quantity": item.quantity,
                "unit_price": str(item.unit_price),
            }
            for item in request.items
        ],
        "subtotal": str(request.subtotal),
        "discount": (
            {"label": request.discount.label, "amount": str(request.discount.amount)}
            if request.discount is not None
            else None
        ),
        "total": str(request.total),
        "payment_method": request.payment_method.value,
        "cash_tendered": _optional_str(request.cash_tendered),
        "change_due": _optional_str(request.change_due),
        "customer_name": request.customer_name,
        "customer_phone": request.customer_phone,
    }


def from_raw(raw: dict) -> ReceiptRequest:
    _require_object("order", raw)
    try:
        discount_raw = raw.get("discount")
        if discount_raw:
            _require_object("discount", discount_raw)
        items_raw = raw["items"]
        if not isinstance(items_raw, list):
            raise ValidationError(
                f"items must be a list, got {type(items_raw).__name__}", field="items"
            )
        for index, item in enumerate(items_raw):
            _require_object(f"items[{index}]", item)
        return ReceiptRequest(
            order_id=raw["order_id"],
            timestamp=raw["timestamp"],
            items=tuple(
                LineItem(
                    label=item["label"],
                    qualifier=item.get("qualifier"),
                    quantity=item["quantity"],
                    unit_price=_decimal("unit_price", item["unit_price"]),
                )
                for item in items_raw
            ),
            subtotal=_decimal("subtotal", raw["subtotal"]),
            discount=(
                Discount(
                    label=discount_raw["label"],
                    amount=_decimal("discount.amount", discount_raw["amount"]),
                )
                if discount_raw
                else None
            ),
            total=_decimal("total", raw["total"]),
            payment_method=PaymentMethod.parse(raw["payment_method"]),
            cash_tendered=_optional_decimal("cash_tendered", raw.get("cash_tendered")),
            change_due=_optional_decimal("change_due", raw.get("change_due")),
            customer_name=raw.get("customer_name"),
            customer_phone=raw.get("customer_phone"),
        )
    except KeyError as exc:
        raise ValidationError(f"Order document is missing {exc}", field=str(exc).strip("'")) from exc
    except (TypeError, AttributeError) as exc:
        raise ValidationError(f"Order document is malformed: {exc}") from exc


# --- Internal helpers -----------------------------------------------------------


def _require_object(field_name: str, value: object) -> None:
    if not isinstance(value, dict):
        raise ValidationError(
            f"{field_name} must be a JSON object, got {type(value).__name__}", field=field_name
        )


def _decimal(field_name: str, value: object) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field_name}: invalid amount {value!r}", field=field_name) from exc


def _optional_decimal(field_name: str, value: object) -> Decimal | None:
    return None if value is None else _decimal(field_name, value)


def _optional_str(value: Decimal | None) -> str | None:
    return None if value is None else str(value)
