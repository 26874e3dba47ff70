"""Browser print fallback: renders the receipt as a 58mm HTML page.

This path is independent from the ESC/POS encoder and shares only the
ReceiptRequest.  The page calls ``window.print()`` on load so opening it
brings up the platform print dialog.
"""

from __future__ import annotations

import re
import webbrowser
from html import escape
from pathlib import Path
from typing import Callable

import structlog

from receipts.domain.exceptions import ValidationError
from receipts.domain.gateway.printer_bridge import PrintFallback
from receipts.domain.model.document_kind import DocumentKind, DocumentProfile, default_profiles
from receipts.domain.model.receipt import PaymentMethod, ReceiptRequest

PAGE_WIDTH_MM = 58

logger = structlog.get_logger()

_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
  @media print {{
    @page {{ size: {width}mm auto; margin: 0; }}
    html, body {{ margin: 0 !important; padding: 0 !important; }}
  }}
  html, body {{ margin: 0; padding: 0; }}
  .print-root {{ width: {width}mm; font-family: monospace; font-size: 12px; }}
  .center {{ text-align: center; }}
  .row {{ display: flex; justify-content: space-between; }}
  .header {{ font-size: 18px; font-weight: bold; }}
  .total {{ font-weight: bold; font-size: 14px; }}
  .qty {{ padding-left: 1em; }}
  hr {{ border: 0; border-top: 1px dashed #000; }}
</style>
</head>
<body onload="window.print()">
<div class="print-root">
{body}
</div>
</body>
</html>
"""


def render_receipt_html(
    request: ReceiptRequest,
    profile: DocumentProfile,
    business_name: str = "ONEFAITH",
    width_mm: int = PAGE_WIDTH_MM,
) -> str:
    """Render a receipt page.  Raises ValidationError for malformed requests."""
    receipt = request.validate(profile)
    parts: list[str] = [
        f'<div class="center header">{escape(business_name)}<br>{escape(profile.subtitle)}</div>',
        f'<div class="center">{escape(request.timestamp)}</div>',
        f'<div class="center"><b>Order: {escape(request.order_id)}</b></div>',
    ]
    if profile.shows_customer:
        if request.customer_name:
            parts.append(f'<div class="center">Customer: {escape(request.customer_name)}</div>')
        if request.customer_phone:
            parts.append(f'<div class="center">Phone: {escape(request.customer_phone)}</div>')
    parts.append("<hr>")

    for line in receipt.lines:
        parts.append(f"<div>{escape(line.item.display_name)}</div>")
        parts.append(
            _row(f'<span class="qty">{line.quantity} x {line.unit_price}</span>', str(line.extension))
        )
    parts.append("<hr>")

    parts.append(_row("Subtotal", str(receipt.subtotal)))
    if request.discount is not None and receipt.discount is not None and receipt.discount.amount > 0:
        parts.append(_row(f"Discount ({escape(request.discount.label)})", f"-{receipt.discount}"))
    parts.append(_row("TOTAL", str(receipt.total), css="row total"))
    parts.append("<hr>")

    parts.append(_row("Payment", escape(request.payment_method.value)))
    if request.payment_method is PaymentMethod.CASH:
        parts.append(_row("Cash", str(receipt.cash_tendered)))
        parts.append(_row("Change", str(receipt.change_due)))

    parts.append('<div class="center">' + "<br>".join(escape(t) for t in profile.footer) + "</div>")

    return _PAGE.format(
        title=escape(f"Receipt {request.order_id}"),
        width=width_mm,
        body="\n".join(parts),
    )


class BrowserPrintFallback(PrintFallback):

    name = "browser"

    def __init__(
        self,
        output_dir: Path,
        profiles: dict[DocumentKind, DocumentProfile] | None = None,
        business_name: str = "ONEFAITH",
        opener: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self._output_dir = output_dir
        self._profiles = profiles if profiles is not None else default_profiles()
        self._business_name = business_name
        self._opener = opener

    def print_receipt(self, request: ReceiptRequest, kind: DocumentKind) -> str:
        profile = self._profiles.get(kind)
        if profile is None:
            raise ValidationError(f"No receipt profile configured for {kind.value}", field="kind")

        page = render_receipt_html(request, profile, self._business_name)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / f"receipt-{_safe_name(request.order_id)}.html"
        path.write_text(page, encoding="utf-8")

        if not self._opener(path.resolve().as_uri()):
            logger.warning("browser_open_failed", path=str(path))
        return str(path)


def _row(left: str, right: str, css: str = "row") -> str:
    return f'<div class="{css}"><span>{left}</span><span>{right}</span></div>'


def _safe_name(order_id: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]", "_", order_id)
