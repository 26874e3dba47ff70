"""Tests for the browser print fallback."""

from decimal import Decimal

import pytest

from receipts.domain.exceptions import ValidationError
from receipts.domain.model.document_kind import CARWASH_PROFILE, COFFEE_PROFILE, DocumentKind
from receipts.domain.model.receipt import LineItem
from receipts.infrastructure.printing.browser_print import (
    BrowserPrintFallback,
    render_receipt_html,
)
from tests.samples import carwash_request, coffee_request


class TestRenderReceiptHtml:

    def test_page_prints_itself_at_58mm(self):
        page = render_receipt_html(coffee_request(), COFFEE_PROFILE)
        assert 'onload="window.print()"' in page
        assert "size: 58mm auto" in page

    def test_coffee_content(self):
        page = render_receipt_html(coffee_request(), COFFEE_PROFILE)
        assert "ONEFAITH<br>COFFEE" in page
        assert "Order: ORD-1a2b3c4d" in page
        assert "Latte (Hot)" in page
        assert "Discount (Senior)" in page
        assert "-P67.00" in page
        assert "P268.00" in page
        assert "Change" not in page
        assert "Visit us again" in page

    def test_carwash_cash_and_customer(self):
        request = carwash_request(customer_name="Ana", customer_phone="0917")
        page = render_receipt_html(request, CARWASH_PROFILE)
        assert "Customer: Ana" in page
        assert "Phone: 0917" in page
        assert "P100.00" in page
        assert "Drive safe" in page

    def test_text_is_escaped(self):
        items = (LineItem("<script>alert(1)</script>", 1, Decimal("200.00")),)
        page = render_receipt_html(carwash_request(items=items), CARWASH_PROFILE)
        assert "<script>" not in page
        assert "&lt;script&gt;" in page

    def test_invalid_request_rejected(self):
        with pytest.raises(ValidationError):
            render_receipt_html(coffee_request(items=()), COFFEE_PROFILE)

    def test_custom_width(self):
        page = render_receipt_html(coffee_request(), COFFEE_PROFILE, width_mm=80)
        assert "size: 80mm auto" in page


class TestBrowserPrintFallback:

    def test_writes_page_and_opens_it(self, tmp_path):
        opened = []
        fallback = BrowserPrintFallback(tmp_path, opener=lambda uri: opened.append(uri) or True)

        location = fallback.print_receipt(carwash_request(), DocumentKind.CARWASH)

        path = tmp_path / "receipt-ORD-9f8e7d6c.html"
        assert location == str(path)
        assert "Detailed Wash (Sedan)" in path.read_text(encoding="utf-8")
        assert opened == [path.resolve().as_uri()]

    def test_unsafe_order_id_is_sanitized(self, tmp_path):
        fallback = BrowserPrintFallback(tmp_path, opener=lambda uri: True)
        location = fallback.print_receipt(
            carwash_request(order_id="../ORD 1"), DocumentKind.CARWASH
        )
        assert location == str(tmp_path / "receipt-___ORD_1.html")

    def test_browser_that_will_not_open_still_returns_path(self, tmp_path):
        fallback = BrowserPrintFallback(tmp_path, opener=lambda uri: False)
        location = fallback.print_receipt(coffee_request(), DocumentKind.COFFEE)
        assert location.endswith("receipt-ORD-1a2b3c4d.html")

    def test_business_name(self, tmp_path):
        fallback = BrowserPrintFallback(tmp_path, business_name="SUDS", opener=lambda uri: True)
        location = fallback.print_receipt(coffee_request(), DocumentKind.COFFEE)
        assert "SUDS<br>COFFEE" in open(location, encoding="utf-8").read()
