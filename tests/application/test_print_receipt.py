"""Integration tests for the Print, Encode and Preview use cases.

Bridges and the fallback are in-memory recorders.
"""

from decimal import Decimal

import pytest

from receipts.application.encode_receipt import EncodeReceiptHandler
from receipts.application.preview_receipt import PreviewReceiptHandler
from receipts.application.print_receipt import PrintReceiptHandler
from receipts.domain.exceptions import ValidationError
from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.service.escpos_encoder import CUT_FULL, INIT, EscPosEncoder
from tests.fakes import FailingBridge, RecordingBridge, RecordingFallback
from tests.samples import carwash_request, coffee_request


def _setup(bridge=None):
    bridge = bridge or RecordingBridge()
    fallback = RecordingFallback()
    handler = PrintReceiptHandler(EscPosEncoder(), bridge, fallback)
    return handler, bridge, fallback


class TestPrintThroughBridge:

    def test_sends_encoded_bytes(self):
        handler, bridge, fallback = _setup()
        outcome = handler.handle(coffee_request(), DocumentKind.COFFEE)

        assert len(bridge.sent) == 1
        data = bridge.sent[0]
        assert data.startswith(INIT)
        assert data.endswith(CUT_FULL)
        assert fallback.printed == []

        assert outcome.channel == "recording"
        assert not outcome.used_fallback
        assert outcome.byte_count == len(data)
        assert outcome.order_id == "ORD-1a2b3c4d"

    def test_same_bytes_as_encode_use_case(self):
        handler, bridge, _ = _setup()
        handler.handle(carwash_request(), DocumentKind.CARWASH)
        encoded = EncodeReceiptHandler(EscPosEncoder()).handle(
            carwash_request(), DocumentKind.CARWASH
        )
        assert bridge.sent == [encoded.data]


class TestPrintFallback:

    def test_bridge_failure_routes_to_fallback(self):
        handler, bridge, fallback = _setup(FailingBridge("RawBT not installed"))
        outcome = handler.handle(carwash_request(), DocumentKind.CARWASH)

        assert bridge.attempts == 1
        assert fallback.printed == [(carwash_request(), DocumentKind.CARWASH)]
        assert outcome.used_fallback
        assert outcome.channel == "browser"
        assert outcome.location == "memory://ORD-9f8e7d6c"
        assert outcome.error == "RawBT not installed"

    def test_invalid_request_sends_nothing(self):
        handler, bridge, fallback = _setup()
        with pytest.raises(ValidationError) as info:
            handler.handle(coffee_request(items=()), DocumentKind.COFFEE)
        assert info.value.field == "items"
        assert bridge.sent == []
        assert fallback.printed == []

    def test_invalid_request_skips_fallback_too(self):
        handler, bridge, fallback = _setup(FailingBridge())
        with pytest.raises(ValidationError):
            handler.handle(carwash_request(cash_tendered=None), DocumentKind.CARWASH)
        assert bridge.attempts == 0
        assert fallback.printed == []


class TestEncodeUseCase:

    def test_success(self):
        result = EncodeReceiptHandler(EscPosEncoder()).handle(coffee_request(), DocumentKind.COFFEE)
        assert result.ok
        assert result.error is None

    def test_failure_is_returned_not_raised(self):
        result = EncodeReceiptHandler(EscPosEncoder()).handle(
            coffee_request(total=Decimal("1.00")), DocumentKind.COFFEE
        )
        assert not result.ok
        assert result.data is None
        assert result.field == "total"


class TestPreviewUseCase:

    def test_preview_lines(self):
        preview = PreviewReceiptHandler(EscPosEncoder()).handle(
            coffee_request(), DocumentKind.COFFEE
        )
        texts = [line.text for line in preview.lines]
        assert texts[:2] == ["ONEFAITH", "COFFEE"]
        assert preview.cut

    def test_preview_rejects_invalid_request(self):
        with pytest.raises(ValidationError, match="at least one line item"):
            PreviewReceiptHandler(EscPosEncoder()).handle(
                coffee_request(items=()), DocumentKind.COFFEE
            )
