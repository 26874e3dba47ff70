"""Application service: Print Receipt use case.

Encodes the receipt and hands it to the thermal printer bridge.  When the
bridge fails the same request is printed through the fallback path
instead, so a sale never ends without a receipt.
"""

from __future__ import annotations

import structlog

from receipts.application.dto import PrintOutcome
from receipts.domain.exceptions import TransmissionError
from receipts.domain.gateway.printer_bridge import PrintFallback, PrinterBridge
from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.receipt import ReceiptRequest
from receipts.domain.service.escpos_encoder import EscPosEncoder

logger = structlog.get_logger()


class PrintReceiptHandler:

    def __init__(
        self,
        encoder: EscPosEncoder,
        bridge: PrinterBridge,
        fallback: PrintFallback,
    ) -> None:
        self._encoder = encoder
        self._bridge = bridge
        self._fallback = fallback

    def handle(self, request: ReceiptRequest, kind: DocumentKind) -> PrintOutcome:
        """Print a receipt.

        Validation failures raise ValidationError before anything is
        sent.  Transmission failures are logged and routed to the
        fallback.
        """
        data = self._encoder.encode(request, kind).unwrap()
        log = logger.bind(order_id=request.order_id, kind=kind.value)

        try:
            self._bridge.send(data)
        except TransmissionError as exc:
            log.warning("printer_bridge_failed", bridge=self._bridge.name, error=str(exc))
            location = self._fallback.print_receipt(request, kind)
            log.info("receipt_printed", channel=self._fallback.name, location=location)
            return PrintOutcome(
                order_id=request.order_id,
                channel=self._fallback.name,
                used_fallback=True,
                byte_count=len(data),
                location=location,
                error=str(exc),
            )

        log.info("receipt_printed", channel=self._bridge.name, byte_count=len(data))
        return PrintOutcome(
            order_id=request.order_id,
            channel=self._bridge.name,
            used_fallback=False,
            byte_count=len(data),
        )
