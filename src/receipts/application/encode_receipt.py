"""Application service: Encode Receipt use case."""

from __future__ import annotations

import structlog

from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.receipt import ReceiptRequest
from receipts.domain.service.escpos_encoder import EncodeResult, EscPosEncoder

logger = structlog.get_logger()


class EncodeReceiptHandler:

    def __init__(self, encoder: EscPosEncoder) -> None:
        self._encoder = encoder

    def handle(self, request: ReceiptRequest, kind: DocumentKind) -> EncodeResult:
        result = self._encoder.encode(request, kind)
        if result.ok:
            logger.info(
                "receipt_encoded",
                order_id=request.order_id,
                kind=kind.value,
                byte_count=len(result.data or b""),
            )
        else:
            logger.warning(
                "receipt_rejected",
                order_id=request.order_id,
                kind=kind.value,
                field=result.field,
                error=result.error,
            )
        return result
