"""Application service: Preview Receipt use case (query)."""

from __future__ import annotations

from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.receipt import ReceiptRequest
from receipts.domain.service.escpos_encoder import EscPosEncoder
from receipts.domain.service.escpos_preview import Preview, to_preview


class PreviewReceiptHandler:

    def __init__(self, encoder: EscPosEncoder) -> None:
        self._encoder = encoder

    def handle(self, request: ReceiptRequest, kind: DocumentKind) -> Preview:
        """Encode the receipt and decode it back for on-screen inspection.

        Raises ValidationError when the request cannot be encoded.
        """
        data = self._encoder.encode(request, kind).unwrap()
        return to_preview(data)
