"""Abstract outbound gateways for getting a receipt onto paper."""

from __future__ import annotations

from abc import ABC, abstractmethod

from receipts.domain.model.document_kind import DocumentKind
from receipts.domain.model.receipt import ReceiptRequest


class PrinterBridge(ABC):
    """Hands encoded ESC/POS bytes to a thermal printer."""

    name: str = "printer"

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Deliver ``data`` verbatim.

        Raises TransmissionError when the bridge is unavailable or the
        hand-off fails.
        """


class PrintFallback(ABC):
    """Prints a receipt without the thermal bridge (e.g. a browser dialog)."""

    name: str = "fallback"

    @abstractmethod
    def print_receipt(self, request: ReceiptRequest, kind: DocumentKind) -> str:
        """Render and print the receipt, returning where it was rendered to."""
