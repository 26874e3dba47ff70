"""Bridge for printers exposed as a character device (e.g. /dev/usb/lp0)."""

from __future__ import annotations

import threading
from pathlib import Path

import structlog

from receipts.domain.exceptions import TransmissionError
from receipts.domain.gateway.printer_bridge import PrinterBridge

logger = structlog.get_logger()


class DevicePrinterBridge(PrinterBridge):

    name = "device"

    def __init__(self, device_path: Path) -> None:
        self._device_path = device_path
        # one receipt at a time; interleaved writes garble both
        self._lock = threading.Lock()

    def send(self, data: bytes) -> None:
        with self._lock:
            try:
                with open(self._device_path, "wb") as device:
                    device.write(data)
                    device.flush()
            except OSError as exc:
                raise TransmissionError(
                    f"Cannot write to printer device {self._device_path}: {exc}"
                ) from exc
        logger.debug("device_write_complete", device=str(self._device_path), byte_count=len(data))
