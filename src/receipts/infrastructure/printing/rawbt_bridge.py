"""RawBT bridge: forwards ESC/POS bytes to the RawBT Android app.

RawBT (ru.a402d.rawbtprinter) owns the Bluetooth connection to the
printer.  It is reached through an intent URL whose host part carries the
base64-encoded receipt; the URL is handed to a launcher, by default the
platform browser.  A successful launch does not guarantee the printer
actually printed.
"""

from __future__ import annotations

import base64
import webbrowser
from typing import Callable

import structlog

from receipts.domain.exceptions import TransmissionError
from receipts.domain.gateway.printer_bridge import PrinterBridge

RAWBT_PACKAGE = "ru.a402d.rawbtprinter"

INSTALL_INSTRUCTIONS = """\
To use ESC/POS printing:

1. Install RawBT from Google Play Store
2. Open RawBT and pair with your Bluetooth printer
3. Set your printer as default in RawBT settings
4. Return here and try printing again

If RawBT fails to open, the receipt is printed through the browser instead."""

logger = structlog.get_logger()


def rawbt_intent_url(data: bytes) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"intent://{payload}#Intent;scheme=rawbt;package={RAWBT_PACKAGE};end"


class RawBTBridge(PrinterBridge):

    name = "rawbt"

    def __init__(
        self,
        launcher: Callable[[str], bool] = webbrowser.open,
        enabled: bool = True,
    ) -> None:
        self._launcher = launcher
        self._enabled = enabled

    def send(self, data: bytes) -> None:
        if not self._enabled:
            raise TransmissionError("RawBT bridge is disabled")
        if not data:
            raise TransmissionError("Refusing to send an empty receipt")

        url = rawbt_intent_url(data)
        try:
            launched = self._launcher(url)
        except webbrowser.Error as exc:
            raise TransmissionError(f"Failed to launch RawBT: {exc}") from exc

        if not launched:
            raise TransmissionError(
                "Failed to launch RawBT. Make sure the app is installed."
            )
        logger.debug("rawbt_intent_launched", byte_count=len(data), url_length=len(url))
