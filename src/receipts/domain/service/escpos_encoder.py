"""ESC/POS receipt encoder for 58mm thermal printers.

Turns a ReceiptRequest into the raw byte stream a thermal printer
understands.  The encoder is a pure function of its input: it never reads
the clock, never touches a device, and either returns a complete buffer
or a failed EncodeResult naming the offending field.
"""

from __future__ import annotations

from dataclasses import dataclass

from receipts.domain.exceptions import ValidationError
from receipts.domain.model.document_kind import (
    DocumentKind,
    DocumentProfile,
    default_profiles,
)
from receipts.domain.model.receipt import PaymentMethod, ReceiptRequest, ValidatedReceipt
from receipts.domain.model.value_objects import Money

ESC = 0x1B
GS = 0x1D
LF = 0x0A

INIT = bytes([ESC, 0x40])
ALIGN_LEFT = bytes([ESC, 0x61, 0x00])
ALIGN_CENTER = bytes([ESC, 0x61, 0x01])
BOLD_ON = bytes([ESC, 0x45, 0x01])
BOLD_OFF = bytes([ESC, 0x45, 0x00])
SIZE_NORMAL = bytes([GS, 0x21, 0x00])
SIZE_DOUBLE = bytes([GS, 0x21, 0x11])  # double width + double height
SIZE_TALL = bytes([GS, 0x21, 0x01])  # double height only, keeps the column count
CUT_FULL = bytes([GS, 0x56, 0x00])

DEFAULT_LINE_WIDTH = 32  # columns at font A on 58mm paper
DEFAULT_BUSINESS_NAME = "ONEFAITH"
FEED_LINES = 3
MIN_LINE_WIDTH = 16


def feed(lines: int) -> bytes:
    """ESC d n: print the buffer and feed ``lines`` lines."""
    return bytes([ESC, 0x64, max(0, min(lines, 255))])


@dataclass(frozen=True)
class EncodeResult:
    """Outcome of an encode call: the bytes, or why there are none."""

    data: bytes | None = None
    error: str | None = None
    field: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> bytes:
        """Return the bytes, raising ValidationError on failure."""
        if self.error is not None:
            raise ValidationError(self.error, field=self.field)
        return self.data  # type: ignore[return-value]

    @staticmethod
    def success(data: bytes) -> EncodeResult:
        return EncodeResult(data=data)

    @staticmethod
    def failure(exc: ValidationError) -> EncodeResult:
        return EncodeResult(error=str(exc), field=exc.field)


class EscPosEncoder:
    """One encoder for every document kind.

    The kind only selects a DocumentProfile; the byte assembly is shared.
    """

    def __init__(
        self,
        line_width: int = DEFAULT_LINE_WIDTH,
        business_name: str = DEFAULT_BUSINESS_NAME,
        profiles: dict[DocumentKind, DocumentProfile] | None = None,
    ) -> None:
        if line_width < MIN_LINE_WIDTH:
            raise ValidationError(
                f"Line width must be at least {MIN_LINE_WIDTH}, got {line_width}",
                field="line_width",
            )
        self._width = line_width
        self._business_name = business_name
        self._profiles = profiles if profiles is not None else default_profiles()

    @property
    def line_width(self) -> int:
        return self._width

    @property
    def business_name(self) -> str:
        return self._business_name

    def profile_for(self, kind: DocumentKind) -> DocumentProfile:
        try:
            return self._profiles[kind]
        except KeyError:
            raise ValidationError(
                f"No receipt profile configured for {kind.value}", field="kind"
            ) from None

    def encode(self, request: ReceiptRequest, kind: DocumentKind) -> EncodeResult:
        try:
            profile = self.profile_for(kind)
            receipt = request.validate(profile)
        except ValidationError as exc:
            return EncodeResult.failure(exc)
        return EncodeResult.success(self._assemble(receipt, profile))

    # --- Byte assembly --------------------------------------------------------

    def _assemble(self, receipt: ValidatedReceipt, profile: DocumentProfile) -> bytes:
        request = receipt.request
        out = _ByteBuffer()
        out.command(INIT)

        # Header
        out.command(ALIGN_CENTER, SIZE_DOUBLE, BOLD_ON)
        out.line(self._business_name)
        out.line(profile.subtitle)
        out.command(SIZE_NORMAL, BOLD_OFF)
        out.blank()

        out.line(request.timestamp)
        out.command(BOLD_ON)
        out.line(f"Order: {request.order_id}")
        out.command(BOLD_OFF)
        if profile.shows_customer:
            if request.customer_name:
                out.line(f"Customer: {request.customer_name}")
            if request.customer_phone:
                out.line(f"Phone: {request.customer_phone}")
        out.line(self._rule("-"))

        # Items
        out.command(ALIGN_LEFT)
        for line in receipt.lines:
            for text in wrap_text(line.item.display_name, self._width):
                out.line(text)
            out.line(
                self._columns(
                    f"  {line.quantity} x {line.unit_price}", str(line.extension)
                )
            )
        out.line(self._rule("-"))

        # Totals
        out.line(self._columns("Subtotal:", str(receipt.subtotal)))
        discount = request.discount
        if discount is not None and receipt.discount is not None and receipt.discount > Money.zero():
            out.line(self._columns(f"Discount ({discount.label}):", f"-{receipt.discount}"))
        out.command(BOLD_ON, SIZE_TALL)
        out.line(self._columns("TOTAL:", str(receipt.total)))
        out.command(SIZE_NORMAL, BOLD_OFF)
        out.line(self._rule("="))

        # Payment
        out.line(self._columns("Payment:", request.payment_method.value))
        if request.payment_method is PaymentMethod.CASH:
            out.line(self._columns("Cash:", str(receipt.cash_tendered)))
            out.line(self._columns("Change:", str(receipt.change_due)))
        out.blank()

        # Footer
        out.command(ALIGN_CENTER)
        for text in profile.footer:
            out.line(text)
        out.command(feed(FEED_LINES), CUT_FULL)
        return out.getvalue()

    def _rule(self, char: str) -> str:
        return char * self._width

    def _columns(self, left: str, right: str) -> str:
        return pad_columns(left, right, self._width)


_default_encoder = EscPosEncoder()


def encode(request: ReceiptRequest, kind: DocumentKind) -> EncodeResult:
    """Encode with the default 32-column layout and default profiles."""
    return _default_encoder.encode(request, kind)


# --- Text layout helpers ------------------------------------------------------


def pad_columns(left: str, right: str, width: int) -> str:
    """Left-justify ``left`` and right-justify ``right`` on one line.

    The left side is truncated when both do not fit; the amount always
    survives intact.
    """
    if len(left) + len(right) >= width:
        max_left = max(width - len(right) - 1, 0)
        return left[:max_left] + " " + right
    return left + " " * (width - len(left) - len(right)) + right


def wrap_text(text: str, width: int) -> list[str]:
    """Word-wrap ``text`` to ``width`` columns, splitting words that never fit."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        while len(word) > width:
            if current:
                lines.append(current)
                current = ""
            lines.append(word[:width])
            word = word[width:]
        if not word:
            continue
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def to_printer_text(text: str) -> bytes:
    """ASCII bytes for the printer.

    Control characters become spaces so caller text cannot smuggle in
    printer commands; anything outside ASCII prints as ``?``.
    """
    cleaned = "".join(" " if ord(ch) < 0x20 or ord(ch) == 0x7F else ch for ch in text)
    return cleaned.encode("ascii", errors="replace")


class _ByteBuffer:
    """Accumulates one receipt.  A fresh buffer is used per encode call."""

    def __init__(self) -> None:
        self._data = bytearray()

    def command(self, *commands: bytes) -> None:
        for cmd in commands:
            self._data += cmd

    def line(self, text: str) -> None:
        self._data += to_printer_text(text)
        self._data.append(LF)

    def blank(self) -> None:
        self._data.append(LF)

    def getvalue(self) -> bytes:
        return bytes(self._data)
