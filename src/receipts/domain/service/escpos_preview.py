"""Best-effort decoder that turns ESC/POS bytes back into styled lines.

Used to show a receipt on screen before it is printed.  Only the commands
the encoder emits (plus ESC ! print mode) are understood; anything else is
skipped.  The result describes structure and emphasis, not pixels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ESC = 0x1B
GS = 0x1D
LF = 0x0A


class Align(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class PreviewSpan:
    """A run of characters printed with the same emphasis."""

    text: str
    bold: bool = False
    width: int = 1  # character width multiplier
    height: int = 1  # character height multiplier


@dataclass(frozen=True)
class PreviewLine:
    spans: tuple[PreviewSpan, ...]
    align: Align = Align.LEFT

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    @property
    def bold(self) -> bool:
        return any(span.bold for span in self.spans)

    @property
    def double_size(self) -> bool:
        return any(span.width > 1 or span.height > 1 for span in self.spans)


@dataclass(frozen=True)
class Preview:
    lines: tuple[PreviewLine, ...]
    cut: bool = False

    def render(self, width: int = 32) -> str:
        """Plain-text rendering for terminals, alignment applied."""
        rendered: list[str] = []
        for line in self.lines:
            text = line.text
            if line.align is Align.CENTER:
                text = text.center(width).rstrip()
            elif line.align is Align.RIGHT:
                text = text.rjust(width)
            rendered.append(text)
        if self.cut:
            rendered.append("- " * (width // 2))
        return "\n".join(rendered)


@dataclass
class _PrinterState:
    align: Align = Align.LEFT
    bold: bool = False
    width: int = 1
    height: int = 1
    spans: list[PreviewSpan] = field(default_factory=list)
    pending: str = ""

    def reset(self) -> None:
        self.flush_span()
        self.align = Align.LEFT
        self.bold = False
        self.width = 1
        self.height = 1

    def flush_span(self) -> None:
        if self.pending:
            self.spans.append(PreviewSpan(self.pending, self.bold, self.width, self.height))
            self.pending = ""

    def take_line(self) -> PreviewLine:
        self.flush_span()
        line = PreviewLine(spans=tuple(self.spans), align=self.align)
        self.spans = []
        return line


_ALIGNMENTS = {0: Align.LEFT, 1: Align.CENTER, 2: Align.RIGHT, 48: Align.LEFT, 49: Align.CENTER, 50: Align.RIGHT}


def to_preview(data: bytes) -> Preview:
    """Decode an ESC/POS byte stream into lines and emphasis spans."""
    state = _PrinterState()
    lines: list[PreviewLine] = []
    cut = False
    size = len(data)
    i = 0

    while i < size:
        byte = data[i]

        if byte == ESC and i + 1 < size:
            cmd = data[i + 1]
            arg = data[i + 2] if i + 2 < size else None
            if cmd == 0x40:  # ESC @ initialize
                state.reset()
                i += 2
            elif cmd == 0x61 and arg is not None:  # ESC a n alignment
                state.align = _ALIGNMENTS.get(arg, state.align)
                i += 3
            elif cmd == 0x45 and arg is not None:  # ESC E n emphasis
                state.flush_span()
                state.bold = bool(arg & 0x01)
                i += 3
            elif cmd == 0x21 and arg is not None:  # ESC ! n print mode
                state.flush_span()
                state.bold = bool(arg & 0x08)
                state.height = 2 if arg & 0x10 else 1
                state.width = 2 if arg & 0x20 else 1
                i += 3
            elif cmd == 0x64 and arg is not None:  # ESC d n feed
                lines.append(state.take_line())
                lines.extend(PreviewLine(spans=(), align=state.align) for _ in range(max(arg - 1, 0)))
                i += 3
            else:
                i += 2
            continue

        if byte == GS and i + 1 < size:
            cmd = data[i + 1]
            arg = data[i + 2] if i + 2 < size else None
            if cmd == 0x21 and arg is not None:  # GS ! n character size
                state.flush_span()
                state.width = (arg >> 4 & 0x07) + 1
                state.height = (arg & 0x07) + 1
                i += 3
            elif cmd == 0x56:  # GS V m [n] cut
                cut = True
                # function B (m = 65/66) carries a feed amount
                i += 4 if arg in (0x41, 0x42) else 3
            else:
                i += 2
            continue

        if byte == LF:
            lines.append(state.take_line())
        elif 0x20 <= byte <= 0x7E:
            state.pending += chr(byte)
        i += 1

    if state.pending or state.spans:
        lines.append(state.take_line())

    return Preview(lines=tuple(lines), cut=cut)
