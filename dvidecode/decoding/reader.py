from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..coding import Decoder
from ..config import DecoderConfig


@dataclass(frozen=True)
class LayoutEntry:
    key: str
    kind: str
    meta: Dict[str, object]


@dataclass
class StreamCtx:
    """
    Decoder state for a single ``disassemble`` call.

    Wraps the scalar ``Decoder`` for the whole buffer and carries the link
    bookkeeping: how many instructions were emitted so far, and the output
    indices of the most recent ``bop`` and ``post``. Operand layouts are only
    collected when ``record_layout`` is set.
    """

    data: bytes
    config: DecoderConfig = field(default_factory=DecoderConfig)
    record_layout: bool = False
    instruction_count: int = 0
    last_bop: Optional[int] = None
    last_post: Optional[int] = None
    start: int = 0
    decoder: Decoder = field(init=False)
    _layout: List[LayoutEntry] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.decoder = Decoder(self.data)

    @property
    def pos(self) -> int:
        return self.decoder.get_pos()

    def has_more(self) -> bool:
        return self.decoder.has_more()

    def begin_instruction(self) -> int:
        self.start = self.pos
        self._layout = []
        return self.start

    def finish_instruction(self) -> None:
        self.instruction_count += 1

    def length(self) -> int:
        return self.pos - self.start

    def record_operand(self, key: str, kind: str, **meta) -> None:
        if not self.record_layout:
            return
        self._layout.append(LayoutEntry(key=key, kind=kind, meta=dict(meta)))

    def _record(self, key: str, kind: str, start: int, **meta) -> None:
        meta.setdefault("offset", start - self.start)
        meta.setdefault("length_bytes", self.pos - start)
        self.record_operand(key, kind, **meta)

    def read_opcode(self) -> int:
        return self.decoder.unsigned_byte()

    def read_unsigned(self, key: str, width: int) -> int:
        start = self.pos
        value = self.decoder.unsigned(width)
        self._record(key, f"u{8 * width}", start, width=width)
        return value

    def read_signed(self, key: str, width: int) -> int:
        start = self.pos
        if self.config.legacy_unsigned and width < 4:
            value = self.decoder.unsigned(width)
        else:
            value = self.decoder.signed(width)
        self._record(key, f"s{8 * width}", start, width=width)
        return value

    def read_payload(self, key: str, count: int) -> bytes:
        start = self.pos
        value = self.decoder.raw(count)
        self._record(key, "bytes", start)
        return value

    def skip_run(self, key: str, value: int) -> int:
        start = self.pos
        while self.decoder.has_more() and self.decoder.peek(1) == value:
            self.decoder.unsigned_byte()
        skipped = self.pos - start
        if skipped:
            self._record(key, "fill", start, value=value)
        return skipped

    def snapshot_layout(self) -> tuple[LayoutEntry, ...]:
        return tuple(self._layout)
