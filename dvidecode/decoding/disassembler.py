from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterator, List, Optional

from ..config import DecoderConfig, load_decoder_config
from ..errors import OutOfBounds
from .decode_map import decode_opcode, opcode_name
from .instr import Instruction
from .reader import LayoutEntry, StreamCtx


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Located:
    """A decoded instruction together with where it came from in the buffer."""

    offset: int
    length: int
    opcode: int
    instruction: Instruction
    layout: tuple[LayoutEntry, ...] = ()

    @property
    def name(self) -> str:
        return opcode_name(self.opcode)


def _iter_located(
    data: bytes, config: DecoderConfig, record_layout: bool
) -> Iterator[Located]:
    ctx = StreamCtx(data=bytes(data), config=config, record_layout=record_layout)
    while ctx.has_more():
        start = ctx.begin_instruction()
        opcode = ctx.read_opcode()
        try:
            instruction = decode_opcode(opcode, ctx)
        except OutOfBounds as exc:
            exc.instruction_offset = start
            exc.opcode = opcode
            raise
        located = Located(
            offset=start,
            length=ctx.length(),
            opcode=opcode,
            instruction=instruction,
            layout=ctx.snapshot_layout(),
        )
        if config.trace:
            logger.debug(
                "#%d @%d %s %r",
                ctx.instruction_count,
                start,
                located.name,
                instruction,
            )
        ctx.finish_instruction()
        yield located


def disassemble_with_layout(
    data: bytes, config: Optional[DecoderConfig] = None
) -> List[Located]:
    """Decode ``data`` into located instructions with per-operand layouts."""

    if config is None:
        config = load_decoder_config()
    result = list(_iter_located(data, config, record_layout=True))
    logger.debug("Decoded %d instructions from %d bytes", len(result), len(data))
    return result


def disassemble(
    data: bytes, config: Optional[DecoderConfig] = None
) -> List[Instruction]:
    """
    Decode a complete DVI buffer into its instruction sequence.

    Link fields (``Bop.previous``, ``Post.last_bop``, ``PostPost.post``) are
    indices into the returned list. Raises ``OutOfBounds`` or
    ``UnknownOpcode`` on the first malformed instruction.
    """

    if config is None:
        config = load_decoder_config()
    result = [
        located.instruction
        for located in _iter_located(data, config, record_layout=False)
    ]
    logger.debug("Decoded %d instructions from %d bytes", len(result), len(data))
    return result


__all__ = ["Located", "disassemble", "disassemble_with_layout"]
