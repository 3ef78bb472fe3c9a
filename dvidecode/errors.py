from __future__ import annotations

from typing import Optional


class DecodeError(ValueError):
    """Base class for every failure raised while decoding a DVI buffer."""


class OutOfBounds(DecodeError):
    """A field or payload read would run past the end of the buffer."""

    def __init__(self, offset: int, needed: int, available: int) -> None:
        self.offset = offset
        self.needed = needed
        self.available = available
        # Filled in by the disassembler once the enclosing instruction is known.
        self.instruction_offset: Optional[int] = None
        self.opcode: Optional[int] = None
        super().__init__(offset, needed, available)

    def __str__(self) -> str:
        message = (
            f"Insufficient bytes at offset {self.offset}: "
            f"need {self.needed}, have {self.available} remaining"
        )
        if self.instruction_offset is not None:
            message += f" (instruction at offset {self.instruction_offset}"
            if self.opcode is not None:
                message += f", opcode {self.opcode}"
            message += ")"
        return message


class UnknownOpcode(DecodeError):
    """The leading byte of an instruction is not in the dispatch table."""

    def __init__(self, opcode: int, offset: int) -> None:
        self.opcode = opcode
        self.offset = offset
        super().__init__(opcode, offset)

    def __str__(self) -> str:
        return f"Unknown opcode {self.opcode} at offset {self.offset}"


__all__ = ["DecodeError", "OutOfBounds", "UnknownOpcode"]
