"""Text rendering of decoded instructions, one line each."""

from __future__ import annotations

from dataclasses import fields
from typing import Iterable, List

from .decoding.disassembler import Located
from .decoding.instr import Instruction


def _render_value(value: object) -> str:
    if isinstance(value, bytes):
        return repr(value.decode("latin-1"))
    if isinstance(value, tuple):
        return "[" + ",".join(str(v) for v in value) + "]"
    if value is None:
        return "-"
    return str(value)


def format_operands(instruction: Instruction) -> str:
    return " ".join(
        f"{f.name}={_render_value(getattr(instruction, f.name))}"
        for f in fields(instruction)  # type: ignore[arg-type]
    )


def format_instruction(instruction: Instruction, name: str | None = None) -> str:
    operands = format_operands(instruction)
    head = name or instruction.mnemonic
    return f"{head} {operands}" if operands else head


def format_located(located: Located, with_layout: bool = False) -> str:
    line = f"{located.offset}: {format_instruction(located.instruction, located.name)}"
    if with_layout and located.layout:
        spans = ", ".join(
            f"{entry.key}@{entry.meta['offset']}+{entry.meta['length_bytes']}"
            for entry in located.layout
        )
        line += f"  [{spans}]"
    return line


def format_listing(items: Iterable[Located], with_layout: bool = False) -> List[str]:
    return [format_located(item, with_layout=with_layout) for item in items]


__all__ = ["format_instruction", "format_listing", "format_located", "format_operands"]
