from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple


class Instruction:
    """Common base of every decoded DVI instruction."""

    __slots__ = ()
    mnemonic: ClassVar[str] = "?"


# Character placement


@dataclass(frozen=True, slots=True)
class SetChar(Instruction):
    mnemonic: ClassVar[str] = "set_char"
    code: int

    def __post_init__(self) -> None:
        if not 0 <= self.code <= 127:
            raise ValueError(f"SetChar code out of range: {self.code}")


@dataclass(frozen=True, slots=True)
class Set(Instruction):
    mnemonic: ClassVar[str] = "set"
    code: int


@dataclass(frozen=True, slots=True)
class Put(Instruction):
    mnemonic: ClassVar[str] = "put"
    code: int


# Rules


@dataclass(frozen=True, slots=True)
class SetRule(Instruction):
    mnemonic: ClassVar[str] = "set_rule"
    height: int
    width: int


@dataclass(frozen=True, slots=True)
class PutRule(Instruction):
    mnemonic: ClassVar[str] = "put_rule"
    height: int
    width: int


# Data-less instructions


@dataclass(frozen=True, slots=True)
class Nop(Instruction):
    mnemonic: ClassVar[str] = "nop"


@dataclass(frozen=True, slots=True)
class Eop(Instruction):
    mnemonic: ClassVar[str] = "eop"


@dataclass(frozen=True, slots=True)
class Push(Instruction):
    mnemonic: ClassVar[str] = "push"


@dataclass(frozen=True, slots=True)
class Pop(Instruction):
    mnemonic: ClassVar[str] = "pop"


@dataclass(frozen=True, slots=True)
class Bop(Instruction):
    """Beginning of page.

    ``pointer`` is the raw byte offset stored in the file (-1 for the first
    page). ``previous`` is the index of the preceding ``Bop`` in the decoded
    sequence, taken from decoder state rather than from ``pointer``.
    """

    mnemonic: ClassVar[str] = "bop"
    counts: Tuple[int, ...]
    pointer: int
    previous: Optional[int] = None

    def __post_init__(self) -> None:
        if len(self.counts) != 10:
            raise ValueError(f"Bop expects 10 counts, got {len(self.counts)}")


# Movement


@dataclass(frozen=True, slots=True)
class Right(Instruction):
    mnemonic: ClassVar[str] = "right"
    amount: int


@dataclass(frozen=True, slots=True)
class W0(Instruction):
    mnemonic: ClassVar[str] = "w0"


@dataclass(frozen=True, slots=True)
class W(Instruction):
    mnemonic: ClassVar[str] = "w"
    amount: int


@dataclass(frozen=True, slots=True)
class X0(Instruction):
    mnemonic: ClassVar[str] = "x0"


@dataclass(frozen=True, slots=True)
class X(Instruction):
    mnemonic: ClassVar[str] = "x"
    amount: int


@dataclass(frozen=True, slots=True)
class Down(Instruction):
    mnemonic: ClassVar[str] = "down"
    amount: int


@dataclass(frozen=True, slots=True)
class Y0(Instruction):
    mnemonic: ClassVar[str] = "y0"


@dataclass(frozen=True, slots=True)
class Y(Instruction):
    mnemonic: ClassVar[str] = "y"
    amount: int


@dataclass(frozen=True, slots=True)
class Z0(Instruction):
    mnemonic: ClassVar[str] = "z0"


@dataclass(frozen=True, slots=True)
class Z(Instruction):
    mnemonic: ClassVar[str] = "z"
    amount: int


# Fonts


@dataclass(frozen=True, slots=True)
class FntNum(Instruction):
    mnemonic: ClassVar[str] = "fnt_num"
    font: int

    def __post_init__(self) -> None:
        if not 0 <= self.font <= 63:
            raise ValueError(f"FntNum font out of range: {self.font}")


@dataclass(frozen=True, slots=True)
class Fnt(Instruction):
    mnemonic: ClassVar[str] = "fnt"
    font: int


@dataclass(frozen=True, slots=True)
class FntDef(Instruction):
    mnemonic: ClassVar[str] = "fnt_def"
    font: int
    checksum: int
    scale: int
    design_size: int
    directory: bytes
    name: bytes

    @property
    def path(self) -> bytes:
        return self.directory + self.name


# Specials


@dataclass(frozen=True, slots=True)
class Xxx(Instruction):
    mnemonic: ClassVar[str] = "xxx"
    payload: bytes


# Preamble / postamble


@dataclass(frozen=True, slots=True)
class Pre(Instruction):
    mnemonic: ClassVar[str] = "pre"
    format_id: int
    num: int
    den: int
    mag: int
    comment: bytes


@dataclass(frozen=True, slots=True)
class Post(Instruction):
    mnemonic: ClassVar[str] = "post"
    last_bop: Optional[int]
    num: int
    den: int
    mag: int
    max_height: int
    max_width: int
    max_stack: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class PostPost(Instruction):
    mnemonic: ClassVar[str] = "post_post"
    post: Optional[int]
    format_id: int


__all__ = [
    "Bop",
    "Down",
    "Eop",
    "Fnt",
    "FntDef",
    "FntNum",
    "Instruction",
    "Nop",
    "Pop",
    "Post",
    "PostPost",
    "Pre",
    "Push",
    "Put",
    "PutRule",
    "Right",
    "Set",
    "SetChar",
    "SetRule",
    "W",
    "W0",
    "X",
    "X0",
    "Xxx",
    "Y",
    "Y0",
    "Z",
    "Z0",
]
