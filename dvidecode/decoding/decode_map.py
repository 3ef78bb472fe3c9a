from __future__ import annotations

from typing import Callable, Dict, Tuple, Type

from ..errors import UnknownOpcode
from .instr import (
    Bop,
    Down,
    Eop,
    Fnt,
    FntDef,
    FntNum,
    Instruction,
    Nop,
    Pop,
    Post,
    PostPost,
    Pre,
    Push,
    Put,
    PutRule,
    Right,
    Set,
    SetChar,
    SetRule,
    W,
    W0,
    X,
    X0,
    Xxx,
    Y,
    Y0,
    Z,
    Z0,
)
from .reader import StreamCtx


SET_CHAR_0 = 0
SET1 = 128
SET_RULE = 132
PUT1 = 133
PUT_RULE = 137
NOP = 138
BOP = 139
EOP = 140
PUSH = 141
POP = 142
RIGHT1 = 143
W0_OP = 147
X0_OP = 152
DOWN1 = 157
Y0_OP = 161
Z0_OP = 166
FNT_NUM_0 = 171
FNT1 = 235
XXX1 = 239
FNT_DEF1 = 243
PRE = 247
POST = 248
POST_POST = 249

FILL_BYTE = 223
BOP_COUNT_FIELDS = 10


DecoderFunc = Callable[[int, StreamCtx], Instruction]


def _dec_set_char(opcode: int, ctx: StreamCtx) -> Instruction:
    return SetChar(opcode - SET_CHAR_0)


def _dec_code(opcode: int, ctx: StreamCtx, cls: Type[Instruction], base: int) -> Instruction:
    width = opcode - base + 1
    return cls(ctx.read_unsigned("c", width))  # type: ignore[call-arg]


def _dec_rule(opcode: int, ctx: StreamCtx, cls: Type[Instruction]) -> Instruction:
    height = ctx.read_signed("a", 4)
    width = ctx.read_signed("b", 4)
    return cls(height, width)  # type: ignore[call-arg]


def _dec_simple(opcode: int, ctx: StreamCtx, cls: Type[Instruction]) -> Instruction:
    return cls()


def _dec_bop(opcode: int, ctx: StreamCtx) -> Instruction:
    previous = ctx.last_bop
    ctx.last_bop = ctx.instruction_count
    counts = tuple(ctx.read_signed(f"c{i}", 4) for i in range(BOP_COUNT_FIELDS))
    pointer = ctx.read_signed("p", 4)
    return Bop(counts=counts, pointer=pointer, previous=previous)


def _dec_move(
    opcode: int, ctx: StreamCtx, cls: Type[Instruction], base: int
) -> Instruction:
    width = opcode - base + 1
    return cls(ctx.read_signed("b", width))  # type: ignore[call-arg]


def _dec_fnt_num(opcode: int, ctx: StreamCtx) -> Instruction:
    return FntNum(opcode - FNT_NUM_0)


def _dec_fnt(opcode: int, ctx: StreamCtx) -> Instruction:
    return Fnt(ctx.read_unsigned("k", opcode - FNT1 + 1))


def _dec_xxx(opcode: int, ctx: StreamCtx) -> Instruction:
    length = ctx.read_unsigned("k", opcode - XXX1 + 1)
    return Xxx(ctx.read_payload("x", length))


def _dec_fnt_def(opcode: int, ctx: StreamCtx) -> Instruction:
    font = ctx.read_unsigned("k", opcode - FNT_DEF1 + 1)
    checksum = ctx.read_unsigned("c", 4)
    scale = ctx.read_unsigned("s", 4)
    design_size = ctx.read_unsigned("d", 4)
    area_len = ctx.read_unsigned("a", 1)
    name_len = ctx.read_unsigned("l", 1)
    directory = ctx.read_payload("area", area_len)
    name = ctx.read_payload("name", name_len)
    return FntDef(
        font=font,
        checksum=checksum,
        scale=scale,
        design_size=design_size,
        directory=directory,
        name=name,
    )


def _dec_pre(opcode: int, ctx: StreamCtx) -> Instruction:
    format_id = ctx.read_unsigned("i", 1)
    num = ctx.read_unsigned("num", 4)
    den = ctx.read_unsigned("den", 4)
    mag = ctx.read_unsigned("mag", 4)
    comment_len = ctx.read_unsigned("k", 1)
    return Pre(
        format_id=format_id,
        num=num,
        den=den,
        mag=mag,
        comment=ctx.read_payload("x", comment_len),
    )


def _dec_post(opcode: int, ctx: StreamCtx) -> Instruction:
    # The stored byte offset of the final bop is replaced by its output index.
    ctx.read_unsigned("p", 4)
    last_bop = ctx.last_bop
    ctx.last_post = ctx.instruction_count
    return Post(
        last_bop=last_bop,
        num=ctx.read_unsigned("num", 4),
        den=ctx.read_unsigned("den", 4),
        mag=ctx.read_unsigned("mag", 4),
        max_height=ctx.read_unsigned("l", 4),
        max_width=ctx.read_unsigned("u", 4),
        max_stack=ctx.read_unsigned("s", 2),
        total_pages=ctx.read_unsigned("t", 2),
    )


def _dec_post_post(opcode: int, ctx: StreamCtx) -> Instruction:
    ctx.read_unsigned("q", 4)
    result = PostPost(post=ctx.last_post, format_id=ctx.read_unsigned("i", 1))
    ctx.skip_run("fill", FILL_BYTE)
    return result


def _dec_undefined(opcode: int, ctx: StreamCtx) -> Instruction:
    raise UnknownOpcode(opcode, ctx.start)


def _family(
    base: int, count: int, decoder: DecoderFunc
) -> Dict[int, DecoderFunc]:
    return {base + i: decoder for i in range(count)}


DECODERS: Dict[int, DecoderFunc] = {
    **_family(SET_CHAR_0, 128, _dec_set_char),
    **_family(SET1, 4, lambda opcode, ctx: _dec_code(opcode, ctx, Set, SET1)),
    SET_RULE: lambda opcode, ctx: _dec_rule(opcode, ctx, SetRule),
    **_family(PUT1, 4, lambda opcode, ctx: _dec_code(opcode, ctx, Put, PUT1)),
    PUT_RULE: lambda opcode, ctx: _dec_rule(opcode, ctx, PutRule),
    NOP: lambda opcode, ctx: _dec_simple(opcode, ctx, Nop),
    BOP: _dec_bop,
    EOP: lambda opcode, ctx: _dec_simple(opcode, ctx, Eop),
    PUSH: lambda opcode, ctx: _dec_simple(opcode, ctx, Push),
    POP: lambda opcode, ctx: _dec_simple(opcode, ctx, Pop),
    **_family(RIGHT1, 4, lambda opcode, ctx: _dec_move(opcode, ctx, Right, RIGHT1)),
    W0_OP: lambda opcode, ctx: _dec_simple(opcode, ctx, W0),
    **_family(W0_OP + 1, 4, lambda opcode, ctx: _dec_move(opcode, ctx, W, W0_OP + 1)),
    X0_OP: lambda opcode, ctx: _dec_simple(opcode, ctx, X0),
    **_family(X0_OP + 1, 4, lambda opcode, ctx: _dec_move(opcode, ctx, X, X0_OP + 1)),
    **_family(DOWN1, 4, lambda opcode, ctx: _dec_move(opcode, ctx, Down, DOWN1)),
    Y0_OP: lambda opcode, ctx: _dec_simple(opcode, ctx, Y0),
    **_family(Y0_OP + 1, 4, lambda opcode, ctx: _dec_move(opcode, ctx, Y, Y0_OP + 1)),
    Z0_OP: lambda opcode, ctx: _dec_simple(opcode, ctx, Z0),
    **_family(Z0_OP + 1, 4, lambda opcode, ctx: _dec_move(opcode, ctx, Z, Z0_OP + 1)),
    **_family(FNT_NUM_0, 64, _dec_fnt_num),
    **_family(FNT1, 4, _dec_fnt),
    **_family(XXX1, 4, _dec_xxx),
    **_family(FNT_DEF1, 4, _dec_fnt_def),
    PRE: _dec_pre,
    POST: _dec_post,
    POST_POST: _dec_post_post,
    **_family(POST_POST + 1, 256 - (POST_POST + 1), _dec_undefined),
}


_NAMED_FAMILIES: Tuple[Tuple[int, int, str], ...] = (
    (SET1, 4, "set"),
    (PUT1, 4, "put"),
    (RIGHT1, 4, "right"),
    (W0_OP, 5, "w"),
    (X0_OP, 5, "x"),
    (DOWN1, 4, "down"),
    (Y0_OP, 5, "y"),
    (Z0_OP, 5, "z"),
    (FNT1, 4, "fnt"),
    (XXX1, 4, "xxx"),
    (FNT_DEF1, 4, "fnt_def"),
)

_SINGLE_NAMES: Dict[int, str] = {
    SET_RULE: "set_rule",
    PUT_RULE: "put_rule",
    NOP: "nop",
    BOP: "bop",
    EOP: "eop",
    PUSH: "push",
    POP: "pop",
    PRE: "pre",
    POST: "post",
    POST_POST: "post_post",
}


def _build_names() -> Dict[int, str]:
    names: Dict[int, str] = dict(_SINGLE_NAMES)
    for code in range(128):
        names[SET_CHAR_0 + code] = f"set_char_{code}"
    for font in range(64):
        names[FNT_NUM_0 + font] = f"fnt_num_{font}"
    for base, count, stem in _NAMED_FAMILIES:
        # w0/x0/y0/z0 families start at suffix 0, the others at 1.
        first = 0 if count == 5 else 1
        for i in range(count):
            names[base + i] = f"{stem}{first + i}"
    for opcode in range(POST_POST + 1, 256):
        names[opcode] = f"undefined_{opcode}"
    return names


OPCODE_NAMES: Dict[int, str] = _build_names()


def _check_tables() -> None:
    missing = set(range(256)) - set(DECODERS)
    extra = set(DECODERS) - set(range(256))
    if missing or extra:
        raise RuntimeError(
            f"Opcode table is not exhaustive: missing={sorted(missing)} extra={sorted(extra)}"
        )
    if set(OPCODE_NAMES) != set(DECODERS):
        raise RuntimeError("Opcode names do not cover the dispatch table")


_check_tables()


def opcode_name(opcode: int) -> str:
    try:
        return OPCODE_NAMES[opcode]
    except KeyError as exc:
        raise ValueError(f"Not a byte value: {opcode}") from exc


def decode_opcode(opcode: int, ctx: StreamCtx) -> Instruction:
    return DECODERS[opcode](opcode, ctx)


__all__ = [
    "DECODERS",
    "FILL_BYTE",
    "OPCODE_NAMES",
    "decode_opcode",
    "opcode_name",
]
