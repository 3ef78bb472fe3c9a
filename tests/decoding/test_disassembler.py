from __future__ import annotations

import logging
from typing import Sequence

import pytest

from dvidecode.coding import Encoder
from dvidecode.config import DecoderConfig
from dvidecode.decoding.disassembler import disassemble
from dvidecode.decoding.instr import (
    Bop,
    Eop,
    FntNum,
    Nop,
    Post,
    PostPost,
    Pre,
    Right,
    SetChar,
)
from dvidecode.errors import DecodeError, OutOfBounds, UnknownOpcode


def _pre(comment: bytes = b"") -> Encoder:
    enc = Encoder().unsigned_byte(247).unsigned_byte(2)
    for value in (25400000, 473628672, 1000):
        enc.unsigned_dword_be(value)
    return enc.unsigned_byte(len(comment)).raw(comment)


def _bop(enc: Encoder, page: int, pointer: int) -> Encoder:
    enc.unsigned_byte(139).signed(4, page)
    for _ in range(9):
        enc.signed(4, 0)
    return enc.signed(4, pointer)


def _post(enc: Encoder, pointer: int, pages: int) -> Encoder:
    enc.unsigned_byte(248).unsigned_dword_be(pointer)
    for value in (25400000, 473628672, 1000, 0x10000, 0x20000):
        enc.unsigned_dword_be(value)
    return enc.unsigned(2, 3).unsigned(2, pages)


def _post_post(enc: Encoder, pointer: int, fill: int) -> Encoder:
    enc.unsigned_byte(249).unsigned_dword_be(pointer).unsigned_byte(2)
    return enc.raw(bytes([223]) * fill)


def _decode(data: Sequence[int] | bytes | bytearray):
    return disassemble(bytes(data), DecoderConfig())


def test_empty_buffer() -> None:
    assert _decode(b"") == []


def test_document_links_resolve_to_indices() -> None:
    enc = _pre(b"hi")
    bop0 = len(enc.buf)
    _bop(enc, 1, -1)
    enc.unsigned_byte(ord("A")).unsigned_byte(140)
    bop1 = len(enc.buf)
    _bop(enc, 2, bop0)
    enc.unsigned_byte(ord("B")).unsigned_byte(140)
    post = len(enc.buf)
    _post(enc, bop1, pages=2)
    _post_post(enc, post, fill=4)

    result = _decode(enc.buf)

    assert [type(i) for i in result] == [
        Pre, Bop, SetChar, Eop, Bop, SetChar, Eop, Post, PostPost,
    ]
    assert result[1].previous is None
    assert result[1].pointer == -1
    assert result[4].previous == 1
    assert result[4].pointer == bop0
    assert result[4].counts[0] == 2
    assert result[7].last_bop == 4
    assert result[7].total_pages == 2
    assert result[8] == PostPost(post=7, format_id=2)


def test_post_link_ignores_raw_pointer() -> None:
    enc = Encoder()
    _bop(enc, 1, -1)
    _post(enc, 0xDEADBEEF, pages=1)
    result = _decode(enc.buf)
    assert result[1].last_bop == 0


def test_post_without_bop_has_no_link() -> None:
    enc = _post(Encoder(), 0x1234, pages=0)
    (post,) = _decode(enc.buf)
    assert isinstance(post, Post)
    assert post.last_bop is None


def test_post_post_without_post_has_no_link() -> None:
    (post_post,) = _decode([249, 0, 0, 0, 0x10, 2])
    assert post_post == PostPost(post=None, format_id=2)


def test_links_only_point_backwards() -> None:
    enc = Encoder()
    for page in range(3):
        _bop(enc, page, -1)
        enc.unsigned_byte(140)
    _post(enc, 0, pages=3)
    _post_post(enc, 0, fill=7)
    result = _decode(enc.buf)
    for index, instruction in enumerate(result):
        for link in (
            getattr(instruction, "previous", None),
            getattr(instruction, "last_bop", None),
            getattr(instruction, "post", None),
        ):
            if link is not None:
                assert link < index


@pytest.mark.parametrize("fill", [0, 1, 4, 7])
def test_fill_bytes_are_consumed(fill) -> None:
    enc = _post_post(Encoder(), 0, fill=fill)
    assert _decode(enc.buf) == [PostPost(post=None, format_id=2)]


def test_dispatch_resumes_after_fill_run() -> None:
    enc = _post_post(Encoder(), 0, fill=3).unsigned_byte(138).unsigned_byte(223)
    # the trailing 223 is not preceded by post_post, so it is a font selection
    assert _decode(enc.buf) == [
        PostPost(post=None, format_id=2),
        Nop(),
        FntNum(223 - 171),
    ]


def test_unknown_opcode() -> None:
    with pytest.raises(UnknownOpcode) as excinfo:
        _decode([250])
    assert excinfo.value.opcode == 250
    assert excinfo.value.offset == 0


@pytest.mark.parametrize("opcode", range(250, 256))
def test_unknown_opcode_after_valid_instructions(opcode) -> None:
    with pytest.raises(UnknownOpcode) as excinfo:
        _decode([138, 65, opcode, 138])
    assert excinfo.value.opcode == opcode
    assert excinfo.value.offset == 2
    assert isinstance(excinfo.value, DecodeError)
    assert str(opcode) in str(excinfo.value)


def test_truncated_scalar_reports_offsets() -> None:
    with pytest.raises(OutOfBounds) as excinfo:
        _decode([138, 129, 0x01])
    exc = excinfo.value
    assert exc.offset == 2
    assert exc.needed == 2
    assert exc.available == 1
    assert exc.instruction_offset == 1
    assert exc.opcode == 129
    assert "instruction at offset 1" in str(exc)


def test_truncated_payload_is_out_of_bounds() -> None:
    with pytest.raises(OutOfBounds) as excinfo:
        _decode([239, 0x05, 0x61, 0x62])
    assert excinfo.value.offset == 2
    assert excinfo.value.needed == 5
    assert excinfo.value.instruction_offset == 0


def test_truncated_fnt_def_name() -> None:
    data = [243, 0x01] + [0] * 12 + [0x00, 0x05] + list(b"cmr")
    with pytest.raises(OutOfBounds):
        _decode(data)


def test_truncated_pre_comment() -> None:
    enc = _pre(b"comment")
    with pytest.raises(OutOfBounds) as excinfo:
        _decode(enc.buf[:-1])
    assert excinfo.value.instruction_offset == 0


def test_truncated_post_post_pointer() -> None:
    with pytest.raises(OutOfBounds):
        _decode([249, 0x00, 0x00])


def test_out_of_bounds_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        _decode([131, 0x00])


def test_config_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DVI_LEGACY_UNSIGNED", "1")
    assert disassemble(bytes([143, 0xFF])) == [Right(0xFF)]
    monkeypatch.setenv("DVI_LEGACY_UNSIGNED", "0")
    assert disassemble(bytes([143, 0xFF]))[0].amount == -1


def test_trace_logging(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="dvidecode.decoding.disassembler")
    disassemble(bytes([138, 65]), DecoderConfig(trace=True))
    messages = [record.getMessage() for record in caplog.records]
    assert any("#0 @0 nop" in message for message in messages)
    assert any("#1 @1 set_char_65" in message for message in messages)
    assert any("Decoded 2 instructions from 2 bytes" in message for message in messages)


def test_no_trace_by_default(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="dvidecode.decoding.disassembler")
    disassemble(bytes([138, 65]), DecoderConfig())
    assert not any("@0" in record.getMessage() for record in caplog.records)
