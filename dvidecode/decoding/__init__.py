"""
Typed decoding of DVI instruction streams.

``disassemble`` turns a byte buffer into a list of ``Instruction`` objects,
rewriting the file's backward byte-offset pointers into indices of that list.
"""

from .instr import *  # noqa: F401,F403
from .instr import __all__ as _instr_all
from .reader import LayoutEntry, StreamCtx  # noqa: F401
from .disassembler import Located, disassemble, disassemble_with_layout  # noqa: F401
from . import decode_map  # noqa: F401

__all__ = [
    *_instr_all,
    "LayoutEntry",
    "Located",
    "StreamCtx",
    "decode_map",
    "disassemble",
    "disassemble_with_layout",
]
