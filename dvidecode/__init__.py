"""Decoder for DVI page-description byte streams."""

from .config import DecoderConfig, load_decoder_config  # noqa: F401
from .errors import DecodeError, OutOfBounds, UnknownOpcode  # noqa: F401
from .decoding import Instruction, Located, disassemble, disassemble_with_layout  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "DecoderConfig",
    "Instruction",
    "Located",
    "OutOfBounds",
    "UnknownOpcode",
    "disassemble",
    "disassemble_with_layout",
    "load_decoder_config",
]
