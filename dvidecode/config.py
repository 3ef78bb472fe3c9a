from __future__ import annotations

from dataclasses import dataclass
import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


@dataclass(frozen=True)
class DecoderConfig:
    # Read 1-3 byte movement/rule operands as unsigned magnitudes.
    legacy_unsigned: bool = False
    trace: bool = False


def load_decoder_config() -> DecoderConfig:
    return DecoderConfig(
        legacy_unsigned=_env_flag("DVI_LEGACY_UNSIGNED", default=False),
        trace=_env_flag("DVI_TRACE", default=False),
    )


__all__ = ["DecoderConfig", "load_decoder_config"]
