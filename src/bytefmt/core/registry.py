from __future__ import annotations

from bytefmt.core.encoder_base import ByteEncoder
from bytefmt.core.encoder_base64 import B64, RAW_B64, STD_B64
from bytefmt.core.encoder_hex import HEX
from bytefmt.errors import ConfigError, UnknownEncoderError

_ENCODERS: dict[str, ByteEncoder] = {e.encoder_id: e for e in (HEX, B64, RAW_B64, STD_B64)}
BUILTIN_IDS: frozenset[str] = frozenset(_ENCODERS)


def _norm_id(encoder_id: str) -> str:
    if not isinstance(encoder_id, str) or not encoder_id.strip():
        raise UnknownEncoderError(f"encoder id must be a non-empty string, got {encoder_id!r}")
    return encoder_id.strip().lower()


def get_encoder(encoder_id: str) -> ByteEncoder:
    cid = _norm_id(encoder_id)
    enc = _ENCODERS.get(cid)
    if enc is None:
        raise UnknownEncoderError(
            f"unknown encoder {cid!r} (available: {', '.join(available_encoders())})"
        )
    return enc


def register_encoder(encoder: ByteEncoder, *, replace: bool = False) -> ByteEncoder:
    """Make a custom strategy reachable by id (settings, encoding spec)."""
    if not isinstance(encoder, ByteEncoder):
        raise ConfigError(f"not a ByteEncoder: {type(encoder).__name__}")
    cid = _norm_id(encoder.encoder_id)
    if cid in BUILTIN_IDS:
        # settings.py holds HEX itself as the default
        raise ConfigError(f"built-in encoder {cid!r} cannot be replaced")
    if cid in _ENCODERS and not replace:
        raise ConfigError(f"encoder {cid!r} already registered")
    _ENCODERS[cid] = encoder
    return encoder


def unregister_encoder(encoder_id: str) -> None:
    cid = _norm_id(encoder_id)
    if cid in BUILTIN_IDS:
        raise ConfigError(f"built-in encoder {cid!r} cannot be removed")
    _ENCODERS.pop(cid, None)


def available_encoders() -> tuple[str, ...]:
    return tuple(sorted(_ENCODERS))
