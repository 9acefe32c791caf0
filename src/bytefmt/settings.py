"""Process-wide active encoding strategy.

The slot is plain module state with no locking: pick the strategy at startup,
before any concurrent (de)serialization begins, and leave it alone afterwards.
Code that needs a different strategy locally should pass one explicitly
(``DocumentCodec(encoder=...)``, ``Bytes.serialize(encoder=...)``) instead of
swapping the slot.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from bytefmt.core.encoder_base import ByteEncoder
from bytefmt.core.encoder_hex import HEX
from bytefmt.core.registry import get_encoder
from bytefmt.errors import ConfigError

_active: ByteEncoder = HEX


def _coerce(encoder: ByteEncoder | str) -> ByteEncoder:
    if isinstance(encoder, ByteEncoder):
        return encoder
    if isinstance(encoder, str):
        return get_encoder(encoder)
    raise ConfigError(f"expected a ByteEncoder or an encoder id, got {type(encoder).__name__}")


def get_active_encoder() -> ByteEncoder:
    return _active


def set_active_encoder(encoder: ByteEncoder | str) -> ByteEncoder:
    """Install ``encoder`` (instance or registry id); return the previous one."""
    global _active
    new = _coerce(encoder)
    prev = _active
    _active = new
    return prev


@contextmanager
def active_encoder(encoder: ByteEncoder | str) -> Iterator[ByteEncoder]:
    prev = set_active_encoder(encoder)
    try:
        yield _active
    finally:
        set_active_encoder(prev)


def resolve_encoder(encoder: ByteEncoder | str | None = None) -> ByteEncoder:
    """Explicit encoder wins; None means the active one."""
    if encoder is None:
        return _active
    return _coerce(encoder)
