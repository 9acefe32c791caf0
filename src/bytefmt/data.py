"""Byte containers whose JSON form follows the active encoding strategy.

``Bytes`` is a ``bytes`` subclass: immutable, hashable and equal to plain
bytes with the same content. It holds no reference to a strategy; the
strategy is resolved at (de)serialization time, either from the explicit
``encoder=`` argument or from the process-wide slot in ``bytefmt.settings``.

Typical use::

    set_active_encoder("base64")      # once, in main()
    sig = Bytes(raw_signature)
    sig.serialize()                   # '"q83v..."'
    Bytes.deserialize('"q83v..."')    # Bytes('abcdef...')
"""

from __future__ import annotations

from typing import Any, ClassVar

from bytefmt.core.encoder_base import ByteEncoder, parse_document_string, require_document_string
from bytefmt.errors import DecodeError
from bytefmt.settings import resolve_encoder


class Bytes(bytes):
    expected_size: ClassVar[int | None] = None

    def __new__(cls, data: Any = b""):
        if isinstance(data, (str, int)):
            # bytes("..") needs an encoding and bytes(n) means n zero bytes:
            # neither is a byte value.
            raise TypeError(f"{cls.__name__} needs bytes-like data, got {type(data).__name__}")
        b = bytes(data)
        if cls.expected_size is not None and len(b) != cls.expected_size:
            raise ValueError(f"{cls.__name__} needs exactly {cls.expected_size} bytes, got {len(b)}")
        return super().__new__(cls, b)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.hex()}')"

    def __reduce_ex__(self, protocol):
        # fixed_bytes() classes need not be bound to a module-level name
        key = type(self).__dict__.get("_fixed_key")
        if key is not None:
            return _rebuild_fixed, (key[0], key[1], bytes(self))
        return super().__reduce_ex__(protocol)

    # -------------------
    # Document hooks
    # -------------------

    def to_document(self, encoder: ByteEncoder | str | None = None) -> str:
        """String scalar (unquoted) for a parsed document."""
        return resolve_encoder(encoder).encode(bytes(self))

    def serialize(self, encoder: ByteEncoder | str | None = None) -> str:
        """JSON text: the encoded value as a quoted string."""
        return resolve_encoder(encoder).marshal(bytes(self))

    @classmethod
    def from_document(cls, value: Any, encoder: ByteEncoder | str | None = None) -> Bytes:
        """Build from an already-parsed document value (must be a str)."""
        text = require_document_string(value)
        enc = resolve_encoder(encoder)
        raw = enc.decode(text)
        if cls.expected_size is not None and len(raw) != cls.expected_size:
            raise DecodeError(
                f"{cls.__name__}: decoded {len(raw)} bytes, expected {cls.expected_size}",
                value=text,
                encoder_id=enc.encoder_id,
            )
        return cls(raw)

    @classmethod
    def deserialize(cls, fragment: str | bytes, encoder: ByteEncoder | str | None = None) -> Bytes:
        """Build from JSON text holding a quoted string."""
        return cls.from_document(parse_document_string(fragment), encoder)


_FIXED: dict[tuple[int, str | None], type[Bytes]] = {}


def fixed_bytes(size: int, name: str | None = None) -> type[Bytes]:
    """Bytes subclass that only holds exactly ``size`` bytes (hashes, keys...)."""
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise ValueError(f"size must be a non-negative int, got {size!r}")
    key = (size, name)
    cls = _FIXED.get(key)
    if cls is None:
        cls_name = name or f"Bytes{size}"
        cls = type(
            cls_name, (Bytes,), {"expected_size": size, "_fixed_key": key, "__module__": __name__}
        )
        cls.__qualname__ = cls_name
        _FIXED[key] = cls
    return cls


def _rebuild_fixed(size: int, name: str | None, data: bytes) -> Bytes:
    return fixed_bytes(size, name)(data)


Hash32 = fixed_bytes(32, "Hash32")
