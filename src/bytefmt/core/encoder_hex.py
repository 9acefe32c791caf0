from __future__ import annotations

import binascii

from bytefmt.core.encoder_base import ByteEncoder, require_bytes
from bytefmt.errors import DecodeError, preview_value


class HexEncoder(ByteEncoder):
    """
    Two lowercase hex digits per byte, no separators, no prefix.
    Decode accepts either case but nothing else (no whitespace, no '0x').
    """

    encoder_id: str = "hex"

    def encode(self, data: bytes) -> str:
        return require_bytes(data, self.encoder_id).hex()

    def decode(self, text: str) -> bytes:
        if not isinstance(text, str):
            raise DecodeError(
                f"hex: expected str, got {type(text).__name__}", value=text, encoder_id=self.encoder_id
            )
        if len(text) % 2:
            raise DecodeError(
                f"hex: odd length ({len(text)}) in {preview_value(text)}",
                value=text,
                encoder_id=self.encoder_id,
            )
        try:
            # unhexlify, unlike bytes.fromhex, rejects whitespace
            return binascii.unhexlify(text)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(
                f"hex: invalid text {preview_value(text)}: {e}", value=text, encoder_id=self.encoder_id
            ) from e

    def __repr__(self) -> str:
        return "HexEncoder()"


HEX = HexEncoder()
