from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from bytefmt.core.encoder_base import ByteEncoder, require_bytes
from bytefmt.errors import DecodeError, preview_value

_URLSAFE_PADDED_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")
_URLSAFE_RAW_RE = re.compile(r"[A-Za-z0-9_-]*")
_STD_PADDED_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")
_STD_RAW_RE = re.compile(r"[A-Za-z0-9+/]*")


@dataclass(frozen=True)
class Base64Encoder(ByteEncoder):
    """
    Base64 strategy.

    urlsafe=True  -> '-' and '_' instead of '+' and '/'
    padded=True   -> '=' up to a multiple of 4 chars; decode demands it
    padded=False  -> no '=' at all; decode rejects it

    Decoding is strict: characters outside the alphabet are errors, never
    silently discarded (as the stdlib's non-validating decoders do).
    """

    padded: bool = True
    urlsafe: bool = True

    @property
    def encoder_id(self) -> str:  # type: ignore[override]
        if not self.urlsafe:
            return "base64_std" if self.padded else "base64_std_raw"
        return "base64" if self.padded else "base64_raw"

    def _altchars(self) -> bytes | None:
        return b"-_" if self.urlsafe else None

    def _pattern(self) -> re.Pattern[str]:
        if self.urlsafe:
            return _URLSAFE_PADDED_RE if self.padded else _URLSAFE_RAW_RE
        return _STD_PADDED_RE if self.padded else _STD_RAW_RE

    def encode(self, data: bytes) -> str:
        b = require_bytes(data, self.encoder_id)
        out = base64.b64encode(b, altchars=self._altchars()).decode("ascii")
        if not self.padded:
            out = out.rstrip("=")
        return out

    def _fail(self, text: str, why: str) -> DecodeError:
        return DecodeError(
            f"{self.encoder_id}: {why} in {preview_value(text)}", value=text, encoder_id=self.encoder_id
        )

    def decode(self, text: str) -> bytes:
        if not isinstance(text, str):
            raise DecodeError(
                f"{self.encoder_id}: expected str, got {type(text).__name__}",
                value=text,
                encoder_id=self.encoder_id,
            )
        if not text:
            return b""
        if self._pattern().fullmatch(text) is None:
            raise self._fail(text, "invalid character or misplaced padding")

        if self.padded:
            if len(text) % 4:
                raise self._fail(text, f"length {len(text)} is not a multiple of 4")
            padded_text = text
        else:
            if len(text) % 4 == 1:
                raise self._fail(text, f"impossible unpadded length {len(text)}")
            padded_text = text + "=" * (-len(text) % 4)

        try:
            return base64.b64decode(padded_text, altchars=self._altchars(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise self._fail(text, str(e)) from e


B64 = Base64Encoder(padded=True)
RAW_B64 = Base64Encoder(padded=False)
STD_B64 = Base64Encoder(padded=True, urlsafe=False)
