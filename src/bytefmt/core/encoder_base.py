from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from bytefmt.errors import DocumentSyntaxError, EncodeError, MalformedDocumentError, preview_value

STAGE_PARSE_STRING = "parse string"


def require_bytes(data: Any, encoder_id: str) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodeError(f"{encoder_id}: data must be bytes-like, got {type(data).__name__}")
    return bytes(data)


def parse_document_string(fragment: Any) -> str:
    """Unquote a JSON document fragment that must hold a string scalar."""
    if isinstance(fragment, (bytes, bytearray)):
        fragment = bytes(fragment)
    elif not isinstance(fragment, str):
        raise MalformedDocumentError(
            f"fragment must be JSON text, got {type(fragment).__name__}", stage=STAGE_PARSE_STRING
        )
    try:
        value = json.loads(fragment)
    except ValueError as e:
        # JSONDecodeError, or bytes that are not valid UTF-8/16/32
        raise DocumentSyntaxError(
            f"invalid JSON {preview_value(fragment)}: {e}", stage=STAGE_PARSE_STRING, value=fragment
        ) from e
    return require_document_string(value)


def require_document_string(value: Any) -> str:
    if not isinstance(value, str):
        kind = "null" if value is None else type(value).__name__
        raise MalformedDocumentError(
            f"expected a JSON string, got {kind}", stage=STAGE_PARSE_STRING
        )
    return value


class ByteEncoder(ABC):
    """
    Strategy interface: bytes <-> printable text.

    Implementations are stateless; ``decode(encode(b)) == b`` for every ``b``
    and the empty sequence maps to the empty string (and back).
    """

    encoder_id: str

    @abstractmethod
    def encode(self, data: bytes) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, text: str) -> bytes:
        """Raise DecodeError on text outside the alphabet/padding rules."""
        raise NotImplementedError

    def marshal(self, data: bytes) -> str:
        """Encode and quote as a JSON string scalar."""
        return json.dumps(self.encode(data))

    def unmarshal(self, fragment: str | bytes) -> bytes:
        """Parse a JSON string scalar and decode its content."""
        try:
            text = parse_document_string(fragment)
        except DocumentSyntaxError as e:
            e.encoder_id = self.encoder_id
            raise
        return self.decode(text)
