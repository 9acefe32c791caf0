"""Typed errors for bytefmt.

Policy:
- Errors are small and boring.
- Nothing is logged or retried here: every error goes back to the caller.
- Each concrete error also derives from the builtin it refines, so callers
  that only know ``ValueError``/``TypeError`` keep working.
"""

from __future__ import annotations


class BytefmtError(Exception):
    """Base error for bytefmt."""


class EncodeError(BytefmtError, TypeError):
    """The value handed to a strategy cannot be encoded (not bytes-like)."""


class DecodeError(BytefmtError, ValueError):
    """Text is not valid under the alphabet/padding rules of a strategy."""

    def __init__(self, message: str, *, value: object = None, encoder_id: str | None = None):
        super().__init__(message)
        self.value = value
        self.encoder_id = encoder_id


class MalformedDocumentError(BytefmtError, ValueError):
    """A document fragment is not the JSON string scalar we expected."""

    def __init__(self, message: str, *, stage: str | None = None):
        if stage:
            message = f"{stage}: {message}"
        super().__init__(message)
        self.stage = stage


class DocumentSyntaxError(MalformedDocumentError, DecodeError):
    """The fragment is not even valid JSON text (truncated, garbled...)."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        value: object = None,
        encoder_id: str | None = None,
    ):
        # MalformedDocumentError -> DecodeError -> Exception; the latter resets these
        MalformedDocumentError.__init__(self, message, stage=stage)
        self.value = value
        self.encoder_id = encoder_id


class ConfigError(BytefmtError, ValueError):
    pass


class UnknownEncoderError(ConfigError):
    pass


class EncodingSpecError(ConfigError):
    pass


def preview_value(value: object, limit: int = 32) -> str:
    s = repr(value)
    if len(s) > limit:
        return s[: limit - 3] + "..."
    return s
