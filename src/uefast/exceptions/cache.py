"""Binary cache format exceptions."""

from __future__ import annotations

from uefast.exceptions.base import UefastError


class CacheFormatError(UefastError, ValueError):
    """Raised when cache bytes are rejected by the decoder.

    ``reason`` is one of ``bad_magic``, ``unsupported_version``,
    ``checksum_mismatch`` or ``corrupt``.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
