"""
Error types raised by the bundling core
"""

from enum import IntEnum
from typing import Optional


class BundlerErrorCode(IntEnum):
    """Stable numeric codes, reported alongside every message"""
    ICON_ERROR = 9000
    MANIFEST_ERROR = 9001
    INVALID_INPUT = 9002


class BundlerError(Exception):
    """Base class for all bundling errors"""

    code = BundlerErrorCode.INVALID_INPUT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"[{int(self.code)}] {self.message}"


class ManifestValidationError(BundlerError):
    """A manifest is unreadable or misses/has an invalid required field"""

    code = BundlerErrorCode.MANIFEST_ERROR

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ImageDecodeError(BundlerError):
    """Icon bytes are corrupt, unsupported or too large to decode"""

    code = BundlerErrorCode.ICON_ERROR


class InvalidOptionsError(BundlerError):
    """Bad numeric or color parameters passed by the caller"""

    code = BundlerErrorCode.INVALID_INPUT
