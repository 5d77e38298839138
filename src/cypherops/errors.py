"""Exceptions raised while turning change ops into statements."""

from typing import Optional


class CypherOpsError(Exception):
    """Base class for cypherops errors."""


class OpDecodeError(CypherOpsError, ValueError):
    """An op in the batch could not be decoded.

    Aborts the whole batch; no partial result is produced.
    """

    def __init__(self, message: str, key: Optional[str] = None, index: Optional[int] = None):
        self.key = key
        self.index = index
        super().__init__(message)
