"""Exception types raised by the strprice core.

Expected conditions (an anchor with no target-year date, unparseable prices)
are reported as values on the returned mappings and never raised.
"""

from typing import Any, Optional


class StrPriceError(Exception):
    """Base class for all strprice errors."""


class InvalidInputError(StrPriceError, ValueError):
    """A source record could not be interpreted."""

    def __init__(self, message: str, record: Optional[Any] = None):
        self.record = record
        if record is not None:
            message = f"{message}: {record!r}"
        super().__init__(message)


class AnchorError(StrPriceError, ValueError):
    """An anchor management operation was not allowed."""
