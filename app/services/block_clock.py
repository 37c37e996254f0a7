"""Logical clock supplied to the ledger by the HTTP layer.

Callers normally send the block height in the X-Block-Height header.
When they don't, the height of the most recent call is reused, so the
timestamps this process hands the ledger never go backwards on their own.
An explicit header is passed through as-is; the ledger trusts it.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class BlockClock:
    def __init__(self, start: int = 0) -> None:
        self._height = start
        self._lock = threading.Lock()

    @property
    def height(self) -> int:
        return self._height

    def resolve(self, supplied: int | None) -> int:
        """Return the height for this call and remember the highest seen."""
        with self._lock:
            if supplied is None:
                return self._height
            if supplied < self._height:
                logger.debug(
                    "Block height moved backwards supplied=%d seen=%d",
                    supplied,
                    self._height,
                )
            self._height = max(self._height, supplied)
            return supplied
