"""Domain service: sale numbering.

Sale numbers are a fixed prefix followed by a six-digit, zero-padded
ordinal taken from the sale counter of the current unit of work, so the
number and the sale that carries it are committed together.

If the counter cannot be advanced the generator falls back to the last six
digits of the current epoch milliseconds.  That fallback is NOT unique
under concurrent sales; it exists so a till can keep selling while the
counter is broken, and it is logged every time it is used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pos.domain.exceptions import StoreError
from pos.domain.repository.sale_repository import SaleRepository
from pos.domain.service.local_time import utc_now

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "KFE-"
WIDTH = 6


class SaleNumberGenerator:

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._prefix = prefix
        self._clock = clock

    def next_number(self, sales: SaleRepository) -> str:
        try:
            sequence = sales.next_sequence()
        except StoreError as exc:
            number = self.fallback_number()
            logger.warning(
                "Sale counter unavailable (%s); using non-sequential number %s",
                exc,
                number,
            )
            return number
        return self.format(sequence)

    def format(self, sequence: int) -> str:
        return f"{self._prefix}{sequence:0{WIDTH}d}"

    def fallback_number(self) -> str:
        millis = int(self._clock().timestamp() * 1000)
        return self.format(millis % 10**WIDTH)
