"""Application service: Cancel Sale use case.

Marks a completed sale as cancelled.  Stock is not returned: a cancelled
sale simply stops counting in every report.
"""

from __future__ import annotations

import logging

from pos.domain.exceptions import EntityNotFoundError
from pos.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CancelSaleHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, sale_number: str) -> None:
        with self._uow as uow:
            sale = uow.sales.get_by_number(sale_number)
            if sale is None:
                raise EntityNotFoundError(f"Sale {sale_number} not found")

            sale.cancel()
            uow.sales.save(sale)
            uow.commit()

        logger.info("Cancelled sale %s", sale_number)
