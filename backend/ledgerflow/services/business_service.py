"""Business-wide totals and the business profile."""
import logging
from decimal import Decimal
from typing import Any, Iterable

from ledgerflow.schemas.business import BusinessData, BusinessProfile, BusinessTotals, BusinessUpdate
from ledgerflow.schemas.common import parse_input
from ledgerflow.schemas.customer import Customer
from ledgerflow.services.customer_service import CustomerService

logger = logging.getLogger(__name__)


class BusinessAggregator:
    """
    Folds the customer snapshot into totals. Holds no ledger state of its own:
    totals are recomputed from the customers on every call.
    """

    def __init__(self, customers: CustomerService, profile: BusinessProfile | None = None):
        self._customers = customers
        self._profile = profile or BusinessProfile()

    @staticmethod
    def get_totals(customers: Iterable[Customer]) -> BusinessTotals:
        to_receive = Decimal("0")
        to_pay = Decimal("0")
        count = 0
        for customer in customers:
            count += 1
            if customer.balance > 0:
                to_receive += customer.balance
            elif customer.balance < 0:
                to_pay += -customer.balance
        return BusinessTotals(total_to_receive=to_receive, total_to_pay=to_pay, customer_count=count)

    @staticmethod
    def outstanding_count(customers: Iterable[Customer]) -> int:
        return sum(1 for c in customers if c.balance != 0)

    async def get_business_data(self) -> BusinessData:
        customers = await self._customers.list()
        totals = self.get_totals(customers)
        return BusinessData(
            **self._profile.model_dump(),
            total_to_receive=totals.total_to_receive,
            total_to_pay=totals.total_to_pay,
            customer_count=totals.customer_count,
            net_balance=totals.net_balance,
        )

    def get_profile(self) -> BusinessProfile:
        return self._profile.model_copy()

    def update_business_data(self, data: Any) -> BusinessProfile:
        changes = parse_input(BusinessUpdate, data).model_dump(exclude_unset=True, exclude_none=True)
        self._profile = self._profile.model_copy(update=changes)
        logger.info(f"Business profile updated: {sorted(changes)}")
        return self._profile.model_copy()
