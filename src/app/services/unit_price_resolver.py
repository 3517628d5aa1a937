"""Unit Price Resolver

Decides the price per container for a new charge: the customer's override
when it is set and positive, otherwise the global unitPrice setting.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.setting_repository import SettingRepository
from src.domain.customer import Customer
from src.domain.errors import ConfigurationError, NotFoundError
from src.domain.money import in_money_range, to_money

logger = logging.getLogger(__name__)

DEFAULT_UNIT_PRICE_KEY = "unitPrice"


class UnitPriceResolver:

    def __init__(
        self,
        setting_repo: SettingRepository,
        customer_repo: Optional[CustomerRepository] = None,
        setting_key: str = DEFAULT_UNIT_PRICE_KEY,
    ):
        self.setting_repo = setting_repo
        self.customer_repo = customer_repo
        self.setting_key = setting_key

    async def resolve_price(self, customer_id: str) -> Decimal:
        """
        Resolve the unit price for a customer by ID

        Raises:
            NotFoundError: Customer does not exist
            ConfigurationError: No override and no valid global price
        """
        if self.customer_repo is None:
            raise RuntimeError("UnitPriceResolver was built without a customer repository")
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer not found", details={"customer_id": customer_id})
        return await self.price_for(customer)

    async def price_for(self, customer: Customer) -> Decimal:
        """
        Resolve the unit price for an already loaded customer

        Raises:
            ConfigurationError: No override and the global price is missing,
                non-numeric or not positive
        """
        if customer.custom_unit_price is not None and customer.custom_unit_price > 0:
            return to_money(customer.custom_unit_price)

        return await self.get_global_unit_price()

    async def get_global_unit_price(self) -> Decimal:
        raw = await self.setting_repo.get_value(self.setting_key)
        price = self._parse(raw)
        if price is None:
            logger.error(f"Setting '{self.setting_key}' is missing or invalid: {raw!r}")
            raise ConfigurationError(
                "Unit price setting is missing or invalid",
                details={"setting": self.setting_key, "value": raw},
            )
        return price

    @staticmethod
    def _parse(raw: Optional[str]) -> Optional[Decimal]:
        if raw is None:
            return None
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation:
            return None
        if not in_money_range(value) or value <= 0:
            return None
        price = to_money(value)
        return price if price > 0 else None
