"""Purchase authorization.

A purchase is authorized only against the purse that matches the merchant
category: food merchants debit the food purse, drugstores the drugstore purse,
fuel stations the fuel purse. There is no fallback across purses.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.core.errors import CardNotFound, InsufficientBalance, InvalidAmount, UnknownCategory
from benefit_card.core.logging_config import get_logger, mask_card_number
from benefit_card.core.purses import CENT, MerchantCategory, PurseType
from benefit_card.crud.consumer import ConsumerCRUD
from benefit_card.crud.extract import ExtractCRUD
from benefit_card.db.models import Extract

logger = get_logger(__name__)


@dataclass(frozen=True)
class PurchaseStrategy:
    """Debits the one purse a merchant category is allowed to spend from."""

    purse: PurseType

    async def debit(self, db: AsyncSession, card_number: int, amount: Decimal) -> Decimal:
        """Debit ``amount`` from this strategy's purse on the consumer owning ``card_number``.

        Leaves the change uncommitted so the caller can persist it together with
        the extract. Returns the amount actually debited.
        """
        consumer = await ConsumerCRUD.get_by_purse(db, self.purse, card_number, for_update=True)
        if consumer is None:
            raise CardNotFound(card_number, self.purse.value)

        balance = consumer.card.balance(self.purse)
        if balance < amount:
            raise InsufficientBalance(self.purse.value, balance, amount)

        if not await ConsumerCRUD.debit_purse(db, consumer, self.purse, amount):
            raise InsufficientBalance(self.purse.value, consumer.card.balance(self.purse), amount)
        return amount


STRATEGIES: dict[MerchantCategory, PurchaseStrategy] = {
    MerchantCategory.FOOD: PurchaseStrategy(PurseType.FOOD),
    MerchantCategory.DRUGSTORE: PurchaseStrategy(PurseType.DRUGSTORE),
    MerchantCategory.FUEL: PurchaseStrategy(PurseType.FUEL),
}


def resolve_strategy(category_code: int) -> PurchaseStrategy:
    try:
        return STRATEGIES[MerchantCategory(category_code)]
    except ValueError:
        raise UnknownCategory(category_code) from None


async def buy(
    db: AsyncSession,
    *,
    category_code: int,
    establishment_name: str,
    card_number: int,
    product_description: str,
    amount: Decimal,
) -> Extract:
    """Debit the purse matching ``category_code`` and record the purchase.

    Nothing is committed unless both the debit and the extract are written.
    """
    strategy = resolve_strategy(category_code)
    amount = Decimal(amount).quantize(CENT)
    if amount <= 0:
        raise InvalidAmount(amount)

    try:
        debited = await strategy.debit(db, card_number, amount)
        extract = await ExtractCRUD.create(
            db,
            establishment_name=establishment_name,
            product_description=product_description,
            date_buy=datetime.now(timezone.utc),
            card_number=card_number,
            amount=debited,
        )
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Purchase authorized",
        extra={
            "details": {
                "event": "purchase",
                "extra": {
                    "category": MerchantCategory(category_code).name.lower(),
                    "card": mask_card_number(card_number),
                    "requested": str(amount),
                    "debited": str(debited),
                    "extract_id": extract.id,
                },
            }
        },
    )
    return extract
