"""Direct balance adjustment by bare card number.

Top-ups and corrections arrive with only a card number, so the purse is found
by searching each purse type in turn. Card numbers are unique across every
purse, which means at most one search can match: the order below only decides
which column is queried first and has no effect on the result.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.core.errors import CardNotFound
from benefit_card.core.logging_config import get_logger, mask_card_number
from benefit_card.core.purses import CENT, PurseType
from benefit_card.crud.consumer import ConsumerCRUD
from benefit_card.db.models import Consumer

logger = get_logger(__name__)

PURSE_LOOKUP_ORDER: tuple[PurseType, ...] = (PurseType.DRUGSTORE, PurseType.FOOD, PurseType.FUEL)


@dataclass(frozen=True)
class PurseMatch:
    consumer: Consumer
    purse: PurseType


async def find_purse(db: AsyncSession, card_number: int) -> PurseMatch | None:
    for purse in PURSE_LOOKUP_ORDER:
        consumer = await ConsumerCRUD.get_by_purse(db, purse, card_number)
        if consumer is not None:
            return PurseMatch(consumer=consumer, purse=purse)
    return None


async def resolve_purse(db: AsyncSession, card_number: int) -> PurseMatch:
    match = await find_purse(db, card_number)
    if match is None:
        raise CardNotFound(card_number)
    return match


async def adjust_balance(db: AsyncSession, card_number: int, delta: Decimal) -> Consumer:
    """Add ``delta`` to whichever purse owns ``card_number``.

    No lower bound is enforced here, unlike purchase debits: this path serves
    credits and corrections and may leave a purse negative.
    """
    delta = Decimal(delta).quantize(CENT)
    match = await resolve_purse(db, card_number)
    consumer = await ConsumerCRUD.credit_purse(db, match.consumer, match.purse, delta)
    logger.info(
        "Card balance set",
        extra={
            "details": {
                "event": "card_balance",
                "extra": {
                    "consumer_id": consumer.id,
                    "purse": match.purse.value,
                    "card": mask_card_number(card_number),
                    "delta": str(delta),
                },
            }
        },
    )
    return consumer
