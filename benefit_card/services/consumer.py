from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.core.errors import CardMutationForbidden, CardNumberInUse, ConsumerNotFound
from benefit_card.core.logging_config import get_logger
from benefit_card.core.purses import Card
from benefit_card.crud.consumer import ConsumerCRUD
from benefit_card.db.models import Consumer
from benefit_card.schemas.consumer import ConsumerCreate, ConsumerUpdate

logger = get_logger(__name__)


async def list_all_consumers(db: AsyncSession) -> list[Consumer]:
    return await ConsumerCRUD.list_all(db)


async def create_consumer(db: AsyncSession, payload: ConsumerCreate) -> Consumer:
    numbers = [payload.card.food_card_number, payload.card.fuel_card_number, payload.card.drugstore_card_number]
    if len(set(numbers)) != len(numbers):
        raise CardNumberInUse(numbers)
    taken = await ConsumerCRUD.card_numbers_in_use(db, numbers)
    if taken:
        logger.warning(
            "Consumer creation rejected",
            extra={"details": {"event": "consumer_create_rejected", "extra": {"taken": len(taken)}}},
        )
        raise CardNumberInUse(sorted(taken))

    data = payload.model_dump(exclude={"card"})
    data.update(payload.card.model_dump())
    return await ConsumerCRUD.create(db, **data)


async def update_consumer(db: AsyncSession, consumer_id: int, payload: ConsumerUpdate) -> Consumer:
    """Replace a consumer's profile fields.

    The submitted card must equal the stored one field for field, balances
    included: balances only move through purchases and balance adjustments.
    """
    consumer = await ConsumerCRUD.get_by_id(db, consumer_id)
    if consumer is None:
        raise ConsumerNotFound(consumer_id)

    changed = consumer.card.diff(Card(**payload.card.model_dump()))
    if changed:
        logger.warning(
            "Card mutation rejected",
            extra={
                "details": {
                    "event": "consumer_update_rejected",
                    "extra": {"consumer_id": consumer_id, "fields": changed},
                }
            },
        )
        raise CardMutationForbidden(consumer_id, changed)

    return await ConsumerCRUD.update(db, consumer, **payload.model_dump(exclude={"card"}))
