from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.core.errors import CardNumberInUse
from benefit_card.core.logging_config import get_logger, mask_card_number
from benefit_card.core.purses import PurseType
from benefit_card.db.models import CardNumber, Consumer

logger = get_logger(__name__)


class ConsumerCRUD:
    @staticmethod
    async def list_all(db: AsyncSession) -> list[Consumer]:
        result = await db.execute(select(Consumer).order_by(Consumer.id))
        consumers = list(result.scalars().all())
        logger.debug(
            "Listed consumers",
            extra={"details": {"event": "consumer_list", "extra": {"count": len(consumers)}}},
        )
        return consumers

    @staticmethod
    async def get_by_id(db: AsyncSession, consumer_id: int) -> Consumer | None:
        result = await db.execute(select(Consumer).where(Consumer.id == consumer_id))
        consumer = result.scalar_one_or_none()
        logger.debug(
            "Fetched consumer by id",
            extra={
                "details": {
                    "event": "consumer_lookup_id",
                    "extra": {"consumer_id": consumer_id, "found": bool(consumer)},
                }
            },
        )
        return consumer

    @staticmethod
    async def get_by_purse(
        db: AsyncSession,
        purse: PurseType,
        card_number: int,
        *,
        for_update: bool = False,
    ) -> Consumer | None:
        """Find the consumer whose ``purse`` carries ``card_number``.

        Only the column of the given purse type is searched. With ``for_update``
        the row stays locked until the session commits or rolls back.
        """
        stmt = select(Consumer).where(getattr(Consumer, purse.number_column) == card_number)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await db.execute(stmt)
        consumer = result.scalar_one_or_none()
        logger.debug(
            "Fetched consumer by purse",
            extra={
                "details": {
                    "event": "consumer_lookup_purse",
                    "extra": {
                        "purse": purse.value,
                        "card": mask_card_number(card_number),
                        "found": bool(consumer),
                    },
                }
            },
        )
        return consumer

    @staticmethod
    async def card_numbers_in_use(db: AsyncSession, card_numbers: list[int]) -> set[int]:
        """Return which of ``card_numbers`` already belong to any purse of any consumer."""
        result = await db.execute(select(CardNumber.number).where(CardNumber.number.in_(card_numbers)))
        return set(result.scalars().all())

    @staticmethod
    async def create(db: AsyncSession, **kwargs) -> Consumer:
        """Insert a consumer and register its three purse numbers in one transaction.

        A number already registered for any purse, including one claimed by a
        concurrent create, rolls the whole insert back as ``CardNumberInUse``.
        """
        consumer = Consumer(**kwargs)
        numbers = consumer.card.numbers()
        db.add(consumer)
        try:
            await db.flush()
            db.add_all(
                [
                    CardNumber(number=consumer.card.number(purse), purse=purse.value, consumer_id=consumer.id)
                    for purse in PurseType
                ]
            )
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                "Consumer creation lost a card number race",
                extra={"details": {"event": "consumer_create_conflict"}},
            )
            raise CardNumberInUse(numbers) from None
        await db.refresh(consumer)
        logger.info(
            "Consumer created",
            extra={"details": {"event": "consumer_create", "extra": {"consumer_id": consumer.id}}},
        )
        return consumer

    @staticmethod
    async def update(db: AsyncSession, consumer: Consumer, **kwargs) -> Consumer:
        for field, value in kwargs.items():
            setattr(consumer, field, value)
        await db.commit()
        await db.refresh(consumer)
        logger.info(
            "Consumer updated",
            extra={
                "details": {
                    "event": "consumer_update",
                    "extra": {"consumer_id": consumer.id, "updated_fields": sorted(kwargs)},
                }
            },
        )
        return consumer

    @staticmethod
    async def debit_purse(db: AsyncSession, consumer: Consumer, purse: PurseType, amount: Decimal) -> bool:
        """Decrement a purse only while its balance still covers ``amount``.

        Does not commit. Returns False when a concurrent debit drained the
        purse between the caller's check and this write.
        """
        balance = getattr(Consumer, purse.balance_column)
        stmt = (
            update(Consumer)
            .where(Consumer.id == consumer.id, balance >= amount)
            .values({purse.balance_column: balance - amount})
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        applied = result.rowcount == 1
        if applied:
            await db.refresh(consumer)
        logger.debug(
            "Purse debit applied" if applied else "Purse debit lost to concurrent update",
            extra={
                "details": {
                    "event": "purse_debit",
                    "extra": {"consumer_id": consumer.id, "purse": purse.value, "amount": str(amount), "applied": applied},
                }
            },
        )
        return applied

    @staticmethod
    async def credit_purse(db: AsyncSession, consumer: Consumer, purse: PurseType, delta: Decimal) -> Consumer:
        balance = getattr(Consumer, purse.balance_column)
        stmt = (
            update(Consumer)
            .where(Consumer.id == consumer.id)
            .values({purse.balance_column: balance + delta})
            .execution_options(synchronize_session=False)
        )
        await db.execute(stmt)
        await db.commit()
        await db.refresh(consumer)
        logger.info(
            "Purse balance adjusted",
            extra={
                "details": {
                    "event": "purse_credit",
                    "extra": {"consumer_id": consumer.id, "purse": purse.value, "delta": str(delta)},
                }
            },
        )
        return consumer
